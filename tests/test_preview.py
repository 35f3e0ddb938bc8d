import pytest
from asciimatics.event import KeyboardEvent
from asciimatics.exceptions import StopApplication
from asciimatics.screen import Screen

from canvas import Canvas
from preview import CanvasEffect, _quit_on_q, half_block_render, rgb_to_colour_index


class FakeScreen:
    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.cells = {}

    def print_at(self, text, x, y, colour=7, bg=0):
        self.cells[(x, y)] = (text, colour, bg)


@pytest.mark.parametrize("rgb, colour", [
    ((255, 255, 255), Screen.COLOUR_WHITE),
    ((250, 10, 10), Screen.COLOUR_RED),
    ((0, 230, 0), Screen.COLOUR_GREEN),
    ((0, 0, 255), Screen.COLOUR_BLUE),
    ((255, 255, 0), Screen.COLOUR_YELLOW),
    ((255, 0, 255), Screen.COLOUR_MAGENTA),
    ((0, 255, 255), Screen.COLOUR_CYAN),
    ((120, 120, 120), Screen.COLOUR_BLACK),
])
def test_rgb_to_colour_index(rgb, colour):
    assert rgb_to_colour_index(*rgb) == colour


class TestHalfBlockRender:

    def test_two_pixel_rows_per_cell(self):
        canvas = Canvas(2, 4)
        canvas.line(0, 0, 1, 0, (255, 255, 255))
        canvas.line(0, 1, 1, 1, (255, 0, 0))
        canvas.rect_filled(0, 2, 1, 3, (0, 0, 255))
        screen = FakeScreen(10, 10)
        half_block_render(screen, canvas)
        assert screen.cells[(0, 0)] == ('▀', Screen.COLOUR_WHITE, Screen.COLOUR_RED)
        assert screen.cells[(1, 1)] == ('█', Screen.COLOUR_BLUE, Screen.COLOUR_BLUE)
        assert len(screen.cells) == 4

    def test_cropped_to_screen(self):
        canvas = Canvas(20, 20)
        screen = FakeScreen(5, 3)
        half_block_render(screen, canvas)
        assert max(x for x, _ in screen.cells) == 4
        assert max(y for _, y in screen.cells) == 2


class TestCanvasEffect:

    def test_update_draws_canvas(self):
        canvas = Canvas(3, 2)
        canvas.line(0, 0, 2, 0, (255, 0, 0))
        screen = FakeScreen(10, 10)
        effect = CanvasEffect(screen, canvas)
        assert effect.stop_frame == 0
        effect.reset()
        effect._update(0)
        assert screen.cells[(0, 0)] == ('▀', Screen.COLOUR_RED, Screen.COLOUR_BLACK)
        assert len(screen.cells) == 3

    def test_quit_key_stops_preview(self):
        with pytest.raises(StopApplication):
            _quit_on_q(KeyboardEvent(ord('q')))
        other = KeyboardEvent(ord('x'))
        assert _quit_on_q(other) is other

"""Terminal preview of a canvas using half-block characters."""
from asciimatics.effects import Effect
from asciimatics.event import KeyboardEvent
from asciimatics.exceptions import ResizeScreenError, StopApplication
from asciimatics.scene import Scene
from asciimatics.screen import Screen

from canvas import Canvas


# Simple 8-colour mapping from RGB to nearest basic terminal colour index.
def rgb_to_colour_index(r: int, g: int, b: int) -> int:
    if r > 200 and g > 200 and b > 200:
        return Screen.COLOUR_WHITE
    if r > 200 and g < 100 and b < 100:
        return Screen.COLOUR_RED
    if g > 200 and r < 100 and b < 100:
        return Screen.COLOUR_GREEN
    if b > 200 and r < 100 and g < 100:
        return Screen.COLOUR_BLUE
    if r > 200 and g > 200 and b < 100:
        return Screen.COLOUR_YELLOW
    if r > 200 and b > 200 and g < 100:
        return Screen.COLOUR_MAGENTA
    if g > 200 and b > 200 and r < 100:
        return Screen.COLOUR_CYAN
    return Screen.COLOUR_BLACK


def half_block_render(screen, canvas: Canvas) -> None:
    """Renders the canvas to the screen, two pixel rows per character row."""
    for y in range(0, min(canvas.height - 1, screen.height * 2), 2):
        row = y // 2
        for x in range(min(canvas.width, screen.width)):
            upper = canvas.pixel_at(x, y)
            lower = canvas.pixel_at(x, y + 1)

            fg = rgb_to_colour_index(upper[0], upper[1], upper[2])
            bg = rgb_to_colour_index(lower[0], lower[1], lower[2])

            # Same colour in both halves: a full block is crisper.
            if fg == bg:
                screen.print_at('█', x, row, colour=fg, bg=bg)
            else:
                screen.print_at('▀', x, row, colour=fg, bg=bg)


class CanvasEffect(Effect):
    """Asciimatics Effect that redraws a canvas every frame."""

    def __init__(self, screen: Screen, canvas: Canvas):
        super().__init__(screen)
        self._canvas = canvas

    def reset(self):
        pass

    @property
    def stop_frame(self):
        # Runs until the user quits.
        return 0

    def _update(self, frame_no):
        half_block_render(self._screen, self._canvas)


def _quit_on_q(event):
    if isinstance(event, KeyboardEvent) and event.key_code in (ord('q'), ord('Q')):
        raise StopApplication("preview closed")
    return event


def show(canvas: Canvas) -> None:
    """Shows the canvas in the terminal until 'q' is pressed."""
    def _play(screen):
        screen.play([Scene([CanvasEffect(screen, canvas)], duration=-1)],
                     stop_on_resize=True, unhandled_input=_quit_on_q)

    while True:
        try:
            Screen.wrapper(_play)
            return
        except ResizeScreenError:
            pass

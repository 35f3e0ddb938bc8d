import enum
import logging
import math
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from glyphs import FontFace, draw_string

logger = logging.getLogger(__name__)

Color = Union[Tuple[int, int, int], Tuple[int, int, int, int]]
Point = Tuple[int, int]

TRANSPARENT = (0, 0, 0, 0)


class BlendMode(enum.Enum):
    """How a written color combines with the pixel already stored."""

    ADD = 0
    MULTIPLY = 1
    NONE = 2


def deg2rad(degrees: float) -> float:
    return degrees * (math.pi / 180)


def rad2deg(radians: float) -> float:
    return radians * (180 / math.pi)


def _trunc_div(a: int, b: int) -> int:
    # Integer division rounding toward zero.
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


class Canvas:
    """
    Fixed-size RGBA pixel buffer with a blend mode and drawing operations.

    Pixels live in a numpy array of shape (height, width, 4). Every write
    forces alpha to 255; out-of-range coordinates are clipped silently.
    """

    def __init__(self, width: int, height: int, blend_mode: BlendMode = BlendMode.NONE):
        if width < 0 or height < 0:
            raise ValueError(f"canvas size must not be negative, got {width}x{height}")
        self._adopt(np.zeros((height, width, 4), dtype=np.uint8), blend_mode)

    def _adopt(self, pixels: np.ndarray, blend_mode: BlendMode) -> None:
        self.pixels = pixels
        self.height, self.width = pixels.shape[0], pixels.shape[1]
        self.pixel_count = self.width * self.height
        self.blend_mode = blend_mode
        logger.debug("canvas %dx%d (%s)", self.width, self.height, blend_mode.name)

    def __repr__(self) -> str:
        return (f"Canvas({self.width}x{self.height}, {self.pixel_count} pixels, "
                f"blend_mode={self.blend_mode.name})")

    @classmethod
    def from_buffer(cls, buffer, width: int, height: int,
                    blend_mode: BlendMode = BlendMode.NONE) -> "Canvas":
        """Wrap an existing RGBA buffer without copying it."""
        if isinstance(buffer, np.ndarray):
            if buffer.shape != (height, width, 4) or buffer.dtype != np.uint8:
                raise ValueError(
                    f"expected uint8 array of shape {(height, width, 4)}, "
                    f"got {buffer.dtype} {buffer.shape}"
                )
            pixels = buffer
        else:
            flat = np.frombuffer(buffer, dtype=np.uint8)
            if flat.size != width * height * 4:
                raise ValueError(
                    f"buffer holds {flat.size} bytes, {width}x{height} RGBA needs {width * height * 4}"
                )
            pixels = flat.reshape((height, width, 4))
        if not pixels.flags.writeable:
            raise ValueError("buffer is read-only; the canvas needs to write into it")
        canvas = cls.__new__(cls)
        canvas._adopt(pixels, blend_mode)
        return canvas

    @classmethod
    def from_image(cls, image: Image.Image, blend_mode: BlendMode = BlendMode.NONE) -> "Canvas":
        """Build a canvas from a Pillow image (converted to RGBA and copied)."""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        pixels = np.array(image, dtype=np.uint8)
        return cls.from_buffer(pixels, image.width, image.height, blend_mode)

    @classmethod
    def from_config(cls, config) -> "Canvas":
        canvas = cls(config.width, config.height, config.blend_mode)
        if config.background is not None:
            canvas.fill(config.background)
        return canvas

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels))

    # ------------------------------------------------------------------
    # Pixel access
    # ------------------------------------------------------------------

    def is_point_in_canvas(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        """Write a color at (x, y) through the blend mode."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        r, g, b = int(color[0]), int(color[1]), int(color[2])
        a = int(color[3]) if len(color) > 3 else 255
        px = self.pixels[y, x]

        if a == 255 or self.blend_mode is BlendMode.NONE:
            px[0], px[1], px[2] = r, g, b
        elif self.blend_mode is BlendMode.MULTIPLY:
            px[0] = (int(px[0]) + r * a // 255) & 0xFF
            px[1] = (int(px[1]) + g * a // 255) & 0xFF
            px[2] = (int(px[2]) + b * a // 255) & 0xFF
        else:
            px[0] = (int(px[0]) + r) & 0xFF
            px[1] = (int(px[1]) + g) & 0xFF
            px[2] = (int(px[2]) + b) & 0xFF
        px[3] = 255

    def pixel_at(self, x: int, y: int) -> Tuple[int, int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return TRANSPARENT
        r, g, b, a = self.pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def fill(self, color: Color) -> None:
        """Fills the whole canvas through set_pixel."""
        for y in range(self.height):
            for x in range(self.width):
                self.set_pixel(x, y, color)

    # ------------------------------------------------------------------
    # Lines, rectangles, paths
    # ------------------------------------------------------------------

    def line(self, x0: int, y0: int, x1: int, y1: int, color: Color) -> None:
        """Draws a line using Bresenham's algorithm."""
        dx = abs(x1 - x0)
        dy = abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        err = dx - dy
        x, y = x0, y0
        entered = False

        while True:
            if self.is_point_in_canvas(x, y):
                entered = True
                self.set_pixel(x, y, color)
            elif entered:
                # The path is monotone on both axes, so it cannot come back.
                return
            if x == x1 and y == y1:
                return
            e2 = 2 * err
            if e2 > -dy:
                err -= dy
                x += sx
            if e2 < dx:
                err += dx
                y += sy

    def rect(self, x1: int, y1: int, x2: int, y2: int, color: Color) -> None:
        self.line(x1, y1, x2, y1, color)  # top
        self.line(x2, y1, x2, y2, color)  # right
        self.line(x1, y2, x2, y2, color)  # bottom
        self.line(x1, y1, x1, y2, color)  # left

    def rect_filled(self, x1: int, y1: int, x2: int, y2: int, color: Color) -> None:
        """Fills [x1, x2] x [y1, y2], both ends inclusive."""
        for x in range(x1, x2 + 1):
            for y in range(y1, y2 + 1):
                self.set_pixel(x, y, color)

    def draw_path(self, path: Sequence[Point], color: Color) -> None:
        """Connects consecutive points with lines. The path is not closed."""
        for (xa, ya), (xb, yb) in zip(path, path[1:]):
            self.line(xa, ya, xb, yb, color)

    # ------------------------------------------------------------------
    # Circles
    # ------------------------------------------------------------------

    def circle(self, cx: int, cy: int, r: int, color: Color) -> None:
        """Draws a circle outline with the midpoint algorithm."""
        x, y, dx, dy = r - 1, 0, 1, 1
        err = dx - (r * 2)

        while x >= y:
            # Circles crossing the left or right edge are skipped, not clipped.
            if cx + x >= self.width or cx - x < 0:
                return
            self.set_pixel(cx + x, cy + y, color)
            self.set_pixel(cx + y, cy + x, color)
            self.set_pixel(cx - y, cy + x, color)
            self.set_pixel(cx - x, cy + y, color)
            self.set_pixel(cx - x, cy - y, color)
            self.set_pixel(cx - y, cy - x, color)
            self.set_pixel(cx + y, cy - x, color)
            self.set_pixel(cx + x, cy - y, color)

            if err <= 0:
                y += 1
                err += dy
                dy += 2
            if err > 0:
                x -= 1
                dx += 2
                err += dx - (r * 2)

    def circle_filled(self, cx: int, cy: int, r: int, color: Color) -> None:
        for x in range(-r, r + 1):
            height = int(math.sqrt(r * r - x * x))
            if height != r:
                top, bottom = -height, height
            else:
                # Trim the poles so the fill does not look like a plus sign.
                top, bottom = -height + 1, height - 1
            for y in range(top, bottom):
                self.set_pixel(x + cx, y + cy, color)

    def circle_outline(self, cx: int, cy: int, r: int,
                       inside_color: Color, outline_color: Color) -> None:
        self.circle_filled(cx, cy, r, inside_color)
        self.circle(cx, cy, r, outline_color)

    # ------------------------------------------------------------------
    # Triangles
    # ------------------------------------------------------------------

    def triangle(self, x1: int, y1: int, x2: int, y2: int,
                 x3: int, y3: int, color: Color) -> None:
        self.line(x1, y1, x2, y2, color)
        self.line(x2, y2, x3, y3, color)
        self.line(x3, y3, x1, y1, color)

    def triangle_filled(self, x1: int, y1: int, x2: int, y2: int,
                        x3: int, y3: int, color: Color) -> None:
        """
        Scanline fill, split into a flat-bottom and a flat-top half.

        Edge interpolation truncates toward zero, so sloped edges may be
        off by a pixel per row.
        """
        if y1 > y2:
            x1, y1, x2, y2 = x2, y2, x1, y1
        if y1 > y3:
            x1, y1, x3, y3 = x3, y3, x1, y1
        if y2 > y3:
            x2, y2, x3, y3 = x3, y3, x2, y2

        if y1 == y3:
            self._fill_span(min(x1, x2, x3), max(x1, x2, x3), y1, color)
            return

        if y2 > y1:
            for y in range(y1, y2 + 1):
                s1 = x1 + _trunc_div((x2 - x1) * (y - y1), y2 - y1)
                s2 = x1 + _trunc_div((x3 - x1) * (y - y1), y3 - y1)
                self._fill_span(s1, s2, y, color)

        if y3 > y2:
            start = y2 + 1 if y2 > y1 else y2
            for y in range(start, y3 + 1):
                s1 = x3 + _trunc_div((x2 - x3) * (y - y3), y2 - y3)
                s2 = x3 + _trunc_div((x1 - x3) * (y - y3), y1 - y3)
                self._fill_span(s1, s2, y, color)

    def _fill_span(self, s1: int, s2: int, y: int, color: Color) -> None:
        if s1 > s2:
            s1, s2 = s2, s1
        if y < 0 or y >= self.height:
            return
        for x in range(max(s1, 0), min(s2, self.width - 1) + 1):
            self.set_pixel(x, y, color)

    def triangle_outline(self, x1: int, y1: int, x2: int, y2: int, x3: int, y3: int,
                         inside_color: Color, outline_color: Color) -> None:
        self.triangle_filled(x1, y1, x2, y2, x3, y3, inside_color)
        self.triangle(x1, y1, x2, y2, x3, y3, outline_color)

    # ------------------------------------------------------------------
    # Compositing and text
    # ------------------------------------------------------------------

    def put_canvas(self, x: int, y: int, w: int, h: int, source: "Canvas") -> None:
        """
        Draws ``source`` scaled into [x, x + w) x [y, y + h).

        Uses nearest-neighbor sampling and goes through set_pixel, so this
        canvas's blend mode applies. ``source`` is only read.
        """
        if source.width == 0 or source.height == 0 or self.width == 0 or self.height == 0:
            return
        if w <= 0 or h <= 0:
            return

        scale_x = source.width / w
        scale_y = source.height / h
        logger.debug("put_canvas %dx%d -> %dx%d at (%d, %d)",
                     source.width, source.height, w, h, x, y)
        for ox in range(w):
            sx = int(ox * scale_x)
            for oy in range(h):
                sy = int(oy * scale_y)
                self.set_pixel(ox + x, oy + y, source.pixel_at(sx, sy))

    def text(self, text: str, x: int, y: int, face: Optional[FontFace] = None,
             color: Color = (255, 255, 255, 255)) -> None:
        """Stamps ``text`` with its top-left corner at (x, y), unscaled."""
        if face is None:
            face = FontFace.default()
        stamp = Canvas(len(text) * face.width, face.height, BlendMode.ADD)
        draw_string(stamp, text, (0, 0), face, color)
        logger.debug("text %r (%dx%d) at (%d, %d)", text, stamp.width, stamp.height, x, y)
        self.put_canvas(x, y, stamp.width, stamp.height, stamp)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def rotate_point(self, x: float, y: float, degrees: float) -> Point:
        """Rotates (x, y) around the canvas center, truncating to ints."""
        half_width = self.width / 2
        half_height = self.height / 2

        dx = x - half_width
        dy = y - half_height
        mag = math.sqrt(dx * dx + dy * dy)
        direction = math.atan2(dy, dx) + deg2rad(degrees)
        return int(math.cos(direction) * mag + half_width), int(math.sin(direction) * mag + half_height)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def save_to_png(self, target="canvas.png") -> None:
        """Saves the canvas as PNG to a path or a binary file object."""
        logger.debug("exporting %dx%d canvas to %r", self.width, self.height, target)
        self.to_image().save(target, format="PNG")

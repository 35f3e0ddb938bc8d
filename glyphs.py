"""Glyph rasterizer: turns strings into 1-bit coverage with Pillow fonts.

Glyphs are laid out in fixed-width cells and drawn without anti-aliasing.
"""
import logging
import math
import string
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

PilFont = Union[ImageFont.ImageFont, ImageFont.FreeTypeFont]

_SAMPLE = "".join(ch for ch in string.printable if ch.isprintable())

_default_face: Optional["FontFace"] = None
_face_cache: Dict[Tuple[str, int], "FontFace"] = {}


@dataclass(frozen=True)
class FontFace:
    """A Pillow font plus the cell size every glyph is drawn into."""

    font: PilFont
    width: int
    height: int

    @classmethod
    def from_font(cls, font: PilFont) -> "FontFace":
        width = 0
        for ch in _SAMPLE:
            right = int(math.ceil(font.getbbox(ch)[2]))
            width = max(width, int(math.ceil(font.getlength(ch))), right)
        height = int(math.ceil(font.getbbox(_SAMPLE)[3]))
        return cls(font=font, width=max(width, 1), height=max(height, 1))

    @classmethod
    def default(cls) -> "FontFace":
        """Pillow's built-in font, built once."""
        global _default_face
        if _default_face is None:
            _default_face = cls.from_font(ImageFont.load_default())
        return _default_face

    @classmethod
    def load(cls, path: str, size: int) -> "FontFace":
        """Loads a TrueType/OpenType font (cached per path and size)."""
        key = (str(path), size)
        if key not in _face_cache:
            logger.debug("loading font %s at %dpx", path, size)
            _face_cache[key] = cls.from_font(ImageFont.truetype(str(path), size))
        return _face_cache[key]

    def render(self, text: str) -> np.ndarray:
        """Returns a (height, len(text) * width) uint8 coverage mask."""
        mask = Image.new("L", (len(text) * self.width, self.height), 0)
        draw = ImageDraw.Draw(mask)
        draw.fontmode = "1"
        for i, ch in enumerate(text):
            draw.text((i * self.width, 0), ch, font=self.font, fill=255)
        return np.array(mask, dtype=np.uint8)


def draw_string(target, text: str, origin: Tuple[int, int], face: FontFace, color) -> None:
    """
    Draws ``text`` into ``target.pixels`` with its top-left cell at ``origin``.

    Coverage is composited "over" the existing pixels directly, without
    going through the target's blend mode. Parts outside the target are
    dropped.
    """
    if not text:
        return
    mask = face.render(text)
    ox, oy = origin
    h, w = mask.shape
    x0, y0 = max(ox, 0), max(oy, 0)
    x1, y1 = min(ox + w, target.width), min(oy + h, target.height)
    if x0 >= x1 or y0 >= y1:
        return

    alpha = color[3] if len(color) > 3 else 255
    cov = mask[y0 - oy:y1 - oy, x0 - ox:x1 - ox, None].astype(np.float32) / 255 * (alpha / 255)
    src = np.array([color[0], color[1], color[2], 255], dtype=np.float32)
    region = target.pixels[y0:y1, x0:x1]
    region[...] = np.rint(src * cov + region.astype(np.float32) * (1 - cov)).astype(np.uint8)

import argparse
import logging
import sys
from typing import List, Optional

from canvas import BlendMode, Canvas
from config import CanvasConfig, load_config, parse_blend_mode
from glyphs import FontFace
from preview import show

logger = logging.getLogger(__name__)

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
YELLOW = (255, 255, 0, 255)
WHITE = (255, 255, 255, 255)


def draw_demo(canvas: Canvas, face: Optional[FontFace] = None) -> None:
    """Draws one of every primitive, laid out relative to the canvas size."""
    w, h = canvas.width, canvas.height
    canvas.rect(0, 0, w - 1, h - 1, WHITE)
    canvas.line(2, 2, w - 3, h - 3, RED)
    canvas.rect_filled(w // 8, h // 8, w // 4, h // 4, BLUE)
    canvas.circle_outline(w // 2, h // 2, min(w, h) // 6, BLUE, YELLOW)
    canvas.triangle_outline(w // 8, h - h // 8, w // 4, h // 2, w // 2 - 2, h - h // 8, GREEN, WHITE)

    # A square rotated a little around the canvas center.
    corners = [(w * 5 // 8, h // 8), (w * 7 // 8, h // 8), (w * 7 // 8, h * 3 // 8), (w * 5 // 8, h * 3 // 8)]
    rotated = [canvas.rotate_point(x, y, 15) for x, y in corners]
    canvas.draw_path(rotated + rotated[:1], YELLOW)

    # The same scene shrunk into the bottom-right corner.
    thumb = Canvas(w, h, BlendMode.NONE)
    thumb.put_canvas(0, 0, w, h, canvas)
    canvas.put_canvas(w - w // 4 - 1, h - h // 4 - 1, w // 4, h // 4, thumb)

    canvas.text("canvas", 2, 2, face, WHITE)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Draw a demo scene and save it as PNG.")
    parser.add_argument("--config", help="JSON config file (default: ./canvas.json if present)")
    parser.add_argument("--width", type=int)
    parser.add_argument("--height", type=int)
    parser.add_argument("--blend", help="blend mode: add, multiply or none")
    parser.add_argument("-o", "--output", help="PNG file to write")
    parser.add_argument("--preview", action="store_true", help="show the result in the terminal")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def apply_overrides(config: CanvasConfig, args: argparse.Namespace) -> CanvasConfig:
    if args.width is not None:
        config.width = args.width
    if args.height is not None:
        config.height = args.height
    if args.blend is not None:
        config.blend_mode = parse_blend_mode(args.blend)
    if args.output is not None:
        config.output = args.output
    return config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(message)s",
    )

    try:
        config = apply_overrides(load_config(args.config), args)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    canvas = Canvas.from_config(config)
    face = FontFace.load(config.font_path, config.font_size) if config.font_path else None
    draw_demo(canvas, face)

    try:
        canvas.save_to_png(config.output)
    except OSError as exc:
        logger.error("could not write %s: %s", config.output, exc)
        return 1
    logger.info("wrote %dx%d canvas to %s", canvas.width, canvas.height, config.output)

    if args.preview:
        show(canvas)
    return 0


if __name__ == "__main__":
    sys.exit(main())

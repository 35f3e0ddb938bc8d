"""Canvas configuration loader."""
import dataclasses
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from canvas import BlendMode

logger = logging.getLogger(__name__)

_CONFIG_PATH = Path("canvas.json")


@dataclass
class CanvasConfig:
    width: int = 128
    height: int = 128
    blend_mode: BlendMode = BlendMode.NONE
    # None leaves the buffer transparent black.
    background: Optional[Tuple[int, int, int, int]] = (0, 0, 0, 255)
    font_path: Optional[str] = None
    font_size: int = 11
    output: str = "canvas.png"


def parse_blend_mode(value: Union[str, BlendMode]) -> BlendMode:
    if isinstance(value, BlendMode):
        return value
    try:
        return BlendMode[str(value).upper()]
    except KeyError:
        names = ", ".join(mode.name.lower() for mode in BlendMode)
        raise ValueError(f"unknown blend mode {value!r} (expected one of: {names})") from None


def load_config(path: Optional[Path] = None) -> CanvasConfig:
    """
    Reads a JSON config file over the defaults.

    A missing file yields the defaults; unknown keys raise ValueError.
    """
    config_path = Path(path) if path is not None else _CONFIG_PATH
    values = dataclasses.asdict(CanvasConfig())
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            user_config = json.load(f)
        unknown = set(user_config) - set(values)
        if unknown:
            raise ValueError(f"unknown config keys in {config_path}: {', '.join(sorted(unknown))}")
        values = {**values, **user_config}
        logger.debug("loaded config from %s", config_path)
    else:
        logger.debug("no config at %s, using defaults", config_path)

    values["blend_mode"] = parse_blend_mode(values["blend_mode"])
    if values["background"] is not None:
        values["background"] = tuple(values["background"])
    return CanvasConfig(**values)

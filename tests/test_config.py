import json

import pytest

from canvas import BlendMode, Canvas
from config import CanvasConfig, load_config, parse_blend_mode


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadConfig:

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.json")
        assert config == CanvasConfig()

    def test_overrides_merge_over_defaults(self, tmp_path):
        path = write_json(tmp_path / "canvas.json", {
            "width": 32,
            "blend_mode": "Add",
            "background": [1, 2, 3, 255],
        })
        config = load_config(path)
        assert config.width == 32
        assert config.height == CanvasConfig().height
        assert config.blend_mode is BlendMode.ADD
        assert config.background == (1, 2, 3, 255)

    def test_null_background(self, tmp_path):
        config = load_config(write_json(tmp_path / "c.json", {"background": None}))
        assert config.background is None

    def test_unknown_key_raises(self, tmp_path):
        with pytest.raises(ValueError, match="colour"):
            load_config(write_json(tmp_path / "c.json", {"colour": "red"}))

    def test_bad_blend_mode_raises(self, tmp_path):
        with pytest.raises(ValueError, match="blend mode"):
            load_config(write_json(tmp_path / "c.json", {"blend_mode": "screen"}))

    def test_invalid_json_propagates(self, tmp_path):
        path = tmp_path / "c.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_config(path)


@pytest.mark.parametrize("value, expected", [
    ("add", BlendMode.ADD),
    ("MULTIPLY", BlendMode.MULTIPLY),
    ("None", BlendMode.NONE),
    (BlendMode.ADD, BlendMode.ADD),
])
def test_parse_blend_mode(value, expected):
    assert parse_blend_mode(value) is expected


class TestCanvasFromConfig:

    def test_background_filled(self):
        canvas = Canvas.from_config(CanvasConfig(width=3, height=2, background=(9, 9, 9, 0)))
        assert (canvas.width, canvas.height) == (3, 2)
        assert canvas.pixel_at(2, 1) == (9, 9, 9, 255)

    def test_no_background_stays_transparent(self):
        canvas = Canvas.from_config(CanvasConfig(width=3, height=2, background=None,
                                                 blend_mode=BlendMode.MULTIPLY))
        assert canvas.blend_mode is BlendMode.MULTIPLY
        assert not canvas.pixels.any()

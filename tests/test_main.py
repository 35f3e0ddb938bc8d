from PIL import Image

import main
from canvas import Canvas


def test_demo_scene_written(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = tmp_path / "demo.png"
    assert main.main(["--width", "48", "--height", "40", "--blend", "add", "-o", str(out)]) == 0
    with Image.open(out) as image:
        assert image.size == (48, 40)


def test_config_file_is_used(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "canvas.json").write_text('{"width": 20, "height": 16, "output": "cfg.png"}')
    assert main.main([]) == 0
    with Image.open(tmp_path / "cfg.png") as image:
        assert image.size == (20, 16)


def test_bad_blend_mode_fails(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main.main(["--blend", "screen"]) == 2
    assert not (tmp_path / "canvas.png").exists()


def test_unwritable_output_fails(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main.main(["-o", str(tmp_path / "no" / "such" / "dir.png")]) == 1


def test_draw_demo_touches_pixels():
    canvas = Canvas(64, 64)
    main.draw_demo(canvas)
    assert canvas.pixels[:, :, 3].any()

"""Screenshot capture and viewport crop tests."""

import subprocess
from pathlib import Path

import pytest
from PIL import Image

from nescapture.config.settings import ViewportConfig
from nescapture.image.screenshot import ScreenshotCapture, image_dimensions, is_blank, viewport_box
from nescapture.utils.exceptions import CaptureToolError


@pytest.mark.parametrize("scale, box", [(1, (0, 22, 256, 246)), (2, (0, 22, 512, 470)), (4, (0, 22, 1024, 918))])
def test_viewport_box_scales_visible_area(scale: int, box) -> None:
    assert viewport_box(ViewportConfig(), scale) == box


def test_crop_viewport_gives_visible_resolution(client, tmp_path: Path) -> None:
    path = tmp_path / "shot.png"
    Image.new("RGB", (512, 480)).save(path)
    capture = ScreenshotCapture(client, ViewportConfig())
    assert capture.crop_viewport(path, 2) == (512, 448)
    assert image_dimensions(path) == (512, 448)


def test_crop_pads_small_capture_to_viewport(client, tmp_path: Path, caplog) -> None:
    path = tmp_path / "shot.png"
    Image.new("RGB", (256, 240)).save(path)
    capture = ScreenshotCapture(client, ViewportConfig())
    assert capture.crop_viewport(path, 2) == (512, 448)
    assert "smaller than the viewport" in caplog.text


def test_is_blank(tmp_path: Path) -> None:
    flat = tmp_path / "flat.png"
    Image.new("RGB", (8, 8), (10, 20, 30)).save(flat)
    assert is_blank(flat)

    busy = tmp_path / "busy.png"
    img = Image.new("RGB", (8, 8))
    img.putpixel((3, 3), (255, 0, 0))
    img.save(busy)
    assert not is_blank(busy)


def test_capture_window_targets_root_without_window(client, tmp_path: Path) -> None:
    capture = ScreenshotCapture(client, ViewportConfig())
    out = capture.capture_window(None, tmp_path / "root.png")
    assert client.calls[-1][:3] == ["import", "-window", "root"]
    assert image_dimensions(out) == (1024, 768)


def test_capture_window_failure_raises(client, tmp_path: Path) -> None:
    client.handlers["import"] = lambda args: subprocess.CompletedProcess(args, 1, "", "unable to open X server")
    capture = ScreenshotCapture(client, ViewportConfig())
    with pytest.raises(CaptureToolError, match="unable to open X server"):
        capture.capture_window("123", tmp_path / "out.png")


def test_capture_window_without_output_raises(client, tmp_path: Path) -> None:
    client.handlers["import"] = lambda args: subprocess.CompletedProcess(args, 0, "", "")
    capture = ScreenshotCapture(client, ViewportConfig())
    with pytest.raises(CaptureToolError, match="Empty screenshot"):
        capture.capture_window("123", tmp_path / "out.png")

"""
Shared test fixtures.
"""

import shutil
import subprocess
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from media_compressor import MediaCompressor, storage

requires_ffmpeg = pytest.mark.skipif(
    shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None,
    reason="ffmpeg/ffprobe not installed",
)


def make_image(fmt: str = "PNG", size=(640, 480), mode: str = "RGB") -> bytes:
    """Encode a solid-colour image in memory."""
    color = (200, 40, 40, 128) if mode == "RGBA" else (200, 40, 40)
    img = Image.new(mode, size, color if mode in ("RGB", "RGBA") else 128)
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def compressor() -> MediaCompressor:
    return MediaCompressor()


@pytest.fixture
def png_bytes() -> bytes:
    return make_image("PNG", (640, 480))


@pytest.fixture
def temp_dir(tmp_path: Path, monkeypatch) -> Path:
    """Route encoder temp files into an isolated directory."""
    work = tmp_path / "encoder-tmp"
    work.mkdir()
    monkeypatch.setattr(storage, "TEMP_DIR", str(work))
    return work


@pytest.fixture(scope="session")
def sample_video(tmp_path_factory) -> Path:
    """Two-second 320x240 test clip with a sine-wave audio track."""
    if shutil.which("ffmpeg") is None:
        pytest.skip("ffmpeg not installed")
    path = tmp_path_factory.mktemp("video") / "sample.mp4"
    subprocess.run(
        [
            "ffmpeg", "-y",
            "-f", "lavfi", "-i", "testsrc=duration=2:size=320x240:rate=25",
            "-f", "lavfi", "-i", "sine=frequency=440:duration=2",
            "-c:v", "libx264", "-pix_fmt", "yuv420p",
            "-c:a", "aac", "-shortest",
            str(path),
        ],
        capture_output=True,
        check=True,
    )
    return path

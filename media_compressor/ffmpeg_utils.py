"""FFmpeg and ffprobe subprocess wrappers.

Every function here is a thin, typed wrapper around a single ffmpeg or
ffprobe invocation.  All calls go through ``run_ffmpeg`` which logs the
command, checks the return code, and raises on failure.

Set ``FFMPEG_BINARY`` / ``FFPROBE_BINARY`` to use executables that are not
on the PATH.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path

from .models import EncodingConfig, MediaProbeInfo, VideoFormat

logger = logging.getLogger(__name__)

FFMPEG_BINARY = os.environ.get("FFMPEG_BINARY", "ffmpeg")
FFPROBE_BINARY = os.environ.get("FFPROBE_BINARY", "ffprobe")


# ---------------------------------------------------------------------------
# Dependency check
# ---------------------------------------------------------------------------

def check_dependencies() -> None:
    """Verify that ffmpeg and ffprobe can be executed.

    Catches a missing installation early with a clear message instead of
    an opaque ``FileNotFoundError`` from the first transcode.
    """
    for tool in (FFMPEG_BINARY, FFPROBE_BINARY):
        try:
            subprocess.run(
                [tool, "-version"],
                capture_output=True,
                check=True,
            )
        except (subprocess.CalledProcessError, FileNotFoundError) as exc:
            raise RuntimeError(
                f"{tool} not found. Install ffmpeg or point "
                f"FFMPEG_BINARY / FFPROBE_BINARY at the executables."
            ) from exc


# ---------------------------------------------------------------------------
# Core command runner
# ---------------------------------------------------------------------------

def run_ffmpeg(
    args: list[str],
    *,
    description: str = "",
) -> subprocess.CompletedProcess[str]:
    """Run an ffmpeg / ffprobe command and return the completed process.

    Arguments are passed as a list, never through a shell, so paths with
    spaces survive intact.

    Raises ``subprocess.CalledProcessError`` if the process exits non-zero.
    """
    logger.info("Running: %s  [%s]", " ".join(args), description)
    result = subprocess.run(args, capture_output=True, text=True, check=False)
    if result.returncode != 0:
        logger.error(
            "Command failed (rc=%d): %s\nstderr: %s",
            result.returncode,
            " ".join(args),
            result.stderr,
        )
        raise subprocess.CalledProcessError(
            result.returncode, args, result.stdout, result.stderr
        )
    return result


# ---------------------------------------------------------------------------
# Probing
# ---------------------------------------------------------------------------

def probe_media(src: Path) -> MediaProbeInfo:
    """Run ffprobe once and return the metadata of *src*.

    Raises ``ValueError`` when the file has no video stream.
    """
    result = run_ffmpeg(
        [
            FFPROBE_BINARY, "-v", "quiet",
            "-print_format", "json",
            "-show_format", "-show_streams",
            str(src),
        ],
        description=f"probe {src.name}",
    )
    data = json.loads(result.stdout)
    streams = data.get("streams", [])
    container = data.get("format", {})

    video_streams = [s for s in streams if s.get("codec_type") == "video"]
    if not video_streams:
        raise ValueError(f"No video stream found in {src}")
    # Pick the stream with the largest frame area.
    video = max(video_streams, key=lambda s: s.get("width", 0) * s.get("height", 0))

    # Some containers (mkv, webm) only report duration at the format level.
    duration = float(video.get("duration") or container.get("duration") or 0.0)

    audio_streams = [s for s in streams if s.get("codec_type") == "audio"]
    audio_codec = audio_streams[0].get("codec_name", "unknown") if audio_streams else "none"

    return MediaProbeInfo(
        duration=duration,
        width=int(video["width"]),
        height=int(video["height"]),
        video_codec=video.get("codec_name", "unknown"),
        audio_codec=audio_codec,
        container_format=container.get("format_name", "unknown"),
    )


# ---------------------------------------------------------------------------
# Transcoding
# ---------------------------------------------------------------------------

def build_transcode_args(
    src: Path,
    dest: Path,
    video_format: VideoFormat,
    config: EncodingConfig,
) -> list[str]:
    """Translate *config* into an ffmpeg argument list.

    Only settings that are not ``None`` produce flags; everything else is
    left to ffmpeg's per-container defaults.
    """
    video = config.video
    audio = config.audio

    args = [FFMPEG_BINARY, "-y", "-i", str(src)]

    if video.codec:
        args += ["-c:v", video.codec]
    if video.profile:
        args += ["-profile:v", video.profile]
    if video.bit_rate is not None:
        args += ["-b:v", str(video.bit_rate)]
    if video.frame_rate is not None:
        args += ["-r", str(video.frame_rate)]
    if video.size is not None:
        args += ["-s", str(video.size)]

    if audio.codec:
        args += ["-c:a", audio.codec]
    if audio.bit_rate is not None:
        args += ["-b:a", str(audio.bit_rate)]
    if audio.channels is not None:
        args += ["-ac", str(audio.channels)]
    if audio.sampling_rate is not None:
        args += ["-ar", str(audio.sampling_rate)]

    args += ["-f", video_format.muxer, str(dest)]
    return args


def transcode(
    src: Path,
    dest: Path,
    video_format: VideoFormat,
    config: EncodingConfig,
) -> Path:
    """Re-encode *src* into *dest* using *config*.

    Returns *dest* for convenience in chaining.
    """
    run_ffmpeg(
        build_transcode_args(src, dest, video_format, config),
        description=f"transcode to {video_format.extension}",
    )
    return dest

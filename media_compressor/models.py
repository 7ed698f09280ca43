"""Value types for the media compressor.

Everything the façade passes around is a frozen dataclass or a closed enum.
Per-call encoder settings are derived from the compressor defaults with
``dataclasses.replace`` instead of being mutated in place, so two calls with
different overrides never see each other's attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar


# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------

class ImageFormat(Enum):
    """Supported image output formats, valued by file extension."""

    PNG = "png"
    JPEG = "jpg"
    GIF = "gif"
    BMP = "bmp"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def pil_format(self) -> str:
        """Format name understood by ``PIL.Image.save``."""
        return self.name


class VideoFormat(Enum):
    """Supported video containers, valued by file extension."""

    MP4 = "mp4"
    MKV = "mkv"
    FLV = "flv"
    MOV = "mov"
    AVI = "avi"
    WMV = "wmv"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def muxer(self) -> str:
        """Name of the ffmpeg muxer passed to ``-f``."""
        return _MUXERS[self]


_MUXERS = {
    VideoFormat.MP4: "mp4",
    VideoFormat.MKV: "matroska",
    VideoFormat.FLV: "flv",
    VideoFormat.MOV: "mov",
    VideoFormat.AVI: "avi",
    VideoFormat.WMV: "asf",
}


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Resolution:
    """Target pixel size for an image or video."""

    width: int
    height: int

    IMAGE_DEFAULT: ClassVar[Resolution]
    VIDEO_DEFAULT: ClassVar[Resolution]
    R240P: ClassVar[Resolution]
    R360P: ClassVar[Resolution]
    R480P: ClassVar[Resolution]
    R720P: ClassVar[Resolution]
    R1080P: ClassVar[Resolution]

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"Resolution {name} must be a positive integer, got {value!r}")

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


Resolution.IMAGE_DEFAULT = Resolution(300, 300)
Resolution.VIDEO_DEFAULT = Resolution(640, 480)
Resolution.R240P = Resolution(426, 240)
Resolution.R360P = Resolution(640, 360)
Resolution.R480P = Resolution(854, 480)
Resolution.R720P = Resolution(1280, 720)
Resolution.R1080P = Resolution(1920, 1080)


# ---------------------------------------------------------------------------
# Caller overrides: None means "keep the default"
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AudioAttributes:
    """Partial audio settings supplied by a caller."""

    bit_rate: int | None = None       # bits per second, e.g. 64000
    channels: int | None = None       # 1 = mono, 2 = stereo
    sampling_rate: int | None = None  # Hz, e.g. 44100


@dataclass(frozen=True)
class VideoAttributes:
    """Partial video settings supplied by a caller."""

    bit_rate: int | None = None    # bits per second, e.g. 160000
    frame_rate: int | None = None  # frames per second
    size: Resolution | None = None


# ---------------------------------------------------------------------------
# Resolved encoder settings
# ---------------------------------------------------------------------------

DEFAULT_VIDEO_CODEC = "libx264"
DEFAULT_VIDEO_PROFILE = "baseline"
DEFAULT_AUDIO_CODEC = "aac"


@dataclass(frozen=True)
class VideoSettings:
    """Video stream settings handed to ffmpeg.

    A ``None`` field emits no flag, leaving the choice to ffmpeg.
    """

    codec: str | None = DEFAULT_VIDEO_CODEC
    profile: str | None = DEFAULT_VIDEO_PROFILE
    bit_rate: int | None = 160_000     # 160 kbit/s
    frame_rate: int | None = 15        # low frame rate keeps mobile-sized output small
    size: Resolution | None = Resolution.VIDEO_DEFAULT


@dataclass(frozen=True)
class AudioSettings:
    """Audio stream settings handed to ffmpeg."""

    codec: str | None = DEFAULT_AUDIO_CODEC
    bit_rate: int | None = 64_000      # 64 kbit/s
    channels: int | None = 2
    sampling_rate: int | None = 44_100


@dataclass(frozen=True)
class EncodingConfig:
    """Complete, immutable set of transcode settings for one call."""

    video: VideoSettings = field(default_factory=VideoSettings)
    audio: AudioSettings = field(default_factory=AudioSettings)

    @classmethod
    def library_defaults(cls) -> EncodingConfig:
        """Settings that leave every codec parameter to ffmpeg."""
        return cls(
            video=VideoSettings(codec=None, profile=None, bit_rate=None, frame_rate=None, size=None),
            audio=AudioSettings(codec=None, bit_rate=None, channels=None, sampling_rate=None),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EncodingConfig:
        """Construct from a plain mapping with optional ``video`` / ``audio`` keys.

        Missing keys keep their defaults. ``video.size`` may be a
        ``[width, height]`` pair.
        """
        video = dict(data.get("video") or {})
        audio = dict(data.get("audio") or {})
        if video.get("size") is not None and not isinstance(video["size"], Resolution):
            width, height = video["size"]
            video["size"] = Resolution(int(width), int(height))
        return cls(video=VideoSettings(**video), audio=AudioSettings(**audio))

    def with_resolution(self, resolution: Resolution | None) -> EncodingConfig:
        if resolution is None:
            return self
        return replace(self, video=replace(self.video, size=resolution))

    def with_overrides(
        self,
        audio: AudioAttributes | None = None,
        video: VideoAttributes | None = None,
    ) -> EncodingConfig:
        """Merge caller overrides onto this config, field by field.

        Supplying an override object also restores the default codec for
        that stream, so a config derived from ``library_defaults`` still
        ends up with a codec that understands the bitrate flags.
        """
        result = self
        if video is not None:
            changes: dict[str, Any] = {
                "codec": DEFAULT_VIDEO_CODEC,
                "profile": DEFAULT_VIDEO_PROFILE,
            }
            if video.bit_rate is not None:
                changes["bit_rate"] = video.bit_rate
            if video.frame_rate is not None:
                changes["frame_rate"] = video.frame_rate
            if video.size is not None:
                changes["size"] = video.size
            result = replace(result, video=replace(result.video, **changes))
        if audio is not None:
            changes = {"codec": DEFAULT_AUDIO_CODEC}
            if audio.bit_rate is not None:
                changes["bit_rate"] = audio.bit_rate
            if audio.channels is not None:
                changes["channels"] = audio.channels
            if audio.sampling_rate is not None:
                changes["sampling_rate"] = audio.sampling_rate
            result = replace(result, audio=replace(result.audio, **changes))
        return result


# ---------------------------------------------------------------------------
# ffprobe result
# ---------------------------------------------------------------------------

@dataclass
class MediaProbeInfo:
    """Parsed ffprobe metadata for an encoded video."""

    duration: float           # seconds
    width: int
    height: int
    video_codec: str          # e.g. "h264", "mpeg4"
    audio_codec: str          # e.g. "aac", "none"
    container_format: str     # e.g. "mov,mp4,m4a,3gp,3g2,mj2", "matroska,webm"

    @property
    def has_audio(self) -> bool:
        return self.audio_codec != "none"

"""Exception types raised by the media compressor.

Callers see a small, stable set of errors. Whatever Pillow, ffmpeg or the
filesystem raised is kept as ``__cause__`` for diagnostics.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    INVALID_IMAGE = "invalid_image"
    VIDEO_ENCODING = "video_encoding"
    INVALID_PATH = "invalid_path"


class MediaCompressorError(Exception):
    """Base class for all errors raised by the façade."""

    kind: ErrorKind
    default_message = "Media compression failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ImageError(MediaCompressorError):
    """The input could not be decoded or re-encoded as an image."""

    kind = ErrorKind.INVALID_IMAGE
    default_message = "ByteStream doesn't contain valid Image"


class VideoError(MediaCompressorError):
    """Transcoding failed: bad input, unsupported codec or encoder failure."""

    kind = ErrorKind.VIDEO_ENCODING
    default_message = "Error occurred while resizing the video"


class InvalidPathError(MediaCompressorError, OSError):
    """The output directory is not a usable path. Raised before any write."""

    kind = ErrorKind.INVALID_PATH
    default_message = "Invalid Path"

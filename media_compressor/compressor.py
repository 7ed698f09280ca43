"""The ``MediaCompressor`` façade.

Resizes images with Pillow and shrinks or converts videos with ffmpeg.
Every public method converts whatever the underlying library raised into
``ImageError`` or ``VideoError``, chaining the original exception.
``InvalidPathError`` is raised as-is when an output directory is unusable.

The compressor holds only immutable defaults.  Each call derives its own
``EncodingConfig`` and its own temp files, so one instance can be shared
between threads.
"""

from __future__ import annotations

import io
import logging
import os
from typing import BinaryIO

from . import image_ops
from .errors import ImageError, InvalidPathError, VideoError
from .ffmpeg_utils import check_dependencies, probe_media, transcode
from .models import (
    AudioAttributes,
    EncodingConfig,
    ImageFormat,
    MediaProbeInfo,
    Resolution,
    VideoAttributes,
    VideoFormat,
)
from .storage import (
    MediaSource,
    derive_file_name,
    read_source,
    save_bytes,
    source_name,
    temp_file_pair,
    validate_directory,
)

logger = logging.getLogger(__name__)


class MediaCompressor:
    """Resize images and reduce or convert videos.

    Parameters
    ----------
    config:
        Default transcode settings.  ``EncodingConfig()`` when omitted:
        H.264 baseline at 160 kbit/s and 15 fps, AAC stereo at 64 kbit/s.
    image_resolution:
        Size used by the image methods when the caller passes none.
    """

    def __init__(
        self,
        config: EncodingConfig | None = None,
        image_resolution: Resolution = Resolution.IMAGE_DEFAULT,
    ) -> None:
        self.config = config or EncodingConfig()
        self.image_resolution = image_resolution

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def resize_image(
        self,
        data: bytes,
        image_format: ImageFormat,
        resolution: Resolution | None = None,
    ) -> bytes:
        """Resize image *data* and re-encode it as *image_format*.

        Raises ``ImageError`` if *data* is not a decodable image.
        """
        target = resolution or self.image_resolution
        try:
            return image_ops.resize_image(data, image_format, target)
        except Exception as exc:
            logger.warning("Image resize to %s %s failed: %s", image_format.name, target, exc)
            raise ImageError() from exc

    def resize_image_file(
        self,
        source: MediaSource,
        image_format: ImageFormat,
        resolution: Resolution | None = None,
    ) -> bytes:
        """Like ``resize_image`` but reads a path or binary file object."""
        return self.resize_image(self._read(source, ImageError), image_format, resolution)

    def resize_image_stream(
        self,
        stream: BinaryIO,
        image_format: ImageFormat,
        resolution: Resolution | None = None,
    ) -> BinaryIO:
        """Stream-in / stream-out variant of ``resize_image``."""
        return io.BytesIO(self.resize_image_file(stream, image_format, resolution))

    def resize_image_to_path(
        self,
        source: MediaSource,
        image_format: ImageFormat,
        path: str | os.PathLike[str],
        resolution: Resolution | None = None,
        file_name: str | None = None,
    ) -> str:
        """Resize *source* and save it under *path*.

        The output is named after *file_name* (or the source's own name)
        with the extension of *image_format*.  Returns
        ``"File is saved in path::<absolute path>"``.
        """
        validate_directory(path)
        name = self._output_name(source, file_name, image_format.extension)
        data = self.resize_image_file(source, image_format, resolution)
        return self._save(data, path, name, ImageError)

    # ------------------------------------------------------------------
    # Videos
    # ------------------------------------------------------------------

    def reduce_video_size(
        self,
        source: MediaSource,
        video_format: VideoFormat,
        resolution: Resolution | None = None,
    ) -> bytes:
        """Re-encode *source* with the default settings at *resolution*.

        Raises ``VideoError`` if encoding fails for any reason.
        """
        config = self.config.with_resolution(resolution)
        return self._encode(self._read(source, VideoError), video_format, config)

    def reduce_video_size_to_path(
        self,
        source: MediaSource,
        video_format: VideoFormat,
        path: str | os.PathLike[str],
        resolution: Resolution | None = None,
        file_name: str | None = None,
    ) -> str:
        """``reduce_video_size`` followed by saving the result under *path*."""
        validate_directory(path)
        name = self._output_name(source, file_name, video_format.extension)
        data = self.reduce_video_size(source, video_format, resolution)
        return self._save(data, path, name, VideoError)

    def encode_video_with_attributes(
        self,
        source: MediaSource,
        video_format: VideoFormat,
        audio: AudioAttributes | None = None,
        video: VideoAttributes | None = None,
    ) -> bytes:
        """Re-encode *source*, overriding individual default settings.

        Fields left as ``None`` in *audio* / *video* keep the compressor
        defaults.
        """
        config = self.config.with_overrides(audio=audio, video=video)
        return self._encode(self._read(source, VideoError), video_format, config)

    def convert_video_format(self, source: MediaSource, video_format: VideoFormat) -> bytes:
        """Change the container of *source* without any compression tuning."""
        return self._encode(
            self._read(source, VideoError), video_format, EncodingConfig.library_defaults(),
        )

    def probe_video(self, source: MediaSource) -> MediaProbeInfo:
        """Return duration, size and codecs of an encoded video."""
        data = self._read(source, VideoError)
        with temp_file_pair("probe") as (src, _):
            try:
                src.write_bytes(data)
                return probe_media(src)
            except Exception as exc:
                logger.warning("Probe failed: %s", exc)
                raise VideoError("Could not read video metadata") from exc

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _encode(self, data: bytes, video_format: VideoFormat, config: EncodingConfig) -> bytes:
        with temp_file_pair(video_format.extension) as (src, target):
            try:
                check_dependencies()
                src.write_bytes(data)
                transcode(src, target, video_format, config)
                result = target.read_bytes()
                if not result:
                    raise ValueError("ffmpeg produced an empty file")
            except Exception as exc:
                logger.warning("Transcode to %s failed: %s", video_format.extension, exc)
                raise VideoError() from exc
        logger.info(
            "Encoded %s: %d -> %d bytes", video_format.extension, len(data), len(result),
        )
        return result

    @staticmethod
    def _read(source: MediaSource, error: type[ImageError] | type[VideoError]) -> bytes:
        try:
            return read_source(source)
        except (OSError, TypeError) as exc:
            raise error() from exc

    @staticmethod
    def _output_name(source: MediaSource, file_name: str | None, extension: str) -> str:
        name = file_name or source_name(source)
        if not name:
            raise ValueError("file_name is required when the source has no name")
        return derive_file_name(name, extension)

    @staticmethod
    def _save(
        data: bytes,
        path: str | os.PathLike[str],
        file_name: str,
        error: type[ImageError] | type[VideoError],
    ) -> str:
        try:
            return save_bytes(data, path, file_name)
        except InvalidPathError:
            raise
        except OSError as exc:
            raise error(f"Could not save {file_name}: {exc}") from exc

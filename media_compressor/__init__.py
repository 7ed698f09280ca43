"""Image resizing and video compression on top of Pillow and ffmpeg.

Quick start::

    from media_compressor import ImageFormat, MediaCompressor, Resolution, VideoFormat

    compressor = MediaCompressor()
    thumb = compressor.resize_image(png_bytes, ImageFormat.PNG, Resolution(320, 240))
    small = compressor.reduce_video_size(Path("clip.mov"), VideoFormat.MP4, Resolution.R360P)
    print(compressor.resize_image_to_path(Path("photo.bmp"), ImageFormat.JPEG, "out/"))
    # File is saved in path::/abs/out/photo.jpg
"""

from .compressor import MediaCompressor
from .errors import ErrorKind, ImageError, InvalidPathError, MediaCompressorError, VideoError
from .models import (
    AudioAttributes,
    AudioSettings,
    EncodingConfig,
    ImageFormat,
    MediaProbeInfo,
    Resolution,
    VideoAttributes,
    VideoFormat,
    VideoSettings,
)

__all__ = [
    "MediaCompressor",
    "ImageFormat",
    "VideoFormat",
    "Resolution",
    "AudioAttributes",
    "VideoAttributes",
    "AudioSettings",
    "VideoSettings",
    "EncodingConfig",
    "MediaProbeInfo",
    "ErrorKind",
    "MediaCompressorError",
    "ImageError",
    "VideoError",
    "InvalidPathError",
]

"""Filesystem helpers: reading sources, naming and saving outputs, temp files.

Temporary files live in the system temp dir unless ``MEDIA_COMPRESSOR_TMPDIR``
points somewhere else (a RAM disk, for example).
"""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from .errors import InvalidPathError

logger = logging.getLogger(__name__)

TEMP_DIR = os.environ.get("MEDIA_COMPRESSOR_TMPDIR") or None

SAVED_PREFIX = "File is saved in path::"

# Process umask, read once: os.umask can only be queried by setting it.
_UMASK = os.umask(0)
os.umask(_UMASK)

# Raw bytes, a filesystem path, or an open binary file.
MediaSource = bytes | bytearray | str | os.PathLike | BinaryIO


# ---------------------------------------------------------------------------
# Reading input
# ---------------------------------------------------------------------------

def read_source(source: MediaSource) -> bytes:
    """Return the full content of *source* as bytes."""
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, os.PathLike)):
        return Path(source).read_bytes()
    if hasattr(source, "read"):
        return source.read()
    raise TypeError(f"Unsupported media source: {type(source).__name__}")


def source_name(source: MediaSource) -> str | None:
    """Basename of *source* when it is a path or a named file object."""
    if isinstance(source, (bytes, bytearray)):
        return None
    if isinstance(source, (str, os.PathLike)):
        return Path(source).name
    name = getattr(source, "name", None)
    if isinstance(name, str) and name:
        return Path(name).name
    return None


# ---------------------------------------------------------------------------
# Output naming and saving
# ---------------------------------------------------------------------------

def derive_file_name(file_name: str, extension: str) -> str:
    """Give *file_name* the target *extension*.

    Only the last suffix is replaced, so ``clip.v2.avi`` becomes
    ``clip.v2.mp4`` rather than ``clip.mp4``.  A name without a suffix gets
    the extension appended.
    """
    path = Path(file_name)
    target = f".{extension}"
    if path.suffix.lower() == target.lower():
        return path.name
    if path.suffix:
        return path.with_suffix(target).name
    return f"{path.name}{target}"


def validate_directory(path: str | os.PathLike[str]) -> Path:
    """Check that *path* can be used as an output directory.

    Raises ``InvalidPathError`` before anything touches the disk.  A
    directory that does not exist yet is fine; it is created on save.
    """
    if not isinstance(path, (str, os.PathLike)):
        raise InvalidPathError()
    raw = os.fspath(path)
    if not raw or "\x00" in raw:
        raise InvalidPathError()
    directory = Path(raw)
    # The nearest existing ancestor must be a directory, or mkdir would fail.
    existing = directory
    while not existing.exists() and existing != existing.parent:
        existing = existing.parent
    if existing.exists() and not existing.is_dir():
        raise InvalidPathError()
    return directory


def save_bytes(data: bytes, directory: str | os.PathLike[str], file_name: str) -> str:
    """Write *data* to ``directory/file_name`` and return a confirmation string.

    The file is written to a sibling temp file first and moved into place,
    so a failed write never leaves a partial output behind.
    """
    target_dir = validate_directory(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    target = (target_dir / file_name).absolute()

    # mkstemp creates 0o600; an overwritten file keeps its mode, a new one
    # gets what a plain open() would give it.
    try:
        mode = stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        mode = 0o666 & ~_UMASK

    fd, tmp_name = tempfile.mkstemp(prefix=".partial-", dir=target_dir)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("Saved %d bytes to %s", len(data), target)
    return f"{SAVED_PREFIX}{target}"


# ---------------------------------------------------------------------------
# Temp files for the encoder
# ---------------------------------------------------------------------------

def _remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.debug("Could not remove temp file %s: %s", path, exc)


@contextlib.contextmanager
def temp_file_pair(suffix: str) -> Iterator[tuple[Path, Path]]:
    """Yield uniquely named ``(source, target)`` temp paths.

    Both files are removed when the block exits, whether it returned or
    raised.  Removal failures are logged and ignored.
    """
    created: list[Path] = []
    try:
        for prefix in ("source-", "target-"):
            with tempfile.NamedTemporaryFile(
                prefix=prefix, suffix=f".{suffix}", dir=TEMP_DIR, delete=False,
            ) as tmp:
                created.append(Path(tmp.name))
        yield created[0], created[1]
    finally:
        for path in created:
            _remove_quietly(path)

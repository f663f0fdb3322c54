"""Turn attachment sources into validated image payloads."""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from urllib.parse import unquote, urlparse

from .errors import InvalidMedia
from .types import ClipboardSource, FileSource, MediaItem, MediaSource

log = logging.getLogger(__name__)

# Image types missing from older mimetypes tables.
_EXTRA_TYPES = {
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".heif": "image/heif",
    ".avif": "image/avif",
    ".jfif": "image/jpeg",
}

_MAGIC = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
)


def guess_mimetype(path: Path) -> str | None:
    mimetype, _encoding = mimetypes.guess_type(path.name)
    if mimetype is None:
        mimetype = _EXTRA_TYPES.get(path.suffix.lower())
    return mimetype


def sniff_mimetype(data: bytes) -> str | None:
    for magic, mimetype in _MAGIC:
        if data.startswith(magic):
            return mimetype
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


def looks_like_text(data: bytes) -> bool:
    """Best effort: does this buffer hold text rather than binary data?

    Short binary payloads can decode cleanly as UTF-8, so a False negative on
    an image is possible. Clipboard content is treated as "raw image bytes or
    a path to an image file" on that basis.
    """

    if not data or b"\x00" in data:
        return False
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return all(ch.isprintable() or ch in "\r\n\t" for ch in text)


def _path_from_text(text: str) -> Path:
    text = text.strip()
    if text.startswith("file://"):
        text = unquote(urlparse(text).path)
    return Path(text).expanduser()


def _check_image(mimetype: str | None, what: str) -> str:
    if mimetype is None:
        raise InvalidMedia(f"mimetype not found for {what}. check that it has an image extension")
    if mimetype.split("/")[0] != "image":
        raise InvalidMedia(f"invalid mimetype for an image post: {mimetype} ({what})")
    return mimetype


def resolve_file(path: Path) -> MediaItem:
    path = Path(path).expanduser()
    mimetype = _check_image(guess_mimetype(path), str(path))
    try:
        data = path.read_bytes()
    except OSError as e:
        raise InvalidMedia(f"could not read {path}: {e.strerror or e}") from e
    log.debug("Resolved %s as %s (%d bytes)", path, mimetype, len(data))
    return MediaItem(data=data, mimetype=mimetype)


def resolve_clipboard(data: bytes, mimetype: str | None = None) -> MediaItem:
    if not data:
        raise InvalidMedia("the clipboard is empty")
    if looks_like_text(data):
        path = _path_from_text(data.decode("utf-8"))
        log.debug("Clipboard holds text, treating it as a path: %s", path)
        return resolve_file(path)

    mimetype = _check_image(mimetype or sniff_mimetype(data), "clipboard content")
    return MediaItem(data=data, mimetype=mimetype)


def resolve(source: MediaSource) -> MediaItem:
    match source:
        case FileSource(path=path):
            return resolve_file(path)
        case ClipboardSource(data=data, mimetype=mimetype):
            return resolve_clipboard(data, mimetype)
        case _:
            raise TypeError(f"Unsupported media source: {source!r}")

"""Read the system clipboard as raw bytes."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys

from .errors import InvalidMedia

log = logging.getLogger(__name__)


def _run(cmd: list[str]) -> bytes:
    try:
        return subprocess.run(cmd, capture_output=True, check=True).stdout
    except (OSError, subprocess.CalledProcessError) as e:
        raise InvalidMedia(f"could not read the clipboard with {cmd[0]}: {e}") from e


def _pick_image_type(types: bytes) -> str | None:
    for line in types.decode("utf-8", "replace").splitlines():
        line = line.strip()
        if line.startswith("image/"):
            return line
    return None


def read_clipboard() -> tuple[bytes, str | None]:
    """Return (data, mimetype). mimetype is None when the clipboard didn't advertise an image type."""

    if sys.platform.startswith("linux"):
        if os.getenv("WAYLAND_DISPLAY") and shutil.which("wl-paste"):
            mimetype = _pick_image_type(_run(["wl-paste", "--list-types"]))
            log.debug("wl-paste advertised image type: %s", mimetype)
            cmd = ["wl-paste", "--no-newline"]
            if mimetype:
                cmd += ["--type", mimetype]
            return _run(cmd), mimetype

        if shutil.which("xclip"):
            mimetype = _pick_image_type(_run(["xclip", "-selection", "clipboard", "-t", "TARGETS", "-o"]))
            log.debug("xclip advertised image type: %s", mimetype)
            return _run(["xclip", "-selection", "clipboard", "-t", mimetype or "UTF8_STRING", "-o"]), mimetype

        raise InvalidMedia("pasting needs wl-paste (Wayland) or xclip (X11)")

    if sys.platform == "darwin" and shutil.which("pbpaste"):
        # pbpaste only exposes text, so only copied file paths work here.
        return _run(["pbpaste"]), None

    raise InvalidMedia("pasting from the clipboard is not supported on your platform")

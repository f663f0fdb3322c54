from __future__ import annotations

import json
import os
import unicodedata
from pathlib import Path


def atomic_write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
    os.replace(tmp, path)


def normalize_handle(value: str) -> str:
    value = value.strip()
    if value.startswith("@"):
        value = value[1:]
    # If no domain is provided, assume .bsky.social
    if value and "." not in value and not value.startswith("did:"):
        value = f"{value}.bsky.social"
    return value


_ZWJ = "\u200d"


def _extends(ch: str) -> bool:
    cp = ord(ch)
    return (
        unicodedata.category(ch) in ("Mn", "Me", "Mc")
        or 0xFE00 <= cp <= 0xFE0F  # variation selectors
        or 0x1F3FB <= cp <= 0x1F3FF  # skin tones
        or 0xE0020 <= cp <= 0xE007F  # tag sequences
    )


def grapheme_length(text: str) -> int:
    """Approximate count of user-perceived characters.

    Handles combining marks, emoji modifiers, ZWJ sequences and flag pairs,
    which covers what the network's post length limit counts in practice.
    """

    count = 0
    joined = False
    regional = False
    for ch in text:
        if ch == _ZWJ:
            joined = True
            continue
        if joined or _extends(ch):
            joined = False
            continue
        if 0x1F1E6 <= ord(ch) <= 0x1F1FF:
            # Regional indicators pair up into a single flag.
            if regional:
                regional = False
                continue
            regional = True
        else:
            regional = False
        count += 1
    return count


def ask_yes_no(message: str, *, default: bool = False) -> bool:
    suffix = " [Y/n] " if default else " [y/N] "
    try:
        answer = input(message + suffix).strip().lower()
    except EOFError:
        return default
    if not answer:
        return default
    return answer in ("y", "yes")

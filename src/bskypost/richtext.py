"""Detect links, hashtags and mentions and turn them into post facets."""

from __future__ import annotations

import re
from collections.abc import Callable

from atproto import client_utils

from .utils import normalize_handle

# Bluesky clients do NOT auto-detect hashtags/mentions reliably.
# To make them clickable/searchable the record must carry facets.
URL_PATTERN = r"https?://[^\s]+"
TAG_PATTERN = r"#[A-Za-z0-9_]+"
MENTION_PATTERN = r"@[A-Za-z0-9_.-]+(?:\.[A-Za-z0-9_.-]+)*"

TOKEN_RE = re.compile(rf"({URL_PATTERN}|{TAG_PATTERN}|{MENTION_PATTERN})")


def build_facets(text: str, resolve_handle: Callable[[str], str | None] | None = None) -> list:
    """Return facets for `text`; empty when nothing needs annotating.

    Mentions are kept as plain text when `resolve_handle` is missing or
    cannot find the account.
    """

    matches = list(TOKEN_RE.finditer(text))
    if not matches:
        return []

    builder = client_utils.TextBuilder()
    last_end = 0
    for match in matches:
        if match.start() > last_end:
            builder.text(text[last_end : match.start()])

        token = match.group(1)
        if re.fullmatch(URL_PATTERN, token):
            builder.link(token, token)
        elif re.fullmatch(TAG_PATTERN, token):
            # token includes leading '#'
            builder.tag(token, token[1:])
        else:
            did = resolve_handle(normalize_handle(token)) if resolve_handle else None
            if did:
                builder.mention(token, did)
            else:
                builder.text(token)

        last_end = match.end()

    if last_end < len(text):
        builder.text(text[last_end:])

    return builder.build_facets()

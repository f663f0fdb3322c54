"""Persist the last known thread location between invocations."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .types import LocationInfo
from .utils import atomic_write_json

log = logging.getLogger(__name__)


class HistoryStore:
    """One JSON file per profile holding the location to continue from.

    File format: {"post_info": {"uri", "cid"}, "thread_root": {"uri", "cid"}}.
    `legacy` is a location carried over from an older single-account config,
    used only until the first write.
    """

    def __init__(self, path: Path, *, legacy: dict | None = None):
        self.path = path
        self.legacy = legacy

    def load(self) -> LocationInfo | None:
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
                return LocationInfo.from_dict(data)
            except (OSError, ValueError) as e:
                log.warning("Ignoring unreadable history file %s: %s", self.path, e)
                return None

        if self.legacy:
            try:
                return LocationInfo.from_dict(self.legacy)
            except ValueError as e:
                log.warning("Ignoring malformed legacy history: %s", e)
        return None

    def save(self, location: LocationInfo) -> None:
        atomic_write_json(self.path, location.to_dict())
        log.debug("Saved location %s (root %s)", location.post_info.uri, location.thread_root.uri)

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from .utils import atomic_write_json

log = logging.getLogger(__name__)

# Config schema:
# {
#   "active": "work",
#   "profiles": {
#     "work": {"handle": "...", "app_password": "...", "did": "..."},
#     "personal": {"handle": "...", "app_password": "...", "did": "..."}
#   }
# }
# Legacy single-account file: {"auth": {"handle", "did", "password"}, "history": {...}}


@dataclass(frozen=True)
class Paths:
    config_path: Path
    state_dir: Path
    legacy_path: Path | None = None

    @classmethod
    def default(cls) -> Paths:
        base = os.getenv("BSKY_CONFIG_DIR")
        root = Path(base).expanduser() if base else Path.home() / ".config" / "bskypost"
        if os.name == "nt":
            legacy = Path.home() / "AppData" / "Roaming" / ".bsky-cli.json"
        else:
            legacy = Path.home() / ".bsky-cli"
        return cls(config_path=root / "config.json", state_dir=root / "history", legacy_path=legacy)

    def history_path(self, profile: str) -> Path:
        return self.state_dir / f"{profile}.json"


def load_config(paths: Paths) -> dict:
    source = paths.config_path
    if not source.exists() and paths.legacy_path is not None and paths.legacy_path.exists():
        source = paths.legacy_path

    if source.exists():
        try:
            cfg = json.loads(source.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("Ignoring unreadable config %s: %s", source, e)
            return {"profiles": {}, "active": None}
    else:
        cfg = {}

    if not isinstance(cfg, dict):
        cfg = {}

    # Migrate the legacy single-account layout in-memory.
    if "profiles" not in cfg:
        profiles = {}
        active = None
        auth = cfg.get("auth") or {}
        if auth.get("password") and (auth.get("handle") or auth.get("did")):
            profiles["default"] = {
                "handle": auth.get("handle") or auth.get("did"),
                "app_password": auth.get("password"),
                "did": auth.get("did"),
            }
            if cfg.get("history"):
                profiles["default"]["history"] = cfg["history"]
            active = "default"
            log.debug("Migrated legacy single-account config")
        cfg = {"profiles": profiles, "active": active}

    cfg.setdefault("profiles", {})
    cfg.setdefault("active", None)
    return cfg


def save_config(paths: Paths, config: dict) -> None:
    # A migrated legacy location belongs in the history file, not in config.json.
    for name, p in (config.get("profiles") or {}).items():
        legacy = p.pop("history", None)
        if legacy and not paths.history_path(name).exists():
            atomic_write_json(paths.history_path(name), legacy)
            log.debug("Moved legacy history of profile %s to %s", name, paths.history_path(name))
    atomic_write_json(paths.config_path, config)


def resolve_profile(cfg: dict, *, profile: str | None) -> tuple[str, dict]:
    profiles = cfg.get("profiles") or {}

    # priority: explicit profile arg > env var > active
    profile_name = profile or os.getenv("BSKY_PROFILE") or cfg.get("active")

    if not profile_name:
        raise ValueError("No profile selected")

    if profile_name not in profiles:
        raise ValueError(f"Unknown profile: {profile_name}")

    return profile_name, profiles[profile_name]


def require_profile(paths: Paths, *, profile: str | None) -> tuple[str, dict]:
    cfg = load_config(paths)
    try:
        profile_name, p = resolve_profile(cfg, profile=profile)
    except ValueError:
        print(
            "Not logged in. Create a profile first:\n"
            "  bskypost login --name <profile> --handle <handle>\n"
            "Then select it:\n"
            "  bskypost use <profile>\n"
            "Or run commands with:\n"
            "  bskypost --profile <profile> <command>",
            file=sys.stderr,
        )
        raise SystemExit(1)

    if not p.get("handle") or not p.get("app_password"):
        print(
            f"Profile '{profile_name}' is missing credentials. Re-run login for that profile.",
            file=sys.stderr,
        )
        raise SystemExit(1)

    return profile_name, p


def service_url() -> str | None:
    return os.getenv("BSKY_SERVICE") or None

from __future__ import annotations

import getpass
import sys

from ..config import load_config, resolve_profile, save_config, service_url
from ..session import Session
from ..utils import ask_yes_no, normalize_handle

LOGIN_ATTEMPTS = 3


def prompt_login(
    handle: str,
    *,
    attempts: int = LOGIN_ATTEMPTS,
    ask_password=getpass.getpass,
    confirm=ask_yes_no,
) -> tuple[Session, str] | None:
    """Ask for an app password until login works, the user gives up, or attempts run out."""

    for attempt in range(1, attempts + 1):
        password = ask_password(f"App password for {handle}: ")
        print("connecting to bluesky")
        try:
            session = Session.login(handle, password, base_url=service_url())
            print("credentials confirmed")
            return session, password
        except Exception as e:
            print(f"Login failed: {e}", file=sys.stderr)
            if attempt == attempts or not confirm("try again?"):
                return None
    return None


def cmd_login(args) -> None:
    paths = args.paths
    cfg = load_config(paths)
    profiles = cfg.get("profiles") or {}

    handle = normalize_handle(args.handle)
    name = (args.name or handle).strip()

    if not name:
        print("Missing profile name. Use: bskypost login --name <profile> ...", file=sys.stderr)
        raise SystemExit(1)

    if args.password:
        try:
            session = Session.login(handle, args.password, base_url=service_url())
        except Exception as e:
            print(f"Login failed: {e}", file=sys.stderr)
            raise SystemExit(1)
        password = args.password
    else:
        result = prompt_login(handle)
        if result is None:
            print("Login cancelled.", file=sys.stderr)
            raise SystemExit(1)
        session, password = result

    profiles[name] = {
        "handle": session.handle,
        "app_password": password,
        "did": session.did,
    }
    cfg["profiles"] = profiles

    if args.set_active or not cfg.get("active"):
        cfg["active"] = name

    save_config(paths, cfg)
    active_note = " (active)" if cfg.get("active") == name else ""
    print(f"Logged in profile '{name}' as {session.handle} ({session.did}){active_note}")


def cmd_whoami(args) -> None:
    cfg = load_config(args.paths)
    try:
        profile_name, p = resolve_profile(cfg, profile=args.profile)
    except ValueError:
        print("Not logged in")
        return

    print(f"Profile: {profile_name}")
    print(f"Handle: {p.get('handle')}")
    print(f"DID: {p.get('did') or '(unknown)'}")


def cmd_accounts(args) -> None:
    cfg = load_config(args.paths)
    profiles = cfg.get("profiles") or {}
    active = cfg.get("active")

    if not profiles:
        print("No profiles configured. Use: bskypost login --name <profile> --handle <handle>")
        return

    for name, p in profiles.items():
        star = "*" if name == active else " "
        handle = p.get("handle") or "(missing handle)"
        did = p.get("did") or "(no did)"
        print(f"{star} {name}: {handle}  {did}")


def cmd_use(args) -> None:
    paths = args.paths
    cfg = load_config(paths)
    profiles = cfg.get("profiles") or {}
    if args.name not in profiles:
        print(f"Unknown profile: {args.name}", file=sys.stderr)
        raise SystemExit(1)
    if cfg.get("active") == args.name:
        print(f"Profile '{args.name}' is already active")
        return
    cfg["active"] = args.name
    save_config(paths, cfg)
    print(f"Active profile set to '{args.name}'")


def cmd_logout(args) -> None:
    paths = args.paths
    cfg = load_config(paths)
    profiles = cfg.get("profiles") or {}
    if args.name not in profiles:
        print(f"Unknown profile: {args.name}", file=sys.stderr)
        raise SystemExit(1)

    del profiles[args.name]
    cfg["profiles"] = profiles

    if cfg.get("active") == args.name:
        cfg["active"] = next(iter(profiles.keys()), None)

    save_config(paths, cfg)
    paths.history_path(args.name).unlink(missing_ok=True)
    print(f"Removed profile '{args.name}'")

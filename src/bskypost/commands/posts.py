from __future__ import annotations

import logging
import sys
from pathlib import Path

from ..clipboard import read_clipboard
from ..composer import compose_and_submit
from ..config import require_profile, service_url
from ..errors import PostError
from ..history import HistoryStore
from ..media import resolve
from ..richtext import build_facets
from ..session import Session, post_url
from ..thread import next_location
from ..types import (
    MAX_IMAGES,
    ClipboardSource,
    CompositionRequest,
    FileSource,
    MediaItem,
    NoParent,
    Quote,
    Reply,
)
from ..utils import ask_yes_no
from .postrefs import resolve_location, resolve_post_ref

log = logging.getLogger(__name__)

NO_HISTORY = "you're trying to quote/reply to the latest post but you haven't made a post yet"


def _fail(action: str, err: Exception | str) -> None:
    print(f"{action} failed: {err}", file=sys.stderr)
    raise SystemExit(1)


def _read_text(args, handle: str) -> str:
    if args.text is not None:
        return args.text
    try:
        return input(f"{handle}> ")
    except EOFError:
        return ""


def collect_media(paths: list[str], *, paste: bool, confirm=ask_yes_no, clipboard=read_clipboard) -> list[MediaItem]:
    """Resolve --image files, then clipboard images until the user stops or the cap is hit."""

    if len(paths) > MAX_IMAGES:
        raise PostError(f"at most {MAX_IMAGES} images can be attached, got {len(paths)}")

    media = [resolve(FileSource(Path(p))) for p in paths]
    if not paste:
        return media

    while len(media) < MAX_IMAGES:
        data, mimetype = clipboard()
        media.append(resolve(ClipboardSource(data=data, mimetype=mimetype)))
        print(f"attached image {len(media)} from the clipboard")
        if len(media) >= MAX_IMAGES or not confirm("Do you want to add another?"):
            break
    return media


_MODES = {
    "post": ("Post", "Posted"),
    "append": ("Reply", "Replied"),
    "quote": ("Quote", "Quoted"),
}


def _reply_context(session, mode: str, args, history):
    """Returns (reply context, public url of a quoted remote post)."""

    if mode == "append":
        to = getattr(args, "to", None)
        return Reply(target=resolve_location(session, to) if to else history), None
    if mode == "quote":
        remote = getattr(args, "post", None)
        if remote:
            ref, _post, public_url = resolve_post_ref(session, remote)
            return Quote(target=ref), public_url
        return Quote(target=history.post_info), None
    return NoParent(), None


def run_compose(args, mode: str) -> None:
    action, verb = _MODES[mode]
    paths = args.paths
    profile_name, p = require_profile(paths, profile=args.profile)
    store = HistoryStore(paths.history_path(profile_name), legacy=p.get("history"))

    history = store.load()
    needs_history = (mode == "append" and not getattr(args, "to", None)) or (
        mode == "quote" and not getattr(args, "post", None)
    )
    if needs_history and history is None:
        _fail(action, NO_HISTORY)

    text = _read_text(args, p["handle"])
    # prevent the user from uploading blank strings
    if not text.strip():
        print("Nothing to post.")
        return

    try:
        media = collect_media(args.image or [], paste=args.paste)
    except PostError as e:
        _fail(action, e)

    try:
        session = Session.login(p["handle"], p["app_password"], base_url=service_url())
    except Exception as e:
        _fail("Login", e)

    try:
        reply, public_url = _reply_context(session, mode, args, history)
    except Exception as e:
        _fail(action, e)
    log.debug("Composing %s with %d attachment(s), context %s", mode, len(media), type(reply).__name__)

    request = CompositionRequest(
        text=text,
        media=media,
        reply=reply,
        facets=build_facets(text, session.resolve_handle),
    )
    try:
        result = compose_and_submit(request, session.submit_record, session.upload_blob)
    except PostError as e:
        _fail(action, e)

    store.save(next_location(result, reply))
    print(f"{verb}: {post_url(session.handle, result.uri)}")
    if public_url:
        print(f"  ↳ original: {public_url}")


def cmd_post(args) -> None:
    run_compose(args, "post")


def cmd_append(args) -> None:
    run_compose(args, "append")


def cmd_quote(args) -> None:
    run_compose(args, "quote")


def cmd_last(args) -> None:
    profile_name, p = require_profile(args.paths, profile=args.profile)
    location = HistoryStore(args.paths.history_path(profile_name), legacy=p.get("history")).load()
    if location is None:
        print("No posts recorded yet.")
        return
    print(f"Last post: {location.post_info.uri} ({location.post_info.cid})")
    print(f"Thread root: {location.thread_root.uri} ({location.thread_root.cid})")

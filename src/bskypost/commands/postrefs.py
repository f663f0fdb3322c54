from __future__ import annotations

import re

from ..types import LocationInfo, PostRef


def resolve_post_ref(session, value: str) -> tuple[PostRef, object, str | None]:
    """Resolve a post reference.

    Returns: (ref, post view, public_url)

    Accepts:
    - bsky.app post URL
    - at://... uri
    """

    value = value.strip()

    # URL form: https://bsky.app/profile/<handle>/post/<rkey>
    m = re.search(r"bsky\.app/profile/([^/]+)/post/([^/?#]+)", value)
    if m:
        handle = m.group(1)
        rkey = m.group(2)
        # Resolve handle -> DID
        did = handle if handle.startswith("did:") else session.resolve_handle(handle)
        if not did:
            raise RuntimeError(f"Could not resolve handle: {handle}")
        post = session.get_post(f"at://{did}/app.bsky.feed.post/{rkey}")
        if post is None:
            raise RuntimeError(
                "Could not resolve post. Tip: paste the ORIGINAL post URL (author handle + post id)."
            )
        public_url = f"https://bsky.app/profile/{handle}/post/{rkey}"
        return PostRef(uri=post.uri, cid=post.cid), post, public_url

    if value.startswith("at://"):
        post = session.get_post(value)
        if post is None:
            raise RuntimeError("Could not resolve post")
        return PostRef(uri=post.uri, cid=post.cid), post, None

    raise RuntimeError("Unsupported post reference (use a bsky.app post URL or an at:// URI)")


def resolve_location(session, value: str) -> LocationInfo:
    """Location for replying to an arbitrary post, keeping its thread root."""

    ref, post, _public_url = resolve_post_ref(session, value)
    reply = getattr(getattr(post, "record", None), "reply", None)
    root = getattr(reply, "root", None)
    if root is None:
        return LocationInfo.start(ref)
    return LocationInfo(post_info=ref, thread_root=PostRef(uri=root.uri, cid=root.cid))

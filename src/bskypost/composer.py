"""Assemble, validate and submit post records."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

import pydantic
from atproto import models

from .embed import Uploader, build_embed, strong_ref
from .errors import RecordInvalid
from .types import MAX_IMAGES, CompositionRequest, PostRef, Reply
from .utils import grapheme_length

log = logging.getLogger(__name__)

MAX_TEXT_GRAPHEMES = 300

Clock = Callable[[], datetime]
Submitter = Callable[[object], PostRef]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def timestamp(clock: Clock | None = None) -> str:
    now = (clock or _utcnow)()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _check_text(text) -> None:
    if not isinstance(text, str):
        raise RecordInvalid("text is required")
    length = grapheme_length(text)
    if length > MAX_TEXT_GRAPHEMES:
        raise RecordInvalid(f"text is {length} characters long, the limit is {MAX_TEXT_GRAPHEMES}")


def build_record(request: CompositionRequest, upload: Uploader, *, clock: Clock | None = None) -> dict:
    """Collect the record fields for a request. Uploads any attached media."""

    fields: dict = {"text": request.text, "created_at": timestamp(clock)}

    if isinstance(request.reply, Reply):
        target = request.reply.target
        fields["reply"] = models.AppBskyFeedPost.ReplyRef(
            root=strong_ref(target.thread_root),
            parent=strong_ref(target.post_info),
        )

    # Everything checkable locally goes before the first upload.
    _check_text(request.text)
    if len(request.media) > MAX_IMAGES:
        raise RecordInvalid(f"at most {MAX_IMAGES} images can be attached, got {len(request.media)}")

    embed = build_embed(request.media, request.reply, upload)
    if embed is not None:
        fields["embed"] = embed

    if request.facets:
        fields["facets"] = list(request.facets)

    return fields


def validate_record(fields: dict):
    """Return the schema-checked post record, or raise RecordInvalid."""

    _check_text(fields.get("text"))

    try:
        return models.AppBskyFeedPost.Record(**fields)
    except pydantic.ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'record'}: {err['msg']}" for err in e.errors()
        )
        raise RecordInvalid(details) from e


def compose_and_submit(
    request: CompositionRequest,
    submit: Submitter,
    upload: Uploader,
    *,
    clock: Clock | None = None,
) -> PostRef:
    record = validate_record(build_record(request, upload, clock=clock))
    log.debug("Submitting post record (reply=%s, embed=%s)", record.reply is not None, getattr(record.embed, "py_type", None))
    return submit(record)

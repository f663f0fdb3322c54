"""Build the post embed (images, quoted record, or both) for a composition."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from atproto import models

from .errors import InvalidMedia, UploadFailed
from .types import MediaItem, NoParent, PostRef, Quote, Reply, ReplyContext

log = logging.getLogger(__name__)

Uploader = Callable[[MediaItem], object]


def strong_ref(ref: PostRef):
    return models.ComAtprotoRepoStrongRef.Main(uri=ref.uri, cid=ref.cid)


def quote_embed(quoting: PostRef):
    return models.AppBskyEmbedRecord.Main(record=strong_ref(quoting))


def image_embed(media: Sequence[MediaItem], upload: Uploader):
    """Upload each item in order and wrap the blobs in an images embed."""

    # Reject the whole batch before anything reaches the network.
    for idx, item in enumerate(media, start=1):
        if not item.is_image:
            raise InvalidMedia(f"invalid mimetype for an image post: {item.mimetype} (attachment {idx})")

    images = []
    for idx, item in enumerate(media, start=1):
        try:
            blob = upload(item)
        except UploadFailed:
            raise
        except Exception as e:
            raise UploadFailed(e, mimetype=item.mimetype) from e
        log.debug("Uploaded attachment %d/%d (%s)", idx, len(media), item.mimetype)
        images.append(models.AppBskyEmbedImages.Image(image=blob, alt=""))

    return models.AppBskyEmbedImages.Main(images=images)


def build_embed(media: Sequence[MediaItem], reply: ReplyContext, upload: Uploader):
    """Return the embed for this combination of media and reply context, or None."""

    has_media = len(media) > 0

    match reply:
        case Quote(target=target) if has_media:
            return models.AppBskyEmbedRecordWithMedia.Main(
                record=quote_embed(target),
                media=image_embed(media, upload),
            )
        case Quote(target=target):
            return quote_embed(target)
        case Reply() | NoParent() if has_media:
            return image_embed(media, upload)
        case Reply() | NoParent():
            return None
        case _:
            raise TypeError(f"Unsupported reply context: {reply!r}")

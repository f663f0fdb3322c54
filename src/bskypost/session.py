from __future__ import annotations

import logging

from atproto import Client

from .errors import SubmitFailed
from .types import MediaItem, PostRef

log = logging.getLogger(__name__)


class Session:
    """An authenticated connection able to upload blobs and create posts."""

    def __init__(self, client):
        self.client = client

    @classmethod
    def login(cls, handle: str, password: str, *, base_url: str | None = None) -> Session:
        client = Client(base_url=base_url) if base_url else Client()
        client.login(handle, password)
        log.debug("Logged in as %s (%s)", client.me.handle, client.me.did)
        return cls(client)

    @property
    def handle(self) -> str:
        return self.client.me.handle

    @property
    def did(self) -> str:
        return self.client.me.did

    def upload_blob(self, item: MediaItem):
        # The PDS sniffs the content type itself.
        response = self.client.upload_blob(item.data)
        return response.blob

    def submit_record(self, record) -> PostRef:
        try:
            response = self.client.app.bsky.feed.post.create(self.did, record)
        except Exception as e:
            raise SubmitFailed(e) from e
        log.debug("Created %s", response.uri)
        return PostRef(uri=response.uri, cid=response.cid)

    def resolve_handle(self, handle: str) -> str | None:
        try:
            return self.client.resolve_handle(handle).did
        except Exception as e:
            log.debug("Could not resolve %s: %s", handle, e)
            return None

    def get_post(self, uri: str):
        posts = self.client.get_posts([uri]).posts
        return posts[0] if posts else None


def post_url(handle: str, uri: str) -> str:
    post_id = uri.rstrip("/").split("/")[-1]
    return f"https://bsky.app/profile/{handle}/post/{post_id}"

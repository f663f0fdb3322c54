"""Shared pytest fixtures.

The network session is replaced by FakeSession, which records every upload and
submitted record and hands out predictable post references.
"""

import json

import pytest
from atproto_client.models.blob_ref import BlobRef

from bskypost.config import Paths
from bskypost.types import LocationInfo, MediaItem, PostRef

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def make_blob(n, mimetype="image/png"):
    return BlobRef(mime_type=mimetype, size=16, ref=f"bafkreiblob{n}")


class FakeSession:
    def __init__(self, results=None, handle="me.bsky.social"):
        self.handle = handle
        self.did = "did:plc:me"
        self.results = list(results or [])
        self.uploads = []
        self.records = []
        self.posts = {}
        self.handles = {}

    def upload_blob(self, item):
        self.uploads.append(item)
        return make_blob(len(self.uploads), item.mimetype)

    def submit_record(self, record):
        self.records.append(record)
        if self.results:
            return self.results.pop(0)
        n = len(self.records)
        return PostRef(uri=f"at://did:plc:me/app.bsky.feed.post/{n}", cid=f"cid{n}")

    def resolve_handle(self, handle):
        return self.handles.get(handle)

    def get_post(self, uri):
        return self.posts.get(uri)


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def session_factory():
    return FakeSession


@pytest.fixture
def blob_factory():
    return make_blob


@pytest.fixture
def png_item():
    return MediaItem(data=PNG_BYTES, mimetype="image/png")


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "picture.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def post_a():
    return PostRef(uri="at://x/1", cid="c1")


@pytest.fixture
def post_b():
    return PostRef(uri="at://x/2", cid="c2")


@pytest.fixture
def location_a(post_a):
    return LocationInfo(post_info=post_a, thread_root=post_a)


@pytest.fixture
def paths(tmp_path, monkeypatch):
    """Isolated config/history locations with one active profile."""

    monkeypatch.delenv("BSKY_PROFILE", raising=False)
    monkeypatch.delenv("BSKY_SERVICE", raising=False)
    p = Paths(config_path=tmp_path / "cfg" / "config.json", state_dir=tmp_path / "cfg" / "history")
    p.config_path.parent.mkdir(parents=True)
    p.config_path.write_text(
        json.dumps(
            {
                "active": "me",
                "profiles": {
                    "me": {"handle": "me.bsky.social", "app_password": "xxxx-xxxx", "did": "did:plc:me"},
                },
            }
        )
    )
    return p

"""Value types shared by the composer, the thread tracker and the stores."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

# Policy cap carried by the client, the protocol schema also rejects more.
MAX_IMAGES = 4


@dataclass(frozen=True)
class PostRef:
    """Content-addressed pointer to a created post."""

    uri: str
    cid: str

    def to_dict(self) -> dict:
        return {"uri": self.uri, "cid": self.cid}

    @classmethod
    def from_dict(cls, data: dict) -> PostRef:
        uri = data.get("uri")
        cid = data.get("cid")
        if not isinstance(uri, str) or not isinstance(cid, str):
            raise ValueError(f"Malformed post reference: {data!r}")
        return cls(uri=uri, cid=cid)


@dataclass(frozen=True)
class LocationInfo:
    """The post to continue from, paired with the root of its thread."""

    post_info: PostRef
    thread_root: PostRef

    @classmethod
    def start(cls, post: PostRef) -> LocationInfo:
        return cls(post_info=post, thread_root=post)

    def to_dict(self) -> dict:
        return {"post_info": self.post_info.to_dict(), "thread_root": self.thread_root.to_dict()}

    @classmethod
    def from_dict(cls, data: dict) -> LocationInfo:
        if not isinstance(data, dict):
            raise ValueError(f"Malformed location: {data!r}")
        return cls(
            post_info=PostRef.from_dict(data.get("post_info") or {}),
            thread_root=PostRef.from_dict(data.get("thread_root") or {}),
        )


@dataclass(frozen=True)
class MediaItem:
    data: bytes = field(repr=False)
    mimetype: str

    @property
    def is_image(self) -> bool:
        return self.mimetype.split("/")[0] == "image"


# Attachment sources


@dataclass(frozen=True)
class FileSource:
    path: Path


@dataclass(frozen=True)
class ClipboardSource:
    data: bytes = field(repr=False)
    mimetype: str | None = None


MediaSource = Union[FileSource, ClipboardSource]


# Reply contexts: exactly one is active per composition.


@dataclass(frozen=True)
class NoParent:
    pass


@dataclass(frozen=True)
class Reply:
    target: LocationInfo


@dataclass(frozen=True)
class Quote:
    target: PostRef


ReplyContext = Union[NoParent, Reply, Quote]


@dataclass
class CompositionRequest:
    text: str
    media: list[MediaItem] = field(default_factory=list)
    reply: ReplyContext = field(default_factory=NoParent)
    facets: list | None = None

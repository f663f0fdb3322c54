from __future__ import annotations

from .types import LocationInfo, NoParent, PostRef, Quote, Reply, ReplyContext


def next_location(result: PostRef, reply: ReplyContext) -> LocationInfo:
    """Location to persist after `result` was created with `reply`.

    Replies keep the thread root of the post they continue. New posts and
    quotes start a chain of their own.
    """

    match reply:
        case Reply(target=target):
            return LocationInfo(post_info=result, thread_root=target.thread_root)
        case NoParent() | Quote():
            return LocationInfo.start(result)
        case _:
            raise TypeError(f"Unsupported reply context: {reply!r}")

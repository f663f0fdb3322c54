"""Tests for the per-profile location file"""

import json

from bskypost.history import HistoryStore
from bskypost.types import LocationInfo, PostRef


class TestHistoryStore:
    def test_missing_file_means_no_history(self, tmp_path):
        assert HistoryStore(tmp_path / "me.json").load() is None

    def test_save_writes_the_compatible_format(self, tmp_path, post_a, post_b):
        path = tmp_path / "history" / "me.json"
        HistoryStore(path).save(LocationInfo(post_info=post_b, thread_root=post_a))

        assert json.loads(path.read_text()) == {
            "post_info": {"uri": "at://x/2", "cid": "c2"},
            "thread_root": {"uri": "at://x/1", "cid": "c1"},
        }

    def test_save_replaces_previous_location(self, tmp_path, location_a, post_b):
        store = HistoryStore(tmp_path / "me.json")
        store.save(location_a)
        store.save(LocationInfo.start(post_b))
        assert store.load() == LocationInfo(post_info=post_b, thread_root=post_b)
        assert not (tmp_path / "me.json.tmp").exists()

    def test_reads_files_written_by_older_versions(self, tmp_path):
        path = tmp_path / "me.json"
        path.write_text(
            '{"post_info":{"uri":"at://did:plc:a/app.bsky.feed.post/3k","cid":"bafy1"},'
            '"thread_root":{"uri":"at://did:plc:a/app.bsky.feed.post/3j","cid":"bafy0"}}'
        )
        loc = HistoryStore(path).load()
        assert loc.post_info == PostRef(uri="at://did:plc:a/app.bsky.feed.post/3k", cid="bafy1")
        assert loc.thread_root.cid == "bafy0"

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "me.json"
        path.write_text("{not json")
        assert HistoryStore(path).load() is None

    def test_incomplete_file_is_ignored(self, tmp_path):
        path = tmp_path / "me.json"
        path.write_text('{"post_info": {"uri": "at://x/1"}}')
        assert HistoryStore(path).load() is None

    def test_legacy_location_is_used_until_first_save(self, tmp_path, location_a, post_b):
        store = HistoryStore(tmp_path / "me.json", legacy=location_a.to_dict())
        assert store.load() == location_a

        store.save(LocationInfo.start(post_b))
        assert store.load().post_info == post_b

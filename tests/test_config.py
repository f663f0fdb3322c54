"""Tests for profile configuration"""

import json

import pytest

from bskypost.config import Paths, load_config, require_profile, resolve_profile, save_config


class TestPaths:
    def test_default_honours_config_dir(self, tmp_path, monkeypatch):
        monkeypatch.setenv("BSKY_CONFIG_DIR", str(tmp_path / "conf"))
        paths = Paths.default()
        assert paths.config_path == tmp_path / "conf" / "config.json"
        assert paths.history_path("work") == tmp_path / "conf" / "history" / "work.json"


class TestLoadConfig:
    def test_missing_file(self, tmp_path):
        cfg = load_config(Paths(config_path=tmp_path / "none.json", state_dir=tmp_path))
        assert cfg == {"profiles": {}, "active": None}

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[[[")
        assert load_config(Paths(config_path=path, state_dir=tmp_path)) == {"profiles": {}, "active": None}

    def test_round_trip(self, paths):
        cfg = load_config(paths)
        cfg["profiles"]["alt"] = {"handle": "alt.bsky.social", "app_password": "p", "did": "did:plc:alt"}
        save_config(paths, cfg)
        assert set(load_config(paths)["profiles"]) == {"me", "alt"}

    def test_legacy_single_account_file_is_migrated(self, tmp_path):
        legacy = tmp_path / ".bsky-cli"
        history = {"post_info": {"uri": "at://x/1", "cid": "c1"}, "thread_root": {"uri": "at://x/1", "cid": "c1"}}
        legacy.write_text(
            json.dumps({"auth": {"handle": "old.bsky.social", "did": "did:plc:old", "password": "pw"}, "history": history})
        )
        paths = Paths(config_path=tmp_path / "new" / "config.json", state_dir=tmp_path / "h", legacy_path=legacy)

        cfg = load_config(paths)

        assert cfg["active"] == "default"
        profile = cfg["profiles"]["default"]
        assert profile["handle"] == "old.bsky.social"
        assert profile["app_password"] == "pw"
        assert profile["history"] == history

    def test_new_config_wins_over_legacy(self, paths, tmp_path):
        legacy = tmp_path / ".bsky-cli"
        legacy.write_text(json.dumps({"auth": {"handle": "old", "did": "d", "password": "pw"}}))
        cfg = load_config(Paths(config_path=paths.config_path, state_dir=paths.state_dir, legacy_path=legacy))
        assert cfg["active"] == "me"


class TestResolveProfile:
    def test_active_profile(self, paths):
        name, p = resolve_profile(load_config(paths), profile=None)
        assert name == "me"
        assert p["handle"] == "me.bsky.social"

    def test_explicit_beats_env(self, paths, monkeypatch):
        cfg = load_config(paths)
        cfg["profiles"]["alt"] = {"handle": "alt", "app_password": "p"}
        monkeypatch.setenv("BSKY_PROFILE", "me")
        assert resolve_profile(cfg, profile="alt")[0] == "alt"

    def test_env_beats_active(self, paths, monkeypatch):
        cfg = load_config(paths)
        cfg["profiles"]["alt"] = {"handle": "alt", "app_password": "p"}
        monkeypatch.setenv("BSKY_PROFILE", "alt")
        assert resolve_profile(cfg, profile=None)[0] == "alt"

    def test_unknown_profile(self, paths):
        with pytest.raises(ValueError, match="Unknown profile"):
            resolve_profile(load_config(paths), profile="nobody")

    def test_require_profile_exits_when_logged_out(self, tmp_path, capsys, monkeypatch):
        monkeypatch.delenv("BSKY_PROFILE", raising=False)
        with pytest.raises(SystemExit) as exc:
            require_profile(Paths(config_path=tmp_path / "c.json", state_dir=tmp_path), profile=None)
        assert exc.value.code == 1
        assert "Not logged in" in capsys.readouterr().err


class TestLegacyHistory:
    def test_save_moves_legacy_history_to_history_file(self, tmp_path):
        legacy = tmp_path / ".bsky-cli"
        history = {"post_info": {"uri": "at://x/2", "cid": "c2"}, "thread_root": {"uri": "at://x/1", "cid": "c1"}}
        legacy.write_text(json.dumps({"auth": {"handle": "old", "did": "did:plc:old", "password": "pw"}, "history": history}))
        paths = Paths(config_path=tmp_path / "new" / "config.json", state_dir=tmp_path / "new" / "history", legacy_path=legacy)

        save_config(paths, load_config(paths))

        assert "history" not in json.loads(paths.config_path.read_text())["profiles"]["default"]
        assert json.loads(paths.history_path("default").read_text()) == history

    def test_save_keeps_newer_history_file(self, tmp_path):
        paths = Paths(config_path=tmp_path / "config.json", state_dir=tmp_path / "history")
        newer = {"post_info": {"uri": "at://x/9", "cid": "c9"}, "thread_root": {"uri": "at://x/9", "cid": "c9"}}
        paths.state_dir.mkdir()
        paths.history_path("default").write_text(json.dumps(newer))
        cfg = {
            "active": "default",
            "profiles": {"default": {"handle": "old", "app_password": "pw", "history": {"post_info": {}, "thread_root": {}}}},
        }

        save_config(paths, cfg)

        assert json.loads(paths.history_path("default").read_text()) == newer
        assert "history" not in json.loads(paths.config_path.read_text())["profiles"]["default"]

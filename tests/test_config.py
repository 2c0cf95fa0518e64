"""
tests/test_config.py — YAML Configuration Loader
=================================================
"""

from __future__ import annotations

import pytest

from sync_reputation.config import load_config


def _write(tmp_path, body: str):
    path = tmp_path / "config.yaml"
    path.write_text(body, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_minimal_file_uses_defaults(self, tmp_path):
        cfg = load_config(_write(tmp_path, 'app_name: "SynC"\napi_port: 8000\n'))
        assert cfg.app_name == "SynC"
        assert cfg.api_port == 8000
        assert cfg.require_moderation is True
        assert cfg.review_min_words == 1
        assert cfg.review_max_words == 150

    def test_overrides(self, tmp_path):
        cfg = load_config(_write(tmp_path, (
            'app_name: "SynC"\n'
            'api_port: "9001"\n'
            "require_moderation: false\n"
            "reviews:\n"
            "  min_words: 3\n"
            "  max_words: 40\n"
        )))
        assert cfg.api_port == 9001
        assert cfg.require_moderation is False
        assert (cfg.review_min_words, cfg.review_max_words) == (3, 40)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="config.yaml.example"):
            load_config(tmp_path / "nope.yaml")

    def test_missing_required_key(self, tmp_path):
        with pytest.raises(KeyError):
            load_config(_write(tmp_path, 'app_name: "SynC"\n'))

    def test_inconsistent_word_limits(self, tmp_path):
        with pytest.raises(ValueError, match="word limits"):
            load_config(_write(tmp_path, (
                'app_name: "SynC"\napi_port: 8000\n'
                "reviews:\n  min_words: 20\n  max_words: 10\n"
            )))

    def test_config_path_env(self, tmp_path, monkeypatch):
        path = _write(tmp_path, 'app_name: "FromEnv"\napi_port: 8100\n')
        monkeypatch.setenv("CONFIG_PATH", str(path))
        assert load_config().app_name == "FromEnv"

    def test_config_is_frozen(self, tmp_path):
        cfg = load_config(_write(tmp_path, 'app_name: "SynC"\napi_port: 8000\n'))
        with pytest.raises(AttributeError):
            cfg.api_port = 1  # type: ignore[misc]

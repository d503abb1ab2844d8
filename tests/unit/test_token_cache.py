"""Tests for the runtime info token cache."""

from __future__ import annotations

import json

import pytest

from vaulthunter.vault.base import TokenCacheError
from vaulthunter.vault.token_cache import TOKEN_KEY, TokenCache


class TestTokenCacheGet:
    """Tests for TokenCache.get."""

    def test_missing_file_is_error_by_default(self, tmp_path):
        cache = TokenCache(tmp_path / "runtime-info.json")
        with pytest.raises(TokenCacheError, match="No runtime info available"):
            cache.get(TOKEN_KEY)

    def test_missing_file_tolerated_when_asked(self, tmp_path):
        cache = TokenCache(tmp_path / "runtime-info.json")
        assert cache.get(TOKEN_KEY, missing_ok=True) is None

    def test_missing_key_and_null_are_none(self, tmp_path):
        path = tmp_path / "runtime-info.json"
        path.write_text(json.dumps({"token": None}))
        cache = TokenCache(path)

        assert cache.get("token") is None
        assert cache.get("other") is None

    def test_corrupt_file_is_error(self, tmp_path):
        path = tmp_path / "runtime-info.json"
        path.write_text("{not json")
        with pytest.raises(TokenCacheError):
            TokenCache(path).get(TOKEN_KEY, missing_ok=True)

    def test_non_string_value_is_error(self, tmp_path):
        path = tmp_path / "runtime-info.json"
        path.write_text(json.dumps({"token": 42}))
        with pytest.raises(TokenCacheError, match="Invalid runtime info"):
            TokenCache(path).get(TOKEN_KEY)

    def test_non_object_file_is_error(self, tmp_path):
        path = tmp_path / "runtime-info.json"
        path.write_text(json.dumps(["token"]))
        with pytest.raises(TokenCacheError):
            TokenCache(path).get(TOKEN_KEY)

    def test_disabled_cache_has_no_values(self):
        assert TokenCache(None).get(TOKEN_KEY) is None


class TestTokenCacheSet:
    """Tests for TokenCache.set."""

    def test_set_creates_file_and_directories(self, tmp_path):
        path = tmp_path / "nested" / "runtime-info.json"
        cache = TokenCache(path)

        cache.set(TOKEN_KEY, "hvs.abc")

        assert json.loads(path.read_text()) == {"token": "hvs.abc"}
        assert cache.get(TOKEN_KEY) == "hvs.abc"

    def test_set_keeps_other_keys(self, tmp_path):
        path = tmp_path / "runtime-info.json"
        path.write_text(json.dumps({"last_export": "2026-01-01T00:00:00+00:00"}))

        TokenCache(path).set(TOKEN_KEY, "hvs.abc")

        assert json.loads(path.read_text()) == {
            "last_export": "2026-01-01T00:00:00+00:00",
            "token": "hvs.abc",
        }

    def test_set_none_removes_key(self, tmp_path):
        path = tmp_path / "runtime-info.json"
        cache = TokenCache(path)
        cache.set(TOKEN_KEY, "hvs.abc")

        cache.set(TOKEN_KEY, None)

        assert json.loads(path.read_text()) == {}
        assert cache.get(TOKEN_KEY) is None

    def test_set_on_corrupt_file_is_error(self, tmp_path):
        path = tmp_path / "runtime-info.json"
        path.write_text("{not json")
        with pytest.raises(TokenCacheError):
            TokenCache(path).set(TOKEN_KEY, "hvs.abc")

    def test_replace_corrupt_file(self, tmp_path):
        """The corrupt content is dropped and only the new key survives."""
        path = tmp_path / "runtime-info.json"
        path.write_text("{not json")

        TokenCache(path).set(TOKEN_KEY, "hvs.abc", replace_corrupt=True)

        assert json.loads(path.read_text()) == {"token": "hvs.abc"}

    def test_disabled_cache_ignores_writes(self):
        TokenCache(None).set(TOKEN_KEY, "hvs.abc")

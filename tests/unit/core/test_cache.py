"""Unit tests for the TTL cache."""

import json
import os
import time
from datetime import timedelta
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from mirrorctl.core.anchored import AnchoredPath
from mirrorctl.core.cache import TtlCache
from mirrorctl.core.errors import HttpRequestError
from pydantic import BaseModel

HOUR = timedelta(hours=1)


class Info(BaseModel):
    default_branch: str


@pytest.fixture
def cache(tmp_path: Path) -> TtlCache:
    return TtlCache(AnchoredPath(tmp_path / "cache"))


class TestGetOrInsert:
    """Tests for TtlCache.get_or_insert."""

    def test_miss_computes_and_persists(self, cache: TtlCache, tmp_path: Path) -> None:
        """A miss calls compute once and writes pretty-printed JSON."""
        compute = MagicMock(return_value=Info(default_branch="master"))

        value = cache.get_or_insert("github.com/o/r/info", HOUR, compute, Info)

        assert value == Info(default_branch="master")
        compute.assert_called_once()
        path = tmp_path / "cache/github.com/o/r/info.json"
        assert json.loads(path.read_text()) == {"default_branch": "master"}
        assert "\n" in path.read_text()

    def test_memory_hit(self, cache: TtlCache) -> None:
        """A second call in the same run does not recompute."""
        compute = MagicMock(return_value="value")

        cache.get_or_insert("k", HOUR, compute, str)
        assert cache.get_or_insert("k", HOUR, compute, str) == "value"

        compute.assert_called_once()

    def test_memory_tier_ignores_ttl(self, cache: TtlCache) -> None:
        """Memory entries never expire within a run."""
        compute = MagicMock(return_value="value")

        cache.get_or_insert("k", HOUR, compute, str)
        cache.get_or_insert("k", timedelta(0), compute, str)

        compute.assert_called_once()

    def test_fresh_disk_entry_used(self, tmp_path: Path) -> None:
        """A fresh disk entry from a previous run is used without computing."""
        root = AnchoredPath(tmp_path / "cache")
        TtlCache(root).get_or_insert("k", HOUR, lambda: "stored", str)

        compute = MagicMock(return_value="new")
        assert TtlCache(root).get_or_insert("k", HOUR, compute, str) == "stored"
        compute.assert_not_called()

    def test_expired_disk_entry_recomputed(self, tmp_path: Path) -> None:
        """An entry older than the TTL is recomputed and rewritten."""
        root = AnchoredPath(tmp_path / "cache")
        TtlCache(root).get_or_insert("k", HOUR, lambda: "old", str)
        path = tmp_path / "cache/k.json"
        two_hours_ago = time.time() - 7200
        os.utime(path, (two_hours_ago, two_hours_ago))

        assert TtlCache(root).get_or_insert("k", HOUR, lambda: "new", str) == "new"
        assert json.loads(path.read_text()) == "new"

    def test_corrupt_disk_entry_recomputed(self, tmp_path: Path) -> None:
        """A disk entry that cannot be deserialized falls through to compute."""
        (tmp_path / "cache").mkdir()
        (tmp_path / "cache/k.json").write_text("{not json")
        cache = TtlCache(AnchoredPath(tmp_path / "cache"))

        assert cache.get_or_insert("k", HOUR, lambda: Info(default_branch="main"), Info) == Info(
            default_branch="main"
        )

    def test_compute_error_propagates(self, cache: TtlCache, tmp_path: Path) -> None:
        """Errors from compute reach the caller and nothing is stored."""

        def fail() -> str:
            raise HttpRequestError("https://api.github.com/x", "boom")

        with pytest.raises(HttpRequestError):
            cache.get_or_insert("k", HOUR, fail, str)
        assert not (tmp_path / "cache/k.json").exists()

    def test_write_failure_still_returns_value(self, tmp_path: Path) -> None:
        """A cache root that cannot be created only loses persistence."""
        (tmp_path / "blocker").write_text("a file, not a directory")
        cache = TtlCache(AnchoredPath(tmp_path / "blocker"))
        compute = MagicMock(return_value="value")

        assert cache.get_or_insert("k", HOUR, compute, str) == "value"
        assert cache.get_or_insert("k", HOUR, compute, str) == "value"
        compute.assert_called_once()

    def test_escaping_key_not_persisted(self, cache: TtlCache, tmp_path: Path) -> None:
        """A key that would leave the cache root is computed but not written."""
        value = cache.get_or_insert("../../outside", HOUR, lambda: "v", str)

        assert value == "v"
        assert not (tmp_path / "outside.json").exists()

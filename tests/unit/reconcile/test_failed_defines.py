"""
Unit tests for the failed-defines fingerprint cache.
"""

import json

from ccu.reconcile.failed_defines import FailedDefinesCache


class TestFailedDefinesCache:
    """Test FailedDefinesCache."""

    def test_missing_file(self, tmp_path):
        cache = FailedDefinesCache(tmp_path / "failed.json")
        assert cache.load() is None
        assert not cache.matches(["UNITY_CCU"])

    def test_save_and_match(self, tmp_path):
        cache = FailedDefinesCache(tmp_path / "state" / "failed.json")
        cache.save(["UNITY_CCU", "USE_BAR"])

        assert cache.matches(["use_bar", "UNITY_CCU"])
        assert not cache.matches(["UNITY_CCU"])
        assert json.loads(cache.path.read_text())["defines"] == ["UNITY_CCU", "USE_BAR"]

    def test_corrupted_file(self, tmp_path):
        path = tmp_path / "failed.json"
        path.write_text("{not json")

        assert FailedDefinesCache(path).load() is None

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "failed.json"
        path.write_text(json.dumps(["UNITY_CCU"]))

        assert FailedDefinesCache(path).load() is None

    def test_clear(self, tmp_path):
        cache = FailedDefinesCache(tmp_path / "failed.json")
        cache.save(["UNITY_CCU"])
        cache.clear()
        cache.clear()

        assert cache.load() is None

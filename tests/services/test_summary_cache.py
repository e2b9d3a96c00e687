"""
Tests for the content-addressed budget summary cache.
"""

import dataclasses
from decimal import Decimal

import pytest

from studio_engines.budget import summarize
from studio_kernel.domain.records import Item
from studio_services.summary_cache import SummaryCache, summary_cache_key


class TestCacheKey:
    def test_same_content_same_key(self, divisions, items):
        assert summary_cache_key(divisions, items) == summary_cache_key(list(divisions), list(items))

    def test_changed_item_changes_key(self, divisions, items):
        changed = [dataclasses.replace(items[0], quantity=Decimal("201")), *items[1:]]
        assert summary_cache_key(divisions, items) != summary_cache_key(divisions, changed)

    def test_decimal_scale_is_part_of_key(self, divisions, items):
        rescaled = [dataclasses.replace(items[0], quantity=Decimal("200.0")), *items[1:]]
        assert summary_cache_key(divisions, items) != summary_cache_key(divisions, rescaled)

    def test_currency_is_part_of_key(self, divisions, items):
        assert summary_cache_key(divisions, items, "PKR") != summary_cache_key(divisions, items, "USD")


class TestSummaryCache:
    def test_miss_then_hit(self, divisions, items):
        cache = SummaryCache()
        first = cache.summary_for(divisions, items)
        second = cache.summary_for(divisions, items)
        assert first is second
        assert (cache.hits, cache.misses) == (1, 1)

    def test_matches_engine(self, divisions, items):
        assert SummaryCache().summary_for(divisions, items) == summarize(divisions, items)

    def test_equal_values_with_other_scale_match_fresh_summary(self, divisions):
        whole = [Item("it-1", "div-civil", "Bricks", "pc", Decimal("1"), Decimal("10"), "High")]
        scaled = [Item("it-1", "div-civil", "Bricks", "pc", Decimal("1.0"), Decimal("10"), "High")]
        cache = SummaryCache()
        cache.summary_for(divisions, whole)
        served = cache.summary_for(divisions, scaled)
        assert served.as_dict() == summarize(divisions, scaled).as_dict()
        assert cache.misses == 2

    def test_changed_records_recompute(self, divisions, items):
        cache = SummaryCache()
        before = cache.summary_for(divisions, items)
        changed = [dataclasses.replace(items[3], status="Installed"), *items[:3]]
        after = cache.summary_for(divisions, changed)
        assert after.completed_cost > before.completed_cost
        assert cache.misses == 2

    def test_lru_eviction(self, divisions, items):
        cache = SummaryCache(max_entries=2)
        cache.summary_for(divisions, items[:1])
        cache.summary_for(divisions, items[:2])
        cache.summary_for(divisions, items[:1])
        cache.summary_for(divisions, items[:3])
        assert len(cache) == 2
        assert summary_cache_key(divisions, items[:1]) in cache
        assert summary_cache_key(divisions, items[:2]) not in cache

    def test_invalidate_one(self, divisions, items):
        cache = SummaryCache()
        cache.summary_for(divisions, items)
        key = summary_cache_key(divisions, items)
        assert cache.invalidate(key) == 1
        assert cache.invalidate(key) == 0
        assert key not in cache

    def test_invalidate_all(self, divisions, items):
        cache = SummaryCache()
        cache.summary_for(divisions, items)
        cache.summary_for(divisions, items[:2])
        assert cache.invalidate() == 2
        assert len(cache) == 0

    def test_rejects_zero_capacity(self):
        with pytest.raises(ValueError):
            SummaryCache(max_entries=0)

    def test_logs_hits(self, divisions, items, captured_logs):
        cache = SummaryCache()
        cache.summary_for(divisions, items)
        cache.summary_for(divisions, items)
        messages = [r["message"] for r in captured_logs()]
        assert "summary_cache_miss" in messages
        assert "summary_cache_hit" in messages

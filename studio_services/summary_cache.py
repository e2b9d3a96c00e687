"""
studio_services.summary_cache -- Content-addressed budget summary cache.

Responsibility:
    Memoize ``studio_engines.budget.summarize`` outside the pure engine.
    Entries are keyed by a SHA-256 content hash of the division and item
    records, so a changed record yields a new key and stale summaries are
    never served.

Architecture position:
    Services layer.  Holds mutable state (the LRU table); the engine it
    wraps stays pure.

Invariants enforced:
    - Key = hash of (currency, divisions, items) in canonical JSON, with
      Decimals in their written form: ``1.0`` and ``1`` key separately, so a
      cached summary always equals a fresh one, ``as_dict()`` strings included.
    - At most ``max_entries`` summaries are held; the least recently used
      entry is evicted first.
"""

from __future__ import annotations

import dataclasses
from collections import OrderedDict
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from studio_engines.budget import DEFAULT_CURRENCY, ProjectSummary, summarize
from studio_kernel.domain.records import Division, Item
from studio_kernel.logging_config import get_logger
from studio_kernel.utils.hashing import hash_payload

logger = get_logger("services.summary_cache")


def _exact_fields(record: Any) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for field in dataclasses.fields(record):
        value = getattr(record, field.name)
        fields[field.name] = str(value) if isinstance(value, Decimal) else value
    return fields


def summary_cache_key(
    divisions: Sequence[Division],
    items: Sequence[Item],
    currency: str = DEFAULT_CURRENCY,
) -> str:
    """Content hash of the rollup inputs."""
    return hash_payload(
        {
            "currency": currency,
            "divisions": [_exact_fields(d) for d in divisions],
            "items": [_exact_fields(i) for i in items],
        }
    )


class SummaryCache:
    """Bounded LRU of ``ProjectSummary`` keyed by input content hash."""

    def __init__(self, max_entries: int = 128) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._entries: OrderedDict[str, ProjectSummary] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def summary_for(
        self,
        divisions: Sequence[Division],
        items: Sequence[Item],
        currency: str = DEFAULT_CURRENCY,
    ) -> ProjectSummary:
        """Return the cached summary for these records, computing it on a miss."""
        key = summary_cache_key(divisions, items, currency)
        cached = self._entries.get(key)
        if cached is not None:
            self._entries.move_to_end(key)
            self.hits += 1
            logger.debug("summary_cache_hit", extra={"cache_key": key[:16], "hits": self.hits})
            return cached

        self.misses += 1
        summary = summarize(divisions, items, currency)
        self._entries[key] = summary
        if len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("summary_cache_evicted", extra={"cache_key": evicted[:16]})
        logger.debug(
            "summary_cache_miss",
            extra={"cache_key": key[:16], "misses": self.misses, "size": len(self._entries)},
        )
        return summary

    def invalidate(self, key: str | None = None) -> int:
        """Drop one entry (by key) or every entry; returns how many were dropped."""
        if key is None:
            dropped = len(self._entries)
            self._entries.clear()
        else:
            dropped = 1 if self._entries.pop(key, None) is not None else 0
        logger.info("summary_cache_invalidated", extra={"dropped": dropped})
        return dropped

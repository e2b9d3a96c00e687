"""
studio_engines.budget -- Project budget rollup.

Responsibility:
    Aggregate a project's budget items into a ``ProjectSummary``: total
    cost, per-priority, per-status and per-division breakdowns, and the
    share of cost already installed or delivered.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consumed by the summary cache in studio_services and by reporting.

Invariants enforced:
    - Conservation: priority costs, status costs and ``total_cost`` all
      equal the sum of ``quantity * rate`` over every item. Amounts are
      exact Decimals; nothing is rounded inside the rollup.
    - Fixed ordering: priority and status breakdowns follow the enum
      declaration order and always list every level, zero or not.
    - Division breakdown follows the input division order and lists only
      divisions that own at least one item.
    - Items whose division is unknown are counted in ``total_cost`` and
      ``total_items`` but in no division entry.
    - ``0 <= overall_progress <= 100``; 0 when there is no cost.
    - Determinism: identical inputs produce equal summaries and identical
      ``as_dict()`` output.

Failure modes:
    - None for well-formed records; an empty project yields a zeroed
      summary. Malformed numbers are rejected when the Item is built.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from studio_engines.tracer import traced_engine
from studio_kernel.domain.money import ZERO, ratio_percent
from studio_kernel.domain.records import (
    COMPLETE_ITEM_STATUSES,
    Division,
    Item,
    ItemPriority,
    ItemStatus,
)
from studio_kernel.domain.values import Money
from studio_kernel.logging_config import get_logger

logger = get_logger("engines.budget")

DEFAULT_CURRENCY = "PKR"


@dataclass(frozen=True)
class PriorityBreakdown:
    priority: ItemPriority
    cost: Money
    item_count: int


@dataclass(frozen=True)
class StatusBreakdown:
    status: ItemStatus
    cost: Money
    item_count: int


@dataclass(frozen=True)
class DivisionBreakdown:
    division_id: str
    division_name: str
    item_count: int
    total_cost: Money


@dataclass(frozen=True)
class ProjectSummary:
    """Derived budget view; recomputed on every read, never stored."""

    total_cost: Money
    total_items: int
    total_divisions: int
    overall_progress: Decimal
    priority_breakdown: tuple[PriorityBreakdown, ...]
    status_breakdown: tuple[StatusBreakdown, ...]
    division_breakdown: tuple[DivisionBreakdown, ...]
    high_priority_cost: Money
    mid_priority_cost: Money
    low_priority_cost: Money
    completed_cost: Money

    def as_dict(self) -> dict[str, Any]:
        """Plain representation for export layers; amounts as strings."""
        return {
            "currency": self.total_cost.currency.code,
            "total_cost": str(self.total_cost.amount),
            "total_items": self.total_items,
            "total_divisions": self.total_divisions,
            "overall_progress": str(self.overall_progress),
            "high_priority_cost": str(self.high_priority_cost.amount),
            "mid_priority_cost": str(self.mid_priority_cost.amount),
            "low_priority_cost": str(self.low_priority_cost.amount),
            "completed_cost": str(self.completed_cost.amount),
            "priority_breakdown": [
                {
                    "priority": p.priority.value,
                    "cost": str(p.cost.amount),
                    "item_count": p.item_count,
                }
                for p in self.priority_breakdown
            ],
            "status_breakdown": [
                {
                    "status": s.status.value,
                    "cost": str(s.cost.amount),
                    "item_count": s.item_count,
                }
                for s in self.status_breakdown
            ],
            "division_breakdown": [
                {
                    "division_id": d.division_id,
                    "division_name": d.division_name,
                    "item_count": d.item_count,
                    "total_cost": str(d.total_cost.amount),
                }
                for d in self.division_breakdown
            ],
        }


@traced_engine("budget_rollup", "1.0", fingerprint_fields=("divisions", "items"))
def summarize(
    divisions: Sequence[Division],
    items: Sequence[Item],
    currency: str = DEFAULT_CURRENCY,
) -> ProjectSummary:
    """Roll items up into a ``ProjectSummary``.

    Args:
        divisions: The project's divisions, in display order.
        items: All items of the project, in any order.
        currency: Currency the item rates are quoted in.

    Returns:
        ProjectSummary with exact (unrounded) Money figures.
    """
    priority_cost: dict[ItemPriority, Decimal] = {p: ZERO for p in ItemPriority}
    priority_count: dict[ItemPriority, int] = {p: 0 for p in ItemPriority}
    status_cost: dict[ItemStatus, Decimal] = {s: ZERO for s in ItemStatus}
    status_count: dict[ItemStatus, int] = {s: 0 for s in ItemStatus}
    division_cost: dict[str, Decimal] = {}
    division_count: dict[str, int] = {}

    total = ZERO
    completed = ZERO
    for item in items:
        cost = item.line_cost
        total += cost
        priority_cost[item.priority] += cost
        priority_count[item.priority] += 1
        status_cost[item.status] += cost
        status_count[item.status] += 1
        if item.status in COMPLETE_ITEM_STATUSES:
            completed += cost
        division_cost[item.division_id] = division_cost.get(item.division_id, ZERO) + cost
        division_count[item.division_id] = division_count.get(item.division_id, 0) + 1

    division_breakdown: list[DivisionBreakdown] = []
    seen: set[str] = set()
    for division in divisions:
        if division.id in seen or division.id not in division_count:
            continue
        seen.add(division.id)
        division_breakdown.append(
            DivisionBreakdown(
                division_id=division.id,
                division_name=division.name,
                item_count=division_count[division.id],
                total_cost=Money(division_cost[division.id], currency),
            )
        )

    orphaned = sum(count for div_id, count in division_count.items() if div_id not in seen)
    if orphaned:
        logger.warning(
            "items_without_division",
            extra={"orphaned_items": orphaned, "item_count": len(items)},
        )

    summary = ProjectSummary(
        total_cost=Money(total, currency),
        total_items=len(items),
        total_divisions=len(divisions),
        overall_progress=ratio_percent(completed, total),
        priority_breakdown=tuple(
            PriorityBreakdown(p, Money(priority_cost[p], currency), priority_count[p])
            for p in ItemPriority
        ),
        status_breakdown=tuple(
            StatusBreakdown(s, Money(status_cost[s], currency), status_count[s])
            for s in ItemStatus
        ),
        division_breakdown=tuple(division_breakdown),
        high_priority_cost=Money(priority_cost[ItemPriority.HIGH], currency),
        mid_priority_cost=Money(priority_cost[ItemPriority.MID], currency),
        low_priority_cost=Money(priority_cost[ItemPriority.LOW], currency),
        completed_cost=Money(completed, currency),
    )

    logger.debug(
        "project_summarized",
        extra={
            "item_count": summary.total_items,
            "division_count": summary.total_divisions,
            "total_cost": str(total),
            "overall_progress": str(summary.overall_progress),
        },
    )
    return summary

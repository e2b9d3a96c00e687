"""
Timesheet hours rollup (``studio_engines.timesheet_hours``).

Pure aggregation of timesheet entries into billable / non-billable totals.
ZERO I/O, ZERO clock reads.  Callers filter by employee, project or date
range before calling.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from studio_kernel.domain.money import ZERO, ratio_percent
from studio_kernel.domain.records import HourType, TimesheetEntry, TimesheetStatus


@dataclass(frozen=True)
class HoursSummary:
    total_hours: Decimal
    billable_hours: Decimal
    non_billable_hours: Decimal
    billable_percent: Decimal
    approved_billable_hours: Decimal
    entries_by_status: tuple[tuple[TimesheetStatus, int], ...]

    def count(self, status: TimesheetStatus) -> int:
        return dict(self.entries_by_status)[status]


def summarize_hours(entries: Sequence[TimesheetEntry]) -> HoursSummary:
    """Total, billable and non-billable hours with per-status entry counts.

    ``billable_percent`` is 0 when no hours were logged.  Rejected entries
    still count toward the logged totals; ``approved_billable_hours`` is the
    figure to bill from.
    """
    total = ZERO
    billable = ZERO
    approved_billable = ZERO
    counts = {status: 0 for status in TimesheetStatus}
    for entry in entries:
        total += entry.hours_worked
        counts[entry.status] += 1
        if entry.hour_type == HourType.BILLABLE:
            billable += entry.hours_worked
            if entry.status == TimesheetStatus.APPROVED:
                approved_billable += entry.hours_worked

    return HoursSummary(
        total_hours=total,
        billable_hours=billable,
        non_billable_hours=total - billable,
        billable_percent=ratio_percent(billable, total),
        approved_billable_hours=approved_billable,
        entries_by_status=tuple((s, counts[s]) for s in TimesheetStatus),
    )

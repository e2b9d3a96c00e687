"""
Timesheet Module (``studio_modules.timesheet``).

Submission and approval of logged hours.  Hour rollups live in
``studio_engines.timesheet_hours``.
"""

from studio_modules.timesheet.workflows import (
    TIMESHEET_WORKFLOW,
    authorize_timesheet_deletion,
    timesheet_actions,
    transition_timesheet,
)

__all__ = [
    "TIMESHEET_WORKFLOW",
    "authorize_timesheet_deletion",
    "timesheet_actions",
    "transition_timesheet",
]

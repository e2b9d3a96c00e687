"""
Studio Modules.

Thin per-entity layers over the studio kernel and engines.  Each module
declares its workflow (state machine) and wires engine calls to the
defaults in ``studio_config``.

Modules:
- Expense: claim approval and reimbursement
- Timesheet: entry submission and approval
- Invoice: drafting with configured rates; send / mark paid / cancel
- Subscription: plan quotes, trials, standing

Processing logic lives in the engines.
"""

from studio_modules import expense, invoice, subscription, timesheet

__all__ = ["expense", "invoice", "subscription", "timesheet"]

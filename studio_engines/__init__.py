"""
Module: studio_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the import surface for studio_services
    and studio_modules.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import studio_kernel (and sibling engine modules).
    MUST NOT import studio_config, studio_services or studio_modules.

Invariants enforced:
    - Purity: engines never call ``datetime.now()`` or ``date.today()``.
      Times and "as of" dates are explicit parameters.
    - Decimal-only arithmetic for amounts, rates and hours.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Engine entrypoints are wrapped in ``@traced_engine`` (see
    ``studio_engines.tracer``) and emit STUDIO_ENGINE_TRACE log records
    with the engine name, version, input fingerprint and duration.

Usage:
    from studio_engines import summarize, compute_totals, quote, transition
"""

from studio_kernel.logging_config import get_logger

logger = get_logger("engines")

from studio_engines.budget import (
    DivisionBreakdown,
    PriorityBreakdown,
    ProjectSummary,
    StatusBreakdown,
    summarize,
)
from studio_engines.invoicing import (
    InvoiceTotals,
    ReceivablesSummary,
    apply_payment,
    build_invoice,
    compute_totals,
    display_status,
    is_fully_paid,
    recalculate_invoice,
    remaining_amount,
    summarize_receivables,
)
from studio_engines.project_financials import (
    AreaUnit,
    FeeModel,
    FeeModelType,
    ProjectCostInput,
    ProjectFinancials,
    calculate_design_fee,
    calculate_project_financials,
    calculate_supervision_fee,
    convert_area,
)
from studio_engines.subscription import (
    PlanDefinition,
    PlanKind,
    StandingState,
    Subscription,
    SubscriptionPricing,
    SubscriptionQuote,
    SubscriptionStanding,
    SubscriptionStatus,
    can_add_employee,
    can_add_project,
    can_export,
    evaluate_standing,
    needs_watermark,
    quote,
    quote_plan,
    trial_subscription,
)
from studio_engines.timesheet_hours import HoursSummary, summarize_hours
from studio_engines.tracer import compute_input_fingerprint, traced_engine
from studio_engines.workflow import (
    TransitionResult,
    authorize_creation,
    authorize_deletion,
    available_actions,
    transition,
)

__all__ = [
    # Budget
    "DivisionBreakdown",
    "PriorityBreakdown",
    "ProjectSummary",
    "StatusBreakdown",
    "summarize",
    # Invoicing
    "InvoiceTotals",
    "ReceivablesSummary",
    "apply_payment",
    "build_invoice",
    "compute_totals",
    "display_status",
    "is_fully_paid",
    "recalculate_invoice",
    "remaining_amount",
    "summarize_receivables",
    # Project financials
    "AreaUnit",
    "FeeModel",
    "FeeModelType",
    "ProjectCostInput",
    "ProjectFinancials",
    "calculate_design_fee",
    "calculate_project_financials",
    "calculate_supervision_fee",
    "convert_area",
    # Subscription
    "PlanDefinition",
    "PlanKind",
    "StandingState",
    "Subscription",
    "SubscriptionPricing",
    "SubscriptionQuote",
    "SubscriptionStanding",
    "SubscriptionStatus",
    "can_add_employee",
    "can_add_project",
    "can_export",
    "evaluate_standing",
    "needs_watermark",
    "quote",
    "quote_plan",
    "trial_subscription",
    # Timesheet hours
    "HoursSummary",
    "summarize_hours",
    # Tracing
    "compute_input_fingerprint",
    "traced_engine",
    # Workflow
    "TransitionResult",
    "authorize_creation",
    "authorize_deletion",
    "available_actions",
    "transition",
]

"""
Studio Kernel - financial rollup and approval workflow core.

A pure, in-memory core for architecture/design studio operations:
- Budget rollups over divisions and line items
- Invoice totals through an additive tax/overhead/G&A cascade
- Subscription pricing
- Role-gated status lifecycles for expenses, timesheets, and invoices
"""

__version__ = "0.1.0"

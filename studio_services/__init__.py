"""
Studio services: the stateful layer around the pure engines.

- ``SummaryCache``: content-hash keyed LRU over the budget rollup.
- ``WorkflowExecutor``: optimistic version check, clock and trace logging
  around the workflow engine.
"""

from studio_services.summary_cache import SummaryCache, summary_cache_key
from studio_services.workflow_executor import WorkflowExecutor

__all__ = ["SummaryCache", "WorkflowExecutor", "summary_cache_key"]

"""Scheduled actions module.

Compiles structured filters into a single parameterized query against the
actions table and hydrates the matching rows into action objects.

Key Components:
- query_builder: Filter to query compilation, args canonicalization
- hydrator: Row to action conversion with per-row failure isolation
- service: Search and count entry points plus scheduling conveniences
- router: HTTP endpoints for searching, counting and canceling actions
"""

from .domain import Action, CanceledAction, FinishedAction, NullAction
from .models import ActionGroup, ActionRecord
from .schemas import ActionFilters, ArgsMatching, OrderBy, QueryType
from .service import (
    add_action,
    cancel_action,
    cancel_action_by_id,
    cancel_action_by_params,
    cancel_all,
    count_actions_svc,
    run_action,
    search_actions_svc,
)

__all__ = [
    "Action",
    "ActionFilters",
    "ActionGroup",
    "ActionRecord",
    "ArgsMatching",
    "CanceledAction",
    "FinishedAction",
    "NullAction",
    "OrderBy",
    "QueryType",
    "add_action",
    "cancel_action",
    "cancel_action_by_id",
    "cancel_action_by_params",
    "cancel_all",
    "count_actions_svc",
    "run_action",
    "search_actions_svc",
]

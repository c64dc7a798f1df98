"""Mutation entry points: request lifecycle, rule saving, reconciliation."""

from .editor import apply_manager_edit, replace_manual_entries, set_custom_off, set_work_shifts, toggle_status
from .reconciler import ReconcileResult, TimeDetail, TimeOffReconciler
from .requests import TimeOffRequestLifecycle, TransitionOutcome
from .rules import RuleSpec, save_rules

__all__ = [
    "apply_manager_edit",
    "replace_manual_entries",
    "set_custom_off",
    "set_work_shifts",
    "toggle_status",
    "ReconcileResult",
    "TimeDetail",
    "TimeOffReconciler",
    "TimeOffRequestLifecycle",
    "TransitionOutcome",
    "RuleSpec",
    "save_rules",
]

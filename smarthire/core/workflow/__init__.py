"""Application stage state machine and workflow engine module."""

from .transitions import (
    INITIAL_STAGE,
    STAGE_TRANSITIONS,
    allowed_transitions,
    is_terminal,
    validate_transition,
)
from .workflow_engine import WorkflowEngine, get_workflow_engine

__all__ = [
    "INITIAL_STAGE",
    "STAGE_TRANSITIONS",
    "allowed_transitions",
    "is_terminal",
    "validate_transition",
    "WorkflowEngine",
    "get_workflow_engine",
]

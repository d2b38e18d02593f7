"""
Stage transition table for the hiring pipeline.

Applications move forward one stage at a time, may be rejected or
withdrawn from any open stage, and never leave a terminal stage.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from smarthire.utils.constants import ApplicationStage

_S = ApplicationStage

STAGE_TRANSITIONS: Mapping[ApplicationStage, frozenset[ApplicationStage]] = MappingProxyType(
    {
        _S.APPLIED: frozenset({_S.SCREENING, _S.REJECTED, _S.WITHDRAWN}),
        _S.SCREENING: frozenset({_S.TECHNICAL, _S.REJECTED, _S.WITHDRAWN}),
        _S.TECHNICAL: frozenset({_S.INTERVIEW, _S.REJECTED, _S.WITHDRAWN}),
        _S.INTERVIEW: frozenset({_S.HR_REVIEW, _S.REJECTED, _S.WITHDRAWN}),
        _S.HR_REVIEW: frozenset({_S.OFFER, _S.REJECTED, _S.WITHDRAWN}),
        _S.OFFER: frozenset({_S.HIRED, _S.REJECTED, _S.WITHDRAWN}),
        _S.HIRED: frozenset(),
        _S.REJECTED: frozenset(),
        _S.WITHDRAWN: frozenset(),
    }
)

INITIAL_STAGE = ApplicationStage.APPLIED


def _coerce(stage: object) -> Optional[ApplicationStage]:
    """Map a member or stage string to a member, None if unknown."""
    try:
        return ApplicationStage.parse(stage)  # type: ignore[arg-type]
    except ValueError:
        return None


def validate_transition(current: object, requested: object) -> bool:
    """
    Check whether an application may move from ``current`` to ``requested``.

    Accepts enum members or stage strings. Unknown stages are never valid.
    """
    current_stage = _coerce(current)
    requested_stage = _coerce(requested)
    if current_stage is None or requested_stage is None:
        return False
    return requested_stage in STAGE_TRANSITIONS[current_stage]


def allowed_transitions(stage: object) -> frozenset[ApplicationStage]:
    """Stages reachable in one step from ``stage`` (empty if unknown)."""
    current_stage = _coerce(stage)
    if current_stage is None:
        return frozenset()
    return STAGE_TRANSITIONS[current_stage]


def is_terminal(stage: object) -> bool:
    current_stage = _coerce(stage)
    return current_stage is not None and not STAGE_TRANSITIONS[current_stage]

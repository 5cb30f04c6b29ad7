"""
Tests for the report status lifecycle.
"""

import pytest

from app.services.status_workflow import (
    InvalidStatusTransitionError,
    ReportStatus,
    StatusWorkflowEngine,
)


def test_forward_transitions_are_valid():
    assert StatusWorkflowEngine.is_valid_transition("reported", "in-progress")
    assert StatusWorkflowEngine.is_valid_transition("in-progress", "resolved")
    assert StatusWorkflowEngine.is_valid_transition("reported", "resolved")


def test_backward_transitions_are_not_in_the_table():
    assert not StatusWorkflowEngine.is_valid_transition("resolved", "reported")
    assert not StatusWorkflowEngine.is_valid_transition("in-progress", "reported")


def test_same_status_is_valid():
    assert StatusWorkflowEngine.is_valid_transition("resolved", "resolved")


def test_unknown_status_is_invalid():
    assert not StatusWorkflowEngine.is_valid_transition("reported", "closed")
    assert StatusWorkflowEngine.get_allowed_transitions("closed") == []


def test_allowed_transitions():
    assert StatusWorkflowEngine.get_allowed_transitions("reported") == ["in-progress", "resolved"]
    assert StatusWorkflowEngine.get_allowed_transitions("resolved") == []


def test_lenient_mode_accepts_any_transition():
    StatusWorkflowEngine(strict=False).validate_transition("resolved", "reported")


def test_strict_mode_rejects_backward_transition():
    with pytest.raises(InvalidStatusTransitionError) as excinfo:
        StatusWorkflowEngine(strict=True).validate_transition("resolved", "in-progress")

    assert excinfo.value.allowed == []


def test_strict_mode_accepts_forward_transition():
    StatusWorkflowEngine(strict=True).validate_transition(ReportStatus.REPORTED.value, ReportStatus.IN_PROGRESS.value)


def test_transition_timestamp_is_timezone_aware():
    assert StatusWorkflowEngine.transition_timestamp().tzinfo is not None

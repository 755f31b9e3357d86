"""
Unit tests for the stage/status transition engine.
"""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from recruiting_crm.errors import InvalidArgument
from recruiting_crm.services.pipeline_transitions import (
    TransitionKind,
    creation_transition,
    decide_transition,
    initial_status_fields,
)

pytestmark = pytest.mark.unit

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_entry(**overrides):
    values = dict(
        stage_id=uuid.uuid4(),
        status="active",
        rating=None,
        notes=None,
        interview_date=None,
        offer_details=None,
        rejection_reason=None,
        custom_fields={},
        hired_at=None,
        rejected_at=None,
        withdrawn_at=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


def kinds(decision):
    return [t.kind for t in decision.transitions]


def test_stage_change_only():
    entry = make_entry()
    new_stage = uuid.uuid4()

    decision = decide_transition(entry, {"stage_id": new_stage}, NOW)

    assert decision.changes == {"stage_id": new_stage}
    assert kinds(decision) == [TransitionKind.STAGE_CHANGED]
    assert decision.transitions[0].old_stage_id == entry.stage_id
    assert decision.transitions[0].new_stage_id == new_stage


def test_same_stage_is_noop():
    entry = make_entry()

    decision = decide_transition(entry, {"stage_id": entry.stage_id}, NOW)

    assert decision.is_noop
    assert decision.transitions == []


def test_hire_sets_hired_at():
    entry = make_entry()

    decision = decide_transition(entry, {"status": "hired"}, NOW)

    assert kinds(decision) == [TransitionKind.HIRED]
    assert decision.changes == {"status": "hired", "hired_at": NOW}
    assert decision.transitions[0].old_status == "active"
    assert decision.transitions[0].new_status == "hired"


def test_hired_at_is_first_write_wins():
    first = NOW - timedelta(days=10)
    entry = make_entry(status="active", hired_at=first)

    decision = decide_transition(entry, {"status": "hired"}, NOW)

    assert "hired_at" not in decision.changes
    assert kinds(decision) == [TransitionKind.HIRED]


def test_pass_sets_rejected_at_and_accepts_reason():
    entry = make_entry()

    decision = decide_transition(
        entry,
        {"status": "passed", "rejection_reason": "Not enough experience"},
        NOW,
    )

    assert kinds(decision) == [TransitionKind.PASSED]
    assert decision.changes["rejected_at"] == NOW
    assert decision.changes["rejection_reason"] == "Not enough experience"


def test_withdraw_is_generic_update_with_timestamp():
    entry = make_entry()

    decision = decide_transition(entry, {"status": "withdrawn"}, NOW)

    assert kinds(decision) == [TransitionKind.UPDATED]
    assert decision.changes["withdrawn_at"] == NOW


def test_stage_and_status_in_one_patch_orders_stage_first():
    entry = make_entry()
    new_stage = uuid.uuid4()

    decision = decide_transition(entry, {"stage_id": new_stage, "status": "hired"}, NOW)

    assert kinds(decision) == [TransitionKind.STAGE_CHANGED, TransitionKind.HIRED]
    assert decision.transitions[1].new_stage_id == new_stage


def test_notes_and_rating_produce_no_kind():
    entry = make_entry()

    decision = decide_transition(entry, {"notes": "Strong systems background", "rating": 4}, NOW)

    assert decision.changes == {"notes": "Strong systems background", "rating": 4}
    assert decision.transitions == []
    assert not decision.is_noop


def test_identical_patch_is_noop():
    entry = make_entry(status="hired", notes="x", hired_at=NOW)

    decision = decide_transition(entry, {"status": "hired", "notes": "x"}, NOW)

    assert decision.is_noop
    assert decision.transitions == []


def test_reactivating_keeps_terminal_timestamp():
    hired_at = NOW - timedelta(days=3)
    entry = make_entry(status="hired", hired_at=hired_at)

    decision = decide_transition(entry, {"status": "active"}, NOW)

    assert decision.changes == {"status": "active"}
    assert kinds(decision) == [TransitionKind.UPDATED]


def test_stage_can_be_cleared():
    entry = make_entry()

    decision = decide_transition(entry, {"stage_id": None}, NOW)

    assert decision.changes == {"stage_id": None}
    assert kinds(decision) == [TransitionKind.STAGE_CHANGED]


@pytest.mark.parametrize("field", ["hired_at", "applied_at", "candidate_id", "tenant_id"])
def test_non_mutable_field_rejected(field):
    with pytest.raises(InvalidArgument) as exc_info:
        decide_transition(make_entry(), {field: NOW}, NOW)
    assert exc_info.value.details == {"fields": [field]}


def test_unknown_status_rejected():
    with pytest.raises(InvalidArgument):
        decide_transition(make_entry(), {"status": "archived"}, NOW)


def test_null_status_rejected():
    with pytest.raises(InvalidArgument):
        decide_transition(make_entry(), {"status": None}, NOW)


def test_offer_details_require_hired():
    with pytest.raises(InvalidArgument):
        decide_transition(make_entry(), {"offer_details": {"salary": 100000}}, NOW)

    decision = decide_transition(
        make_entry(),
        {"status": "hired", "offer_details": {"salary": 100000}},
        NOW,
    )
    assert decision.changes["offer_details"] == {"salary": 100000}


def test_rejection_reason_requires_passed():
    with pytest.raises(InvalidArgument):
        decide_transition(make_entry(status="hired"), {"rejection_reason": "Declined"}, NOW)


def test_leaving_hired_clears_offer_details():
    entry = make_entry(status="hired", hired_at=NOW, offer_details={"salary": 100000})

    decision = decide_transition(entry, {"status": "passed", "rejection_reason": "Offer declined"}, NOW)

    assert decision.changes["offer_details"] is None
    assert decision.changes["rejection_reason"] == "Offer declined"
    assert kinds(decision) == [TransitionKind.PASSED]


def test_reactivating_clears_rejection_reason():
    entry = make_entry(status="passed", rejected_at=NOW, rejection_reason="Not enough experience")

    decision = decide_transition(entry, {"status": "active"}, NOW)

    assert decision.changes == {"status": "active", "rejection_reason": None}


def test_staying_hired_keeps_offer_details():
    entry = make_entry(status="hired", hired_at=NOW, offer_details={"salary": 100000})

    decision = decide_transition(entry, {"notes": "Signed"}, NOW)

    assert decision.changes == {"notes": "Signed"}


def test_naive_stored_interview_date_equals_aware_patch():
    aware = datetime(2026, 3, 5, 9, 30, tzinfo=timezone.utc)
    entry = make_entry(interview_date=aware.replace(tzinfo=None))

    assert decide_transition(entry, {"interview_date": aware}, NOW).is_noop


def test_aware_stored_interview_date_equals_naive_patch():
    aware = datetime(2026, 3, 5, 9, 30, tzinfo=timezone.utc)
    entry = make_entry(interview_date=aware)

    assert decide_transition(entry, {"interview_date": aware.replace(tzinfo=None)}, NOW).is_noop


def test_interview_date_in_other_offset_is_same_instant():
    stored = datetime(2026, 3, 5, 9, 30)
    patch = datetime(2026, 3, 5, 11, 30, tzinfo=timezone(timedelta(hours=2)))

    assert decide_transition(make_entry(interview_date=stored), {"interview_date": patch}, NOW).is_noop


def test_moved_interview_date_is_a_change():
    stored = datetime(2026, 3, 5, 9, 30)
    patch = datetime(2026, 3, 6, 9, 30, tzinfo=timezone.utc)

    decision = decide_transition(make_entry(interview_date=stored), {"interview_date": patch}, NOW)

    assert decision.changes == {"interview_date": patch}


def test_initial_status_fields_for_terminal_status():
    assert initial_status_fields("active", NOW) == {"status": "active"}
    assert initial_status_fields("passed", NOW) == {"status": "passed", "rejected_at": NOW}


def test_transition_metadata():
    stage_id = uuid.uuid4()
    added = creation_transition(stage_id, "active")

    assert added.audit_trigger_type == "recruiting_candidate_added"
    assert added.is_audited
    assert added.details() == {"stage_id": str(stage_id), "status": "active"}

    decision = decide_transition(make_entry(), {"status": "withdrawn"}, NOW)
    updated = decision.transitions[0]
    assert updated.event_type.value == "candidate_updated"
    assert not updated.is_audited

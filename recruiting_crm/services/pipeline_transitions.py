"""
Stage/status transition engine for pipeline entries.

decide_transition() is a pure function: given the stored entry and a client
patch it returns the column changes to write and the transition kinds that
the write represents. It does no I/O and never mutates the entry.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

from recruiting_crm.errors import InvalidArgument
from recruiting_crm.models.pipeline_entry import PipelineStatus
from recruiting_crm.schemas.automation import AutomationEventType


MUTABLE_FIELDS = (
    "stage_id",
    "status",
    "rating",
    "notes",
    "interview_date",
    "offer_details",
    "rejection_reason",
    "custom_fields",
)

_NON_NULLABLE_FIELDS = ("status", "custom_fields")

# Terminal timestamp written the first time an entry reaches each status
_STATUS_TIMESTAMPS = {
    PipelineStatus.HIRED.value: "hired_at",
    PipelineStatus.PASSED.value: "rejected_at",
    PipelineStatus.WITHDRAWN.value: "withdrawn_at",
}


class TransitionKind(str, enum.Enum):
    ADDED = "added"
    STAGE_CHANGED = "stage_changed"
    HIRED = "hired"
    PASSED = "passed"
    UPDATED = "updated"


_EVENT_TYPES = {
    TransitionKind.ADDED: AutomationEventType.CANDIDATE_ADDED,
    TransitionKind.STAGE_CHANGED: AutomationEventType.CANDIDATE_STAGE_CHANGED,
    TransitionKind.HIRED: AutomationEventType.CANDIDATE_HIRED,
    TransitionKind.PASSED: AutomationEventType.CANDIDATE_PASSED,
    TransitionKind.UPDATED: AutomationEventType.CANDIDATE_UPDATED,
}

# The generic "updated" kind only reaches automation, not the audit trail
AUDITED_KINDS = frozenset(
    {
        TransitionKind.ADDED,
        TransitionKind.STAGE_CHANGED,
        TransitionKind.HIRED,
        TransitionKind.PASSED,
    }
)


@dataclass(frozen=True)
class Transition:
    kind: TransitionKind
    old_stage_id: Optional[UUID] = None
    new_stage_id: Optional[UUID] = None
    old_status: Optional[str] = None
    new_status: Optional[str] = None

    @property
    def event_type(self) -> AutomationEventType:
        return _EVENT_TYPES[self.kind]

    @property
    def audit_trigger_type(self) -> str:
        return f"recruiting_{self.event_type.value}"

    @property
    def is_audited(self) -> bool:
        return self.kind in AUDITED_KINDS

    def details(self) -> Dict[str, Any]:
        """Kind-specific old/new values, JSON-ready."""
        if self.kind == TransitionKind.STAGE_CHANGED:
            return {
                "old_stage_id": _str_or_none(self.old_stage_id),
                "new_stage_id": _str_or_none(self.new_stage_id),
            }
        if self.kind == TransitionKind.ADDED:
            return {
                "stage_id": _str_or_none(self.new_stage_id),
                "status": self.new_status,
            }
        return {"old_status": self.old_status, "new_status": self.new_status}


@dataclass(frozen=True)
class TransitionDecision:
    changes: Dict[str, Any] = field(default_factory=dict)
    transitions: List[Transition] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not self.changes


def _str_or_none(value: Optional[UUID]) -> Optional[str]:
    return str(value) if value is not None else None


def _as_utc(value: datetime) -> datetime:
    # Naive values are taken to be UTC (SQLite drops the offset on read)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _same_value(stored: Any, incoming: Any) -> bool:
    if isinstance(stored, datetime) and isinstance(incoming, datetime):
        return _as_utc(stored) == _as_utc(incoming)
    return stored == incoming


def _normalize_status(value: Any) -> str:
    raw = value.value if isinstance(value, PipelineStatus) else value
    try:
        return PipelineStatus(raw).value
    except ValueError:
        raise InvalidArgument(
            f"Unknown status '{raw}'",
            {"status": raw, "allowed": [s.value for s in PipelineStatus]},
        )


def _check_terminal_fields(patch: Mapping[str, Any], resulting_status: str) -> None:
    if patch.get("offer_details") is not None and resulting_status != PipelineStatus.HIRED.value:
        raise InvalidArgument(
            "offer_details can only be set on a hired entry",
            {"status": resulting_status},
        )
    if patch.get("rejection_reason") is not None and resulting_status != PipelineStatus.PASSED.value:
        raise InvalidArgument(
            "rejection_reason can only be set on a passed entry",
            {"status": resulting_status},
        )


def initial_status_fields(status: Any, now: datetime) -> Dict[str, Any]:
    """Status plus the terminal timestamp for an entry created directly in that status."""
    normalized = _normalize_status(status)
    fields: Dict[str, Any] = {"status": normalized}
    timestamp_field = _STATUS_TIMESTAMPS.get(normalized)
    if timestamp_field:
        fields[timestamp_field] = now
    return fields


def creation_transition(stage_id: Optional[UUID], status: str) -> Transition:
    return Transition(kind=TransitionKind.ADDED, new_stage_id=stage_id, new_status=status)


def decide_transition(entry: Any, patch: Mapping[str, Any], now: datetime) -> TransitionDecision:
    """
    Decide what a patch does to a stored entry.

    Only fields whose value differs from the stored one become changes.
    Kinds are ordered stage change first, then the status kind.
    Terminal timestamps are first-write-wins. offer_details and
    rejection_reason are cleared once the resulting status no longer matches.

    Raises:
        InvalidArgument: patch touches a non-mutable field, nulls a required
            field, carries an unknown status, or sets offer_details /
            rejection_reason for a non-matching status.
    """
    unknown = sorted(set(patch) - set(MUTABLE_FIELDS))
    if unknown:
        raise InvalidArgument(
            "Patch contains fields that cannot be written directly",
            {"fields": unknown},
        )
    for name in _NON_NULLABLE_FIELDS:
        if name in patch and patch[name] is None:
            raise InvalidArgument(f"{name} cannot be null", {"field": name})

    normalized = dict(patch)
    if "status" in normalized:
        normalized["status"] = _normalize_status(normalized["status"])

    changes = {
        name: value
        for name, value in normalized.items()
        if not _same_value(getattr(entry, name), value)
    }

    resulting_status = changes.get("status", entry.status)
    _check_terminal_fields(normalized, resulting_status)

    # Offer and rejection details only live alongside their own status
    if resulting_status != PipelineStatus.HIRED.value and entry.offer_details is not None:
        changes.setdefault("offer_details", None)
    if resulting_status != PipelineStatus.PASSED.value and entry.rejection_reason is not None:
        changes.setdefault("rejection_reason", None)

    transitions: List[Transition] = []

    if "stage_id" in changes:
        transitions.append(
            Transition(
                kind=TransitionKind.STAGE_CHANGED,
                old_stage_id=entry.stage_id,
                new_stage_id=changes["stage_id"],
            )
        )

    if "status" in changes:
        new_status = changes["status"]
        if new_status == PipelineStatus.HIRED.value:
            kind = TransitionKind.HIRED
        elif new_status == PipelineStatus.PASSED.value:
            kind = TransitionKind.PASSED
        else:
            kind = TransitionKind.UPDATED

        timestamp_field = _STATUS_TIMESTAMPS.get(new_status)
        if timestamp_field and getattr(entry, timestamp_field) is None:
            changes[timestamp_field] = now

        transitions.append(
            Transition(
                kind=kind,
                old_stage_id=entry.stage_id,
                new_stage_id=changes.get("stage_id", entry.stage_id),
                old_status=entry.status,
                new_status=new_status,
            )
        )

    return TransitionDecision(changes=changes, transitions=transitions)

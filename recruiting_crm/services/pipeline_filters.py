"""
Tenant-scoped filter builder for recruiting pipeline queries.

Every predicate produced here is anchored to the acting tenant. Repositories
take a PipelineFilter and call apply() on their SELECT / COUNT statements;
there is no way to build one without a tenant.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union
from uuid import UUID

from sqlalchemy import Select, or_
from sqlalchemy.sql.elements import ColumnElement

from recruiting_crm.core.config import settings
from recruiting_crm.errors import InvalidArgument
from recruiting_crm.models.candidate import Candidate
from recruiting_crm.models.pipeline_entry import PipelineEntry, PipelineStatus


@dataclass(frozen=True)
class PipelineFilter:
    """Composable, tenant-anchored predicate plus pagination."""

    tenant_id: UUID
    conditions: Tuple[ColumnElement[bool], ...] = field(default_factory=tuple)
    joins_candidate: bool = False
    limit: int = 50
    offset: int = 0

    def apply(self, query: Select) -> Select:
        """Add joins and WHERE clauses (tenant first) to a pipeline_entry query."""
        if self.joins_candidate:
            query = query.join(
                Candidate,
                (PipelineEntry.candidate_id == Candidate.id)
                & (Candidate.tenant_id == self.tenant_id),
            )
        return query.where(PipelineEntry.tenant_id == self.tenant_id, *self.conditions)

    def paginate(self, query: Select) -> Select:
        return query.limit(self.limit).offset(self.offset)


def parse_tenant_id(value: Union[str, UUID, None]) -> UUID:
    if value is None or value == "":
        raise InvalidArgument("tenant_id is required")
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidArgument("tenant_id must be a UUID", {"tenant_id": str(value)})


def _parse_uuid(name: str, value: Union[str, UUID, None]) -> Optional[UUID]:
    if value is None or value == "":
        return None
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidArgument(f"{name} must be a UUID", {name: str(value)})


def _parse_non_negative_int(name: str, value: Any, default: int) -> int:
    if value is None:
        return default
    # bool is an int subclass; "true" is not a page size
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be a non-negative integer", {name: value})
    if isinstance(value, int):
        parsed = value
    else:
        try:
            parsed = int(str(value).strip())
        except ValueError:
            raise InvalidArgument(f"{name} must be a non-negative integer", {name: str(value)})
    if parsed < 0:
        raise InvalidArgument(f"{name} must be a non-negative integer", {name: parsed})
    return parsed


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def search_condition(term: str) -> ColumnElement[bool]:
    """Case-insensitive substring match over the candidate's searchable fields."""
    pattern = f"%{_escape_like(term)}%"
    return or_(
        Candidate.first_name.ilike(pattern, escape="\\"),
        Candidate.last_name.ilike(pattern, escape="\\"),
        Candidate.email.ilike(pattern, escape="\\"),
        Candidate.current_title.ilike(pattern, escape="\\"),
        Candidate.current_company.ilike(pattern, escape="\\"),
    )


def build_pipeline_filter(
    tenant_id: Union[str, UUID, None],
    position_id: Union[str, UUID, None] = None,
    status: Optional[str] = None,
    stage_id: Union[str, UUID, None] = None,
    search: Optional[str] = None,
    limit: Any = None,
    offset: Any = None,
) -> PipelineFilter:
    """
    Build a PipelineFilter from raw request values.

    Raises:
        InvalidArgument: missing/malformed tenant, malformed ids, unknown
            status, or pagination that is negative, non-numeric or above
            PIPELINE_MAX_PAGE_LIMIT. Values are never clamped.
    """
    tenant_uuid = parse_tenant_id(tenant_id)
    conditions = []

    position_uuid = _parse_uuid("position_id", position_id)
    if position_uuid is not None:
        conditions.append(PipelineEntry.position_id == position_uuid)

    if status:
        allowed = [s.value for s in PipelineStatus]
        value = status.value if isinstance(status, PipelineStatus) else status
        if value not in allowed:
            raise InvalidArgument(
                f"Unknown status '{value}'",
                {"status": value, "allowed": allowed},
            )
        conditions.append(PipelineEntry.status == value)

    stage_uuid = _parse_uuid("stage_id", stage_id)
    if stage_uuid is not None:
        conditions.append(PipelineEntry.stage_id == stage_uuid)

    joins_candidate = False
    term = (search or "").strip()
    if term:
        joins_candidate = True
        conditions.append(search_condition(term))

    parsed_limit = _parse_non_negative_int("limit", limit, settings.PIPELINE_DEFAULT_PAGE_LIMIT)
    if parsed_limit > settings.PIPELINE_MAX_PAGE_LIMIT:
        raise InvalidArgument(
            f"limit must not exceed {settings.PIPELINE_MAX_PAGE_LIMIT}",
            {"limit": parsed_limit},
        )
    parsed_offset = _parse_non_negative_int("offset", offset, 0)

    return PipelineFilter(
        tenant_id=tenant_uuid,
        conditions=tuple(conditions),
        joins_candidate=joins_candidate,
        limit=parsed_limit,
        offset=parsed_offset,
    )

"""
Unit tests for the tenant-scoped filter builder.
"""

import uuid

import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from recruiting_crm.errors import InvalidArgument
from recruiting_crm.models import PipelineEntry
from recruiting_crm.services.pipeline_filters import (
    _escape_like,
    build_pipeline_filter,
    parse_tenant_id,
)

pytestmark = pytest.mark.unit


def compile_sql(query) -> str:
    return str(query.compile(dialect=postgresql.dialect()))


def test_defaults():
    tenant_id = uuid.uuid4()

    pipeline_filter = build_pipeline_filter(str(tenant_id))

    assert pipeline_filter.tenant_id == tenant_id
    assert pipeline_filter.conditions == ()
    assert pipeline_filter.limit == 50
    assert pipeline_filter.offset == 0
    assert not pipeline_filter.joins_candidate


def test_tenant_condition_always_applied():
    pipeline_filter = build_pipeline_filter(uuid.uuid4(), status="active")

    sql = compile_sql(pipeline_filter.apply(select(PipelineEntry)))

    assert "pipeline_entry.tenant_id =" in sql
    assert "pipeline_entry.status =" in sql


def test_search_joins_candidate_within_tenant():
    pipeline_filter = build_pipeline_filter(uuid.uuid4(), search="  ada ")

    sql = compile_sql(pipeline_filter.apply(select(PipelineEntry)))

    assert pipeline_filter.joins_candidate
    assert "JOIN candidate" in sql
    assert "candidate.tenant_id =" in sql
    assert "ILIKE" in sql


def test_blank_search_is_ignored():
    pipeline_filter = build_pipeline_filter(uuid.uuid4(), search="   ")
    assert not pipeline_filter.joins_candidate
    assert pipeline_filter.conditions == ()


def test_like_wildcards_are_escaped():
    assert _escape_like("50%_off\\") == "50\\%\\_off\\\\"


@pytest.mark.parametrize("value", [None, "", "not-a-uuid"])
def test_tenant_required_and_well_formed(value):
    with pytest.raises(InvalidArgument):
        parse_tenant_id(value)


def test_unknown_status_rejected():
    with pytest.raises(InvalidArgument) as exc_info:
        build_pipeline_filter(uuid.uuid4(), status="archived")
    assert exc_info.value.details["allowed"] == ["active", "hired", "passed", "withdrawn"]


def test_malformed_position_id_rejected():
    with pytest.raises(InvalidArgument):
        build_pipeline_filter(uuid.uuid4(), position_id="123")


@pytest.mark.parametrize(
    "limit, offset",
    [(-1, None), (None, -5), ("ten", None), (None, "x"), (True, None), (501, None)],
)
def test_bad_pagination_rejected(limit, offset):
    with pytest.raises(InvalidArgument):
        build_pipeline_filter(uuid.uuid4(), limit=limit, offset=offset)


def test_pagination_passthrough():
    pipeline_filter = build_pipeline_filter(uuid.uuid4(), limit="500", offset=20)

    assert pipeline_filter.limit == 500
    assert pipeline_filter.offset == 20


def test_zero_limit_allowed():
    assert build_pipeline_filter(uuid.uuid4(), limit=0).limit == 0

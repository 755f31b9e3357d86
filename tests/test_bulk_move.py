"""
Bulk stage move tests.
"""

import uuid

import pytest
from sqlalchemy.exc import OperationalError

from recruiting_crm.errors import InvalidArgument, NotFound
from recruiting_crm.schemas.pipeline_entry import PipelineEntryCreate
from recruiting_crm.services.bulk_move_service import BulkMoveCoordinator


async def add(service, tenant_id, seeded, candidate, position):
    return await service.create_entry(
        tenant_id,
        PipelineEntryCreate(
            candidate_id=seeded["candidates"][candidate].id,
            position_id=seeded["positions"][position].id,
        ),
    )


async def test_bulk_move_moves_tenant_entries(service, tenant_id, seeded, automation_client):
    entries = [
        await add(service, tenant_id, seeded, 0, 0),
        await add(service, tenant_id, seeded, 1, 0),
        await add(service, tenant_id, seeded, 0, 1),
    ]
    target = seeded["stages"][2].id

    result = await BulkMoveCoordinator(service).bulk_move(tenant_id, [e.id for e in entries], target)

    assert result.processed_count == 3
    assert result.failed_ids == []
    for entry in entries:
        assert (await service.get_entry(tenant_id, entry.id)).stage_id == target
    assert automation_client.types.count("candidate_stage_changed") == 3


async def test_bulk_move_skips_unknown_and_foreign_ids(service, tenant_id, seeded, other_tenant_id, other_seeded):
    mine = await add(service, tenant_id, seeded, 0, 0)
    theirs = await add(service, other_tenant_id, other_seeded, 0, 0)
    target = seeded["stages"][1].id

    result = await BulkMoveCoordinator(service).bulk_move(
        tenant_id,
        [mine.id, theirs.id, uuid.uuid4(), mine.id],
        target,
    )

    assert result.processed_count == 1
    assert result.failed_ids == []
    untouched = await service.get_entry(other_tenant_id, theirs.id)
    assert untouched.stage_id == other_seeded["stages"][0].id


async def test_bulk_move_counts_entries_already_in_stage(service, tenant_id, seeded, automation_client):
    entry = await add(service, tenant_id, seeded, 0, 0)

    result = await BulkMoveCoordinator(service).bulk_move(tenant_id, [entry.id], entry.stage_id)

    assert result.processed_count == 1
    assert automation_client.types == ["candidate_added"]


async def test_bulk_move_empty_ids(service, tenant_id, seeded):
    result = await BulkMoveCoordinator(service).bulk_move(tenant_id, [], seeded["stages"][0].id)
    assert result.processed_count == 0


async def test_bulk_move_requires_ids(service, tenant_id, seeded):
    with pytest.raises(InvalidArgument):
        await BulkMoveCoordinator(service).bulk_move(tenant_id, None, seeded["stages"][0].id)


async def test_bulk_move_unknown_stage(service, tenant_id, seeded, other_seeded):
    entry = await add(service, tenant_id, seeded, 0, 0)

    with pytest.raises(NotFound):
        await BulkMoveCoordinator(service).bulk_move(tenant_id, [entry.id], other_seeded["stages"][1].id)


async def test_bulk_move_continues_after_item_failure(service, tenant_id, seeded, monkeypatch):
    first = await add(service, tenant_id, seeded, 0, 0)
    second = await add(service, tenant_id, seeded, 1, 0)
    target = seeded["stages"][1].id
    original_move = service.move_entry

    async def flaky_move(tenant, entry_id, stage_id):
        if entry_id == first.id:
            raise NotFound("Candidate application not found", {"id": str(entry_id)})
        return await original_move(tenant, entry_id, stage_id)

    monkeypatch.setattr(service, "move_entry", flaky_move)

    result = await BulkMoveCoordinator(service).bulk_move(tenant_id, [first.id, second.id], target)

    assert result.processed_count == 1
    assert result.failed_ids == [first.id]
    assert (await service.get_entry(tenant_id, second.id)).stage_id == target


async def test_bulk_move_continues_after_unexpected_item_error(service, tenant_id, seeded, monkeypatch):
    first = await add(service, tenant_id, seeded, 0, 0)
    second = await add(service, tenant_id, seeded, 1, 0)
    target = seeded["stages"][1].id
    original_move = service.move_entry

    async def broken_move(tenant, entry_id, stage_id):
        if entry_id == first.id:
            raise OperationalError("UPDATE pipeline_entries", {}, Exception("connection lost"))
        return await original_move(tenant, entry_id, stage_id)

    monkeypatch.setattr(service, "move_entry", broken_move)

    result = await BulkMoveCoordinator(service).bulk_move(tenant_id, [first.id, second.id], target)

    assert result.processed_count == 1
    assert result.failed_ids == [first.id]
    assert (await service.get_entry(tenant_id, second.id)).stage_id == target
    assert (await service.get_entry(tenant_id, first.id)).stage_id == seeded["stages"][0].id


async def test_bulk_move_skips_malformed_ids(service, tenant_id, seeded):
    first = await add(service, tenant_id, seeded, 0, 0)
    second = await add(service, tenant_id, seeded, 1, 0)
    target = seeded["stages"][2].id

    result = await BulkMoveCoordinator(service).bulk_move(
        tenant_id,
        [str(first.id), "not-a-uuid", "", second.id],
        target,
    )

    assert result.processed_count == 2
    assert result.failed_ids == []
    assert (await service.get_entry(tenant_id, first.id)).stage_id == target

"""
Bulk stage move for the recruiting pipeline.

Each entry is moved through the same path as a single move, in its own
transaction. One entry failing does not roll back or stop the others.
"""

import logging
from typing import List, Optional, Sequence, Union
from uuid import UUID

from recruiting_crm.errors import AppError, InvalidArgument, NotFound
from recruiting_crm.schemas.pipeline_entry import BulkMoveResult
from recruiting_crm.services.pipeline_filters import parse_tenant_id
from recruiting_crm.services.recruiting_pipeline_service import RecruitingPipelineService

logger = logging.getLogger(__name__)


def _parse_entry_ids(entry_ids: Sequence[Union[str, UUID]]) -> List[UUID]:
    """Parse ids, dropping any that are not UUIDs."""
    parsed: List[UUID] = []
    for raw in entry_ids:
        if isinstance(raw, UUID):
            parsed.append(raw)
            continue
        try:
            parsed.append(UUID(str(raw)))
        except ValueError:
            logger.debug("Skipping malformed entry id %r in bulk move", raw)
    return parsed


class BulkMoveCoordinator:
    """Move many entries to one stage, reporting which ones failed."""

    def __init__(self, pipeline_service: RecruitingPipelineService):
        self.pipeline_service = pipeline_service

    async def bulk_move(
        self,
        tenant_id: Union[str, UUID],
        entry_ids: Optional[Sequence[Union[str, UUID]]],
        stage_id: UUID,
    ) -> BulkMoveResult:
        """
        Move the tenant's entries among `entry_ids` to `stage_id`.

        Ids that are malformed, do not exist or belong to another tenant are skipped
        silently. Entries already in the target stage count as processed.

        Raises:
            InvalidArgument: ids missing
            NotFound: target stage does not exist in the tenant
        """
        if entry_ids is None:
            raise InvalidArgument("ids array is required")

        tenant_uuid = parse_tenant_id(tenant_id)
        stage = await self.pipeline_service.stages.get_recruiting_stage(tenant_uuid, stage_id)
        if stage is None:
            raise NotFound("Stage not found", {"stage_id": str(stage_id)})

        resolved = await self.pipeline_service.resolve_entry_ids(tenant_uuid, _parse_entry_ids(entry_ids))

        processed = 0
        failed: List[UUID] = []
        for entry_id in resolved:
            try:
                await self.pipeline_service.move_entry(tenant_uuid, entry_id, stage_id)
            except AppError as exc:
                logger.warning(
                    "Bulk move of entry %s to stage %s failed: %s",
                    entry_id,
                    stage_id,
                    exc.message,
                    exc_info=True,
                )
                failed.append(entry_id)
                continue
            except Exception:
                logger.error(
                    "Bulk move of entry %s to stage %s failed unexpectedly",
                    entry_id,
                    stage_id,
                    exc_info=True,
                )
                # Leave the session usable for the next entry
                await self.pipeline_service.db.rollback()
                failed.append(entry_id)
                continue
            processed += 1

        logger.info(
            "Bulk moved %d of %d entries to stage %s for tenant %s",
            processed,
            len(resolved),
            stage_id,
            tenant_uuid,
        )
        return BulkMoveResult(processed_count=processed, failed_ids=failed)

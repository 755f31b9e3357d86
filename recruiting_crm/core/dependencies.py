"""
FastAPI dependencies for the application.
"""

from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from recruiting_crm.core.config import settings
from recruiting_crm.db.session import async_session_maker, get_db
from recruiting_crm.errors import InvalidArgument
from recruiting_crm.services.audit_logger import AuditLogger
from recruiting_crm.services.automation import (
    AutomationClient,
    AutomationDispatcher,
    LoggingAutomationClient,
    WebhookAutomationClient,
)
from recruiting_crm.services.bulk_move_service import BulkMoveCoordinator
from recruiting_crm.services.recruiting_pipeline_service import RecruitingPipelineService


async def get_tenant_id(x_tenant_id: str = Header(None)) -> UUID:
    """
    Extract and validate tenant_id from header.

    Raises 400 if X-Tenant-ID header is missing or not a UUID.
    """
    if not x_tenant_id:
        raise InvalidArgument("X-Tenant-ID header is required")
    try:
        return UUID(x_tenant_id)
    except ValueError:
        raise InvalidArgument("X-Tenant-ID header must be a UUID", {"tenant_id": x_tenant_id})


def get_automation_client() -> AutomationClient:
    if settings.AUTOMATION_WEBHOOK_URL:
        return WebhookAutomationClient(
            settings.AUTOMATION_WEBHOOK_URL,
            timeout_seconds=settings.AUTOMATION_TIMEOUT_SECONDS,
        )
    return LoggingAutomationClient()


def get_automation_dispatcher(
    client: AutomationClient = Depends(get_automation_client),
) -> AutomationDispatcher:
    return AutomationDispatcher(client, timeout_seconds=settings.AUTOMATION_TIMEOUT_SECONDS)


def get_audit_logger() -> AuditLogger:
    return AuditLogger(async_session_maker)


def get_pipeline_service(
    db: AsyncSession = Depends(get_db),
    dispatcher: AutomationDispatcher = Depends(get_automation_dispatcher),
    audit_logger: AuditLogger = Depends(get_audit_logger),
) -> RecruitingPipelineService:
    return RecruitingPipelineService(db, dispatcher, audit_logger)


def get_bulk_move_coordinator(
    service: RecruitingPipelineService = Depends(get_pipeline_service),
) -> BulkMoveCoordinator:
    return BulkMoveCoordinator(service)

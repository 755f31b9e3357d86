"""
Client interface for the external automation subsystem.
"""

import logging
from typing import Protocol

from recruiting_crm.schemas.automation import AutomationEvent

logger = logging.getLogger(__name__)


class AutomationClient(Protocol):
    """Interface for automation delivery backends."""

    async def process_event(self, event: AutomationEvent) -> None:
        ...


class LoggingAutomationClient:
    """Fallback client used when no automation endpoint is configured."""

    async def process_event(self, event: AutomationEvent) -> None:
        logger.info(
            "Automation event %s for tenant %s (no automation endpoint configured)",
            event.type.value,
            event.tenant_id,
        )

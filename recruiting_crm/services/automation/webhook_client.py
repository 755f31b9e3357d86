"""
Automation client that POSTs events to an external automation service.
"""

import logging
from typing import Optional

import httpx

from recruiting_crm.schemas.automation import AutomationEvent

logger = logging.getLogger(__name__)


class WebhookAutomationClient:
    """Deliver {type, tenant_id, data} as JSON to a configured URL."""

    def __init__(self, url: str, timeout_seconds: float = 5.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def process_event(self, event: AutomationEvent) -> None:
        timeout = httpx.Timeout(self.timeout_seconds)
        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            resp = await client.post(self.url, json=event.to_payload())
            resp.raise_for_status()
        logger.debug("Delivered %s to %s (%s)", event.type.value, self.url, resp.status_code)

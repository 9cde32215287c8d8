from __future__ import annotations

import httpx
import structlog

from helpdesk.core.config import settings
from helpdesk.schemas.ticket import TicketCreatedNotification

logger = structlog.get_logger(__name__)


class NotificationRelay:
    """Best-effort webhook fired when a ticket is created.

    ``notify`` never raises: delivery is at most once and failures only reach
    the log.
    """

    def __init__(
        self,
        webhook_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.webhook_url = webhook_url if webhook_url is not None else settings.NOTIFY_WEBHOOK_URL
        self.timeout = timeout or settings.REQUEST_TIMEOUT_SEC
        self.transport = transport

    async def notify(self, payload: TicketCreatedNotification) -> None:
        if not self.webhook_url:
            logger.info("notification_skipped", ticket_id=payload.ticketId)
            return
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.webhook_url, json=payload.model_dump())
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("notification_failed", ticket_id=payload.ticketId, error=str(exc))
            return
        logger.info("notification_sent", ticket_id=payload.ticketId, status=response.status_code)

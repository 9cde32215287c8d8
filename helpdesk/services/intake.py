from __future__ import annotations

import structlog
from fastapi import BackgroundTasks

from helpdesk.core.errors import ValidationError
from helpdesk.schemas.ticket import TicketCreate, TicketCreatedNotification, TicketOut
from helpdesk.services.notifier import NotificationRelay
from helpdesk.services.tickets import TicketStore
from helpdesk.utils.time import utc_now

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("name", "email", "title", "description")


class TicketIntake:
    """Public ticket creation: validate, persist, then notify in the background."""

    def __init__(self, tickets: TicketStore, relay: NotificationRelay) -> None:
        self.tickets = tickets
        self.relay = relay

    async def create(self, payload: TicketCreate, background_tasks: BackgroundTasks) -> TicketOut:
        values = {field: (getattr(payload, field) or "").strip() for field in REQUIRED_FIELDS}
        if not all(values.values()):
            raise ValidationError("All fields are required")

        now = utc_now()
        ticket = await self.tickets.insert(
            {
                **values,
                "status": "open",
                "priority": "medium",
                "assigned_to": None,
                "image_urls": list(payload.image_urls) if payload.image_urls else None,
                "created_at": now,
                "updated_at": now,
            }
        )
        logger.info(
            "ticket_created",
            ticket_id=ticket.id,
            image_count=len(ticket.image_urls or []),
        )

        background_tasks.add_task(
            self.relay.notify,
            TicketCreatedNotification(
                ticketId=ticket.id,
                title=ticket.title,
                email=ticket.email,
                name=ticket.name,
            ),
        )
        return ticket

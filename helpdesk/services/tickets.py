from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.core.errors import StorageError
from helpdesk.models.ticket import Ticket
from helpdesk.schemas.ticket import TicketOut

logger = structlog.get_logger(__name__)


class TicketStore:
    """Durable ticket records. Every method commits or rolls back on its own."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def insert(self, values: dict[str, Any]) -> TicketOut:
        ticket = Ticket(**values)
        self.session.add(ticket)
        try:
            await self.session.commit()
            await self.session.refresh(ticket)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("storage_error", stage="ticket_insert", error=str(exc))
            raise StorageError("Failed to create ticket in database") from exc
        return TicketOut.model_validate(ticket)

    async def get(self, ticket_id: str) -> TicketOut | None:
        try:
            ticket = await self.session.get(Ticket, ticket_id)
        except SQLAlchemyError as exc:
            logger.error("storage_error", stage="ticket_get", ticket_id=ticket_id, error=str(exc))
            raise StorageError("Failed to fetch ticket") from exc
        return TicketOut.model_validate(ticket) if ticket else None

    async def query(
        self,
        assigned_to: str | None = None,
        status: str | None = None,
        newest_first: bool = True,
    ) -> list[TicketOut]:
        query = select(Ticket)
        if assigned_to is not None:
            query = query.where(Ticket.assigned_to == assigned_to)
        if status:
            query = query.where(Ticket.status == status)
        if newest_first:
            query = query.order_by(Ticket.created_at.desc())
        else:
            query = query.order_by(Ticket.created_at.asc())

        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            logger.error("storage_error", stage="ticket_query", error=str(exc))
            raise StorageError("Failed to fetch tickets") from exc
        return [TicketOut.model_validate(item) for item in result.scalars().all()]

    async def update_partial(self, ticket_id: str, fields: dict[str, Any]) -> TicketOut | None:
        try:
            ticket = await self.session.get(Ticket, ticket_id)
            if ticket is None:
                return None
            for key, value in fields.items():
                setattr(ticket, key, value)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("storage_error", stage="ticket_update", ticket_id=ticket_id, error=str(exc))
            raise StorageError("Failed to update ticket") from exc
        return TicketOut.model_validate(ticket)

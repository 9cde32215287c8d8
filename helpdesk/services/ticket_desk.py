from __future__ import annotations

import structlog

from helpdesk.core.config import settings
from helpdesk.core.errors import ForbiddenError, NotFoundError, ValidationError
from helpdesk.schemas.ticket import TicketOut, TicketUpdate
from helpdesk.services.context import AuthContext
from helpdesk.services.permissions import split_update
from helpdesk.services.profiles import ProfileStore
from helpdesk.services.tickets import TicketStore
from helpdesk.utils.time import utc_now

logger = structlog.get_logger(__name__)


class TicketDesk:
    """Staff-side ticket operations, scoped and filtered by the caller's role."""

    def __init__(
        self,
        tickets: TicketStore,
        profiles: ProfileStore,
        agent_update_requires_assignment: bool | None = None,
    ) -> None:
        self.tickets = tickets
        self.profiles = profiles
        if agent_update_requires_assignment is None:
            agent_update_requires_assignment = settings.AGENT_UPDATE_REQUIRES_ASSIGNMENT
        self.agent_update_requires_assignment = agent_update_requires_assignment

    async def list_tickets(self, context: AuthContext, status: str | None = None) -> list[TicketOut]:
        assigned_to = None if context.policy.sees_all_tickets else context.user_id
        return await self.tickets.query(assigned_to=assigned_to, status=status)

    async def update_ticket(
        self, context: AuthContext, ticket_id: str, payload: TicketUpdate
    ) -> TicketOut:
        # exclude_unset keeps an explicit null (clear the assignee) apart
        # from a field that was never sent
        requested = payload.model_dump(exclude_unset=True)
        # null status/priority cannot be stored; treat them as not sent
        requested = {
            key: value
            for key, value in requested.items()
            if value is not None or key == "assigned_to"
        }
        changes, dropped = split_update(context.role, requested)
        if dropped:
            logger.info(
                "ticket_update_fields_dropped",
                ticket_id=ticket_id,
                user_id=context.user_id,
                role=context.role,
                fields=dropped,
            )

        if changes.get("assigned_to") is not None:
            await self._check_assignee(changes["assigned_to"])

        if self.agent_update_requires_assignment and not context.policy.sees_all_tickets:
            current = await self.tickets.get(ticket_id)
            if current is None:
                raise NotFoundError("Ticket not found")
            if current.assigned_to != context.user_id:
                raise ForbiddenError("Not allowed to update this ticket")

        changes["updated_at"] = utc_now()
        ticket = await self.tickets.update_partial(ticket_id, changes)
        if ticket is None:
            raise NotFoundError("Ticket not found")

        logger.info(
            "ticket_updated",
            ticket_id=ticket_id,
            user_id=context.user_id,
            role=context.role,
            fields=sorted(key for key in changes if key != "updated_at"),
        )
        return ticket

    async def _check_assignee(self, user_id: str) -> None:
        profile = await self.profiles.get_profile(user_id) if user_id else None
        if profile is None:
            raise ValidationError("Unknown assignee")

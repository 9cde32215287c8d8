from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends

from helpdesk.api.deps import get_auth_context, get_ticket_desk, get_ticket_intake
from helpdesk.core.errors import ValidationError
from helpdesk.schemas.ticket import TICKET_STATUSES, TicketCreate, TicketUpdate
from helpdesk.services.context import AuthContext
from helpdesk.services.intake import TicketIntake
from helpdesk.services.ticket_desk import TicketDesk

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.post("", status_code=201, response_model=dict)
async def create_ticket(
    payload: TicketCreate,
    background_tasks: BackgroundTasks,
    intake: TicketIntake = Depends(get_ticket_intake),
) -> dict:
    ticket = await intake.create(payload, background_tasks)
    return {"success": True, "ticket": ticket}


@router.get("", response_model=dict)
async def list_tickets(
    status: str | None = None,
    desk: TicketDesk = Depends(get_ticket_desk),
    context: AuthContext = Depends(get_auth_context),
) -> dict:
    if status is not None and status not in TICKET_STATUSES:
        raise ValidationError("Invalid status filter")
    tickets = await desk.list_tickets(context, status=status)
    return {"tickets": tickets}


@router.patch("/{ticket_id}", response_model=dict)
async def update_ticket(
    ticket_id: str,
    payload: TicketUpdate,
    desk: TicketDesk = Depends(get_ticket_desk),
    context: AuthContext = Depends(get_auth_context),
) -> dict:
    ticket = await desk.update_ticket(context, ticket_id, payload)
    return {"ticket": ticket}

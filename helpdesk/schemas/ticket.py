from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

TicketStatus = Literal["open", "assigned", "in_progress", "closed"]
TicketPriority = Literal["low", "medium", "high", "urgent"]

TICKET_STATUSES: tuple[str, ...] = ("open", "assigned", "in_progress", "closed")
TICKET_PRIORITIES: tuple[str, ...] = ("low", "medium", "high", "urgent")


class TicketCreate(BaseModel):
    # Emptiness is checked by the intake handler so the client gets one
    # message for any missing field.
    name: str | None = None
    email: str | None = None
    title: str | None = None
    description: str | None = None
    image_urls: list[str] | None = None


class TicketUpdate(BaseModel):
    status: TicketStatus | None = None
    priority: TicketPriority | None = None
    assigned_to: str | None = None


class TicketOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    name: str
    email: str
    status: TicketStatus
    priority: TicketPriority
    assigned_to: str | None = None
    image_urls: list[str] | None = None
    created_at: datetime
    updated_at: datetime


class TicketCreatedNotification(BaseModel):
    ticketId: str
    title: str
    email: str
    name: str

from __future__ import annotations

import uuid

from sqlalchemy import JSON, CheckConstraint, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from helpdesk.models.base import Base, TimestampMixin


class Ticket(TimestampMixin, Base):
    __tablename__ = "helpdesk_tickets"
    __table_args__ = (
        CheckConstraint(
            "status in ('open', 'assigned', 'in_progress', 'closed')",
            name="ck_helpdesk_tickets_status",
        ),
        CheckConstraint(
            "priority in ('low', 'medium', 'high', 'urgent')",
            name="ck_helpdesk_tickets_priority",
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    title: Mapped[str] = mapped_column(Text)
    description: Mapped[str] = mapped_column(Text)
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(320))
    status: Mapped[str] = mapped_column(String(20), default="open", index=True)
    priority: Mapped[str] = mapped_column(String(20), default="medium")
    assigned_to: Mapped[str | None] = mapped_column(
        ForeignKey("helpdesk_profiles.id"), index=True
    )
    image_urls: Mapped[list | None] = mapped_column(JSON)

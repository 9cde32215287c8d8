from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column

from helpdesk.models.base import Base


class Profile(Base):
    __tablename__ = "helpdesk_profiles"
    __table_args__ = (
        CheckConstraint("role in ('admin', 'agent')", name="ck_helpdesk_profiles_role"),
    )

    id: Mapped[str] = mapped_column(ForeignKey("auth_users.id"), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), index=True)
    full_name: Mapped[str | None] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(20), default="agent")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

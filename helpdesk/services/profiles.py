from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.core.errors import StorageError
from helpdesk.models.profile import Profile
from helpdesk.schemas.profile import ProfileOut

logger = structlog.get_logger(__name__)

STAFF_ROLES = ("admin", "agent")


class ProfileStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_profile(self, user_id: str) -> ProfileOut | None:
        try:
            profile = await self.session.get(Profile, user_id)
        except SQLAlchemyError as exc:
            logger.error("storage_error", stage="get_profile", user_id=user_id, error=str(exc))
            raise StorageError("Failed to load profile") from exc
        if profile is None:
            return None
        return ProfileOut.model_validate(profile)

    async def list_staff(self) -> list[ProfileOut]:
        query = (
            select(Profile)
            .where(Profile.role.in_(STAFF_ROLES))
            .order_by(Profile.full_name.asc(), Profile.email.asc())
        )
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as exc:
            logger.error("storage_error", stage="list_staff", error=str(exc))
            raise StorageError("Failed to fetch profiles") from exc
        return [ProfileOut.model_validate(item) for item in result.scalars().all()]

    async def create_profile(
        self, user_id: str, email: str, role: str, full_name: str | None = None
    ) -> ProfileOut:
        profile = Profile(id=user_id, email=email, role=role, full_name=full_name)
        self.session.add(profile)
        await self.session.flush()
        await self.session.refresh(profile)
        return ProfileOut.model_validate(profile)

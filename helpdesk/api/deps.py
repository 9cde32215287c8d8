from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.core.config import settings
from helpdesk.core.database import get_session
from helpdesk.core.errors import ForbiddenError
from helpdesk.services.auth import AuthProvider
from helpdesk.services.context import AuthContext, resolve_auth_context
from helpdesk.services.intake import TicketIntake
from helpdesk.services.notifier import NotificationRelay
from helpdesk.services.profiles import ProfileStore
from helpdesk.services.storage import BlobStorage
from helpdesk.services.ticket_desk import TicketDesk
from helpdesk.services.tickets import TicketStore

security = HTTPBearer(auto_error=False)


async def get_ticket_store(session: AsyncSession = Depends(get_session)) -> TicketStore:
    return TicketStore(session)


async def get_profile_store(session: AsyncSession = Depends(get_session)) -> ProfileStore:
    return ProfileStore(session)


async def get_auth_provider(session: AsyncSession = Depends(get_session)) -> AuthProvider:
    return AuthProvider(session)


def get_blob_storage() -> BlobStorage:
    return BlobStorage()


def get_notification_relay() -> NotificationRelay:
    return NotificationRelay()


async def get_ticket_intake(
    tickets: TicketStore = Depends(get_ticket_store),
    relay: NotificationRelay = Depends(get_notification_relay),
) -> TicketIntake:
    return TicketIntake(tickets, relay)


async def get_ticket_desk(
    tickets: TicketStore = Depends(get_ticket_store),
    profiles: ProfileStore = Depends(get_profile_store),
) -> TicketDesk:
    return TicketDesk(tickets, profiles)


def get_session_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str | None:
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_auth_context(
    token: str | None = Depends(get_session_token),
    auth: AuthProvider = Depends(get_auth_provider),
    profiles: ProfileStore = Depends(get_profile_store),
) -> AuthContext:
    return await resolve_auth_context(auth, profiles, token)


def require_role(*roles: str):
    async def _guard(context: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if context.role not in roles:
            raise ForbiddenError("Insufficient permissions")
        return context

    return _guard

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.core.config import settings
from helpdesk.core.errors import AuthError, StorageError, ValidationError
from helpdesk.models.auth_session import AuthSession
from helpdesk.models.auth_user import AuthUser
from helpdesk.utils.time import as_utc, utc_now

logger = structlog.get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class Identity:
    id: str
    email: str


@dataclass(frozen=True)
class SignInResult:
    identity: Identity
    access_token: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def create_access_token(user_id: str, session_id: str, expires_delta: timedelta) -> str:
    now = utc_now()
    payload = {
        "sub": user_id,
        "sid": session_id,
        "exp": now + expires_delta,
        "iat": now,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise AuthError("Invalid token") from exc


class AuthProvider:
    """Password sign-in backed by ``auth_users`` and revocable ``auth_sessions``.

    A token is only honoured while its session row is live, so signing out
    invalidates it immediately even though the JWT itself has not expired.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def sign_in_with_password(self, email: str, password: str) -> SignInResult:
        email = email.strip().lower()
        if not email or not password:
            raise ValidationError("Email and password are required")

        try:
            result = await self.session.execute(
                select(AuthUser).where(AuthUser.email == email)
            )
            user = result.scalars().first()
        except SQLAlchemyError as exc:
            logger.error("storage_error", stage="sign_in", error=str(exc))
            raise StorageError("Failed to sign in") from exc

        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            logger.info("sign_in_failed", email=email)
            raise AuthError("Invalid login credentials")

        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        record = AuthSession(user_id=user.id, expires_at=utc_now() + expires_delta)
        user.last_sign_in_at = utc_now()
        self.session.add(record)
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("storage_error", stage="sign_in", error=str(exc))
            raise StorageError("Failed to sign in") from exc

        logger.info("sign_in", user_id=user.id)
        token = create_access_token(user.id, record.id, expires_delta)
        return SignInResult(identity=Identity(id=user.id, email=user.email), access_token=token)

    async def get_current_user(self, token: str | None) -> Identity | None:
        if not token:
            return None
        try:
            payload = decode_token(token)
        except AuthError:
            return None
        user_id = payload.get("sub")
        session_id = payload.get("sid")
        if not user_id or not session_id:
            return None

        try:
            record = await self.session.get(AuthSession, session_id)
            if (
                record is None
                or record.user_id != user_id
                or record.revoked_at is not None
                or as_utc(record.expires_at) <= utc_now()
            ):
                return None
            user = await self.session.get(AuthUser, user_id)
        except SQLAlchemyError as exc:
            logger.error("storage_error", stage="get_current_user", error=str(exc))
            raise StorageError("Failed to load session") from exc

        if not user or not user.is_active:
            return None
        return Identity(id=user.id, email=user.email)

    async def sign_out(self, token: str | None) -> None:
        if not token:
            return
        try:
            payload = decode_token(token)
        except AuthError:
            return
        session_id = payload.get("sid")
        if not session_id:
            return
        try:
            record = await self.session.get(AuthSession, session_id)
            if record is not None and record.revoked_at is None:
                record.revoked_at = utc_now()
                await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("storage_error", stage="sign_out", error=str(exc))
            raise StorageError("Failed to sign out") from exc
        logger.info("sign_out", user_id=payload.get("sub"))

    async def create_user(self, email: str, password: str) -> Identity:
        email = email.strip().lower()
        result = await self.session.execute(select(AuthUser).where(AuthUser.email == email))
        if result.scalars().first():
            raise ValidationError(f"User already exists: {email}")
        user = AuthUser(email=email, hashed_password=hash_password(password), is_active=True)
        self.session.add(user)
        await self.session.flush()
        return Identity(id=user.id, email=user.email)

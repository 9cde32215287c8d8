from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from helpdesk.api.deps import get_auth_context, get_auth_provider, get_profile_store, get_session_token
from helpdesk.core.config import settings
from helpdesk.core.errors import NotFoundError
from helpdesk.schemas.auth import LoginRequest, MeOut, TokenResponse
from helpdesk.services.auth import AuthProvider
from helpdesk.services.context import AuthContext
from helpdesk.services.profiles import ProfileStore

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    auth: AuthProvider = Depends(get_auth_provider),
    profiles: ProfileStore = Depends(get_profile_store),
) -> TokenResponse:
    result = await auth.sign_in_with_password(payload.email, payload.password)
    profile = await profiles.get_profile(result.identity.id)
    if profile is None:
        await auth.sign_out(result.access_token)
        raise NotFoundError("Profile not found. Please contact administrator.")
    return TokenResponse(access_token=result.access_token, role=profile.role)


@router.post("/logout", response_model=dict)
async def logout(
    response: Response,
    token: str | None = Depends(get_session_token),
    auth: AuthProvider = Depends(get_auth_provider),
) -> dict:
    await auth.sign_out(token)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"success": True}


@router.get("/me", response_model=MeOut)
async def me(context: AuthContext = Depends(get_auth_context)) -> MeOut:
    return MeOut(
        id=context.user_id,
        email=context.profile.email,
        full_name=context.profile.full_name,
        role=context.role,
    )

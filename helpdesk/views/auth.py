from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from helpdesk.api.deps import get_auth_provider, get_profile_store, get_session_token
from helpdesk.core.config import settings
from helpdesk.core.errors import HelpdeskError
from helpdesk.services.auth import AuthProvider
from helpdesk.services.profiles import ProfileStore
from helpdesk.views.dashboard import ADMIN_DASHBOARD, AGENT_DASHBOARD
from helpdesk.views.templating import templates

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["views"])

ROLE_LANDING_PAGES = {
    "admin": ADMIN_DASHBOARD,
    "agent": AGENT_DASHBOARD,
}


def _render_login(request: Request, email: str = "", error: str | None = None, status_code: int = 200):
    return templates.TemplateResponse(
        request,
        "login.html",
        {"email": email, "error": error},
        status_code=status_code,
    )


@router.get("/login")
async def login_form(request: Request):
    return _render_login(request)


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    auth: AuthProvider = Depends(get_auth_provider),
    profiles: ProfileStore = Depends(get_profile_store),
):
    try:
        result = await auth.sign_in_with_password(email, password)
        profile = await profiles.get_profile(result.identity.id)
    except HelpdeskError as exc:
        return _render_login(request, email, exc.message, status_code=exc.status_code)

    if profile is None:
        logger.warning("sign_in_without_profile", user_id=result.identity.id)
        await auth.sign_out(result.access_token)
        return _render_login(
            request,
            email,
            "Profile not found. Please contact administrator.",
            status_code=404,
        )

    response = RedirectResponse(
        ROLE_LANDING_PAGES.get(profile.role, ADMIN_DASHBOARD), status_code=303
    )
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        result.access_token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.post("/logout")
async def logout(
    token: str | None = Depends(get_session_token),
    auth: AuthProvider = Depends(get_auth_provider),
):
    await auth.sign_out(token)
    response = RedirectResponse("/login", status_code=303)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response

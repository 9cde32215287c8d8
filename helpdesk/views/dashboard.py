from __future__ import annotations

from urllib.parse import quote

import structlog
from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError as PydanticValidationError

from helpdesk.api.deps import get_auth_provider, get_profile_store, get_session_token, get_ticket_desk
from helpdesk.core.errors import AuthError, HelpdeskError, NotFoundError
from helpdesk.schemas.profile import ProfileOut
from helpdesk.schemas.ticket import TICKET_PRIORITIES, TICKET_STATUSES, TicketOut, TicketUpdate
from helpdesk.services.auth import AuthProvider
from helpdesk.services.context import AuthContext, resolve_auth_context
from helpdesk.services.profiles import ProfileStore
from helpdesk.services.ticket_desk import TicketDesk
from helpdesk.views.templating import templates

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/dashboard", tags=["views"])

DASHBOARD_FILTERS = ("all",) + TICKET_STATUSES
ADMIN_DASHBOARD = "/dashboard"
AGENT_DASHBOARD = "/dashboard/agent"


class Dashboard:
    """Request-scoped copy of what one staff member sees."""

    def __init__(self, desk: TicketDesk, profiles: ProfileStore, context: AuthContext) -> None:
        self.desk = desk
        self.profiles = profiles
        self.context = context
        self.tickets: list[TicketOut] = []
        self.roster: list[ProfileOut] = []

    async def load(self) -> None:
        self.tickets = await self.desk.list_tickets(self.context)
        if self.context.is_admin:
            self.roster = await self.profiles.list_staff()

    def filtered(self, status_filter: str) -> list[TicketOut]:
        if status_filter not in TICKET_STATUSES:
            return list(self.tickets)
        return [ticket for ticket in self.tickets if ticket.status == status_filter]

    def assignee_name(self, ticket: TicketOut) -> str:
        if not ticket.assigned_to:
            return "Unassigned"
        for profile in self.roster:
            if profile.id == ticket.assigned_to:
                return profile.display_name
        if ticket.assigned_to == self.context.user_id:
            return self.context.profile.full_name or self.context.profile.email
        return ticket.assigned_to


async def get_optional_auth_context(
    token: str | None = Depends(get_session_token),
    auth: AuthProvider = Depends(get_auth_provider),
    profiles: ProfileStore = Depends(get_profile_store),
) -> AuthContext | None:
    try:
        return await resolve_auth_context(auth, profiles, token)
    except (AuthError, NotFoundError):
        return None


def _login_redirect() -> RedirectResponse:
    return RedirectResponse("/login", status_code=303)


async def _render_dashboard(
    request: Request,
    desk: TicketDesk,
    profiles: ProfileStore,
    context: AuthContext,
    status_filter: str,
    error: str | None,
):
    dashboard = Dashboard(desk, profiles, context)
    error_message = error
    status_code = 200
    try:
        await dashboard.load()
    except HelpdeskError as exc:
        error_message = exc.message
        status_code = exc.status_code

    if status_filter not in DASHBOARD_FILTERS:
        status_filter = "all"
    tickets = dashboard.filtered(status_filter)
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "dashboard": dashboard,
            "tickets": tickets,
            "is_admin": context.is_admin,
            "filters": DASHBOARD_FILTERS,
            "active_filter": status_filter,
            "statuses": TICKET_STATUSES,
            "priorities": TICKET_PRIORITIES,
            "error": error_message,
            "return_to": f"{request.url.path}?filter={status_filter}",
        },
        status_code=status_code,
    )


@router.get("")
async def admin_dashboard(
    request: Request,
    status_filter: str = Query("all", alias="filter"),
    error: str | None = None,
    desk: TicketDesk = Depends(get_ticket_desk),
    profiles: ProfileStore = Depends(get_profile_store),
    context: AuthContext | None = Depends(get_optional_auth_context),
):
    if context is None:
        return _login_redirect()
    if not context.is_admin:
        return RedirectResponse(AGENT_DASHBOARD, status_code=303)
    return await _render_dashboard(request, desk, profiles, context, status_filter, error)


@router.get("/agent")
async def agent_dashboard(
    request: Request,
    status_filter: str = Query("all", alias="filter"),
    error: str | None = None,
    desk: TicketDesk = Depends(get_ticket_desk),
    profiles: ProfileStore = Depends(get_profile_store),
    context: AuthContext | None = Depends(get_optional_auth_context),
):
    if context is None or context.role not in ("admin", "agent"):
        return _login_redirect()
    return await _render_dashboard(request, desk, profiles, context, status_filter, error)


def _safe_return_to(value: str | None, context: AuthContext) -> str:
    default = ADMIN_DASHBOARD if context.is_admin else AGENT_DASHBOARD
    if not value or not value.startswith("/dashboard") or "//" in value:
        return default
    return value


@router.post("/tickets/{ticket_id}")
async def change_ticket(
    ticket_id: str,
    request: Request,
    return_to: str | None = Form(None),
    desk: TicketDesk = Depends(get_ticket_desk),
    context: AuthContext | None = Depends(get_optional_auth_context),
):
    if context is None:
        return _login_redirect()

    form = await request.form()
    changes = {key: form[key] for key in ("status", "priority") if form.get(key)}
    if "assigned_to" in form:
        changes["assigned_to"] = form["assigned_to"] or None

    target = _safe_return_to(return_to, context)
    try:
        update = TicketUpdate.model_validate(changes)
        await desk.update_ticket(context, ticket_id, update)
    except PydanticValidationError:
        return _redirect_with_error(target, "Invalid ticket update")
    except HelpdeskError as exc:
        logger.info("dashboard_update_failed", ticket_id=ticket_id, error=exc.message)
        return _redirect_with_error(target, exc.message)
    return RedirectResponse(target, status_code=303)


def _redirect_with_error(target: str, message: str) -> RedirectResponse:
    separator = "&" if "?" in target else "?"
    return RedirectResponse(f"{target}{separator}error={quote(message)}", status_code=303)

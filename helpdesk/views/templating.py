from __future__ import annotations

from datetime import datetime

from fastapi.templating import Jinja2Templates

from helpdesk.core.config import TEMPLATES_DIR


def _label(value: str | None) -> str:
    return (value or "").replace("_", " ").upper()


def _date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["label"] = _label
templates.env.filters["date"] = _date

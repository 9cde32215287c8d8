"""Role policies for ticket access.

Each role maps to the ticket fields it may change and whether it sees every
ticket or only those assigned to it. Adding a role or a field is an edit to
``ROLE_POLICIES``; unknown roles fall back to ``DEFAULT_POLICY``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

UPDATABLE_FIELDS = frozenset({"status", "priority", "assigned_to"})


@dataclass(frozen=True)
class RolePolicy:
    mutable_fields: frozenset[str]
    sees_all_tickets: bool = False


DEFAULT_POLICY = RolePolicy(mutable_fields=frozenset())

ROLE_POLICIES: dict[str, RolePolicy] = {
    "admin": RolePolicy(mutable_fields=UPDATABLE_FIELDS, sees_all_tickets=True),
    "agent": RolePolicy(mutable_fields=frozenset({"status"})),
}


def policy_for(role: str | None) -> RolePolicy:
    return ROLE_POLICIES.get(role or "", DEFAULT_POLICY)


def split_update(role: str | None, changes: dict[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Return (allowed changes, names of dropped fields) for ``role``."""
    allowed_fields = policy_for(role).mutable_fields
    allowed = {key: value for key, value in changes.items() if key in allowed_fields}
    dropped = sorted(key for key in changes if key not in allowed_fields)
    return allowed, dropped

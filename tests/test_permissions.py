from helpdesk.services.permissions import (
    DEFAULT_POLICY,
    ROLE_POLICIES,
    UPDATABLE_FIELDS,
    policy_for,
    split_update,
)


def test_admin_may_change_every_updatable_field() -> None:
    assert ROLE_POLICIES["admin"].mutable_fields == UPDATABLE_FIELDS
    assert ROLE_POLICIES["admin"].sees_all_tickets is True


def test_agent_may_only_change_status() -> None:
    allowed, dropped = split_update(
        "agent", {"status": "closed", "priority": "urgent", "assigned_to": None}
    )
    assert allowed == {"status": "closed"}
    assert dropped == ["assigned_to", "priority"]


def test_unknown_role_falls_back_to_default_policy() -> None:
    assert policy_for("viewer") is DEFAULT_POLICY
    assert policy_for(None) is DEFAULT_POLICY
    allowed, dropped = split_update("viewer", {"status": "closed"})
    assert allowed == {}
    assert dropped == ["status"]


def test_admin_keeps_explicit_null_assignee() -> None:
    allowed, dropped = split_update("admin", {"assigned_to": None, "priority": "high"})
    assert allowed == {"assigned_to": None, "priority": "high"}
    assert dropped == []

from datetime import timedelta

from conftest import BASE_TIME

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _ticket_form(**overrides) -> dict[str, str]:
    form = {
        "name": "Dana",
        "email": "dana@example.com",
        "title": "VPN drops",
        "description": "Disconnects every ten minutes",
    }
    form.update(overrides)
    return form


def test_submission_page_renders_empty_form(client) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert "Submit Ticket" in response.text
    assert "max 5MB each" in response.text


def test_submission_stores_ticket_with_uploaded_images(client, ticket_store, blob_storage, relay) -> None:
    response = client.post(
        "/",
        data=_ticket_form(),
        files=[("images", ("screen.png", PNG, "image/png"))],
    )

    assert response.status_code == 201
    assert "Ticket submitted successfully!" in response.text
    assert len(blob_storage.calls) == 1
    (row,) = ticket_store.rows.values()
    assert row["title"] == "VPN drops"
    assert row["image_urls"] == [
        f"https://files.example.com/ticket-images/{blob_storage.calls[0]}"
    ]
    assert len(relay.payloads) == 1


def test_oversized_image_blocks_submission(client, ticket_store, blob_storage) -> None:
    big = b"\x00" * (6 * 1024 * 1024)
    response = client.post(
        "/",
        data=_ticket_form(),
        files=[("images", ("huge.png", big, "image/png"))],
    )

    assert response.status_code == 400
    assert "huge.png is too large (max 5MB)" in response.text
    assert blob_storage.calls == []
    assert ticket_store.inserts == 0


def test_non_image_attachment_is_rejected(client, blob_storage) -> None:
    response = client.post(
        "/",
        data=_ticket_form(),
        files=[("images", ("notes.txt", b"hello", "text/plain"))],
    )

    assert response.status_code == 400
    assert "notes.txt is not an image file" in response.text
    assert blob_storage.calls == []



def test_mixed_selection_names_rejected_and_accepted_files(client, blob_storage) -> None:
    response = client.post(
        "/",
        data=_ticket_form(),
        files=[
            ("images", ("screen.png", PNG, "image/png")),
            ("images", ("notes.txt", b"hello", "text/plain")),
        ],
    )

    assert response.status_code == 400
    assert "<li>notes.txt is not an image file</li>" in response.text
    assert "<figcaption>screen.png</figcaption>" in response.text
    assert "data:image/png;base64," in response.text
    assert blob_storage.calls == []

def test_submission_with_blank_field_keeps_input(client, ticket_store) -> None:
    response = client.post("/", data=_ticket_form(title="   "))

    assert response.status_code == 400
    assert "All fields are required" in response.text
    assert "dana@example.com" in response.text
    assert ticket_store.inserts == 0


def test_dashboard_without_session_redirects_to_login(client) -> None:
    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_agent_is_sent_to_agent_dashboard(client) -> None:
    client.cookies.set("helpdesk_session", "token-agent-1")

    response = client.get("/dashboard", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard/agent"


def test_admin_dashboard_lists_and_filters_tickets(client, ticket_store) -> None:
    ticket_store.seed(title="Open one", assigned_to="agent-1")
    ticket_store.seed(
        title="Closed one",
        status="closed",
        created_at=BASE_TIME + timedelta(hours=1),
    )
    client.cookies.set("helpdesk_session", "token-admin-1")

    everything = client.get("/dashboard")
    closed = client.get("/dashboard", params={"filter": "closed"})

    assert everything.status_code == 200
    assert "Admin Dashboard" in everything.text
    assert "Open one" in everything.text and "Closed one" in everything.text
    assert "Assigned to: Sam Agent" in everything.text
    assert "Closed one" in closed.text
    assert "Open one" not in closed.text


def test_agent_dashboard_hides_admin_controls(client, ticket_store) -> None:
    ticket_store.seed(title="Mine", assigned_to="agent-1")
    ticket_store.seed(title="Not mine", assigned_to="agent-2")
    client.cookies.set("helpdesk_session", "token-agent-1")

    response = client.get("/dashboard/agent")

    assert response.status_code == 200
    assert "Mine" in response.text
    assert "Not mine" not in response.text
    assert 'name="priority"' not in response.text


def test_dashboard_control_updates_ticket_and_returns(client, ticket_store) -> None:
    seeded = ticket_store.seed()
    client.cookies.set("helpdesk_session", "token-admin-1")

    response = client.post(
        f"/dashboard/tickets/{seeded.id}",
        data={"assigned_to": "agent-1", "return_to": "/dashboard?filter=open"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard?filter=open"
    assert ticket_store.rows[seeded.id]["assigned_to"] == "agent-1"


def test_dashboard_control_reports_failures(client) -> None:
    client.cookies.set("helpdesk_session", "token-admin-1")

    response = client.post(
        "/dashboard/tickets/missing",
        data={"status": "closed", "return_to": "https://evil.example.com"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard?error=Ticket%20not%20found"


def test_login_form_sets_cookie_and_redirects_by_role(client) -> None:
    response = client.post(
        "/login",
        data={"email": "agent-1@helpdesk.example.com", "password": "secret"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard/agent"
    assert "helpdesk_session=" in response.headers["set-cookie"]


def test_login_form_shows_credential_errors(client) -> None:
    response = client.post(
        "/login",
        data={"email": "agent-1@helpdesk.example.com", "password": "wrong"},
    )

    assert response.status_code == 401
    assert "Invalid login credentials" in response.text


def test_logout_clears_session(client, auth_provider) -> None:
    client.cookies.set("helpdesk_session", "token-admin-1")

    response = client.post("/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert auth_provider.signed_out == ["token-admin-1"]


def test_agent_dashboard_honours_filter_parameter(client, ticket_store) -> None:
    ticket_store.seed(title="Fixed printer", assigned_to="agent-1", status="closed")
    ticket_store.seed(title="Broken laptop", assigned_to="agent-1")
    client.cookies.set("helpdesk_session", "token-agent-1")

    response = client.get("/dashboard/agent", params={"filter": "closed"})

    assert "Fixed printer" in response.text
    assert "Broken laptop" not in response.text
    assert 'value="/dashboard/agent?filter=closed"' in response.text

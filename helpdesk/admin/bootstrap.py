from __future__ import annotations

import argparse
import asyncio
import getpass

from helpdesk.core.database import AsyncSessionLocal, close_db, init_db
from helpdesk.core.errors import ValidationError
from helpdesk.services.auth import AuthProvider
from helpdesk.services.profiles import STAFF_ROLES, ProfileStore


async def _create_staff(email: str, password: str, role: str, full_name: str | None) -> None:
    try:
        await init_db()
        async with AsyncSessionLocal() as session:
            identity = await AuthProvider(session).create_user(email, password)
            profile = await ProfileStore(session).create_profile(
                identity.id, identity.email, role, full_name=full_name
            )
            await session.commit()
    finally:
        await close_db()

    print(f"Created staff user: {profile.email} (id={profile.id}, role={profile.role})")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create a staff sign-in together with its helpdesk profile."
    )
    parser.add_argument("--email", required=True, help="Staff email (used to sign in).")
    parser.add_argument("--password", help="Password (prompted if omitted).")
    parser.add_argument("--full-name", help="Name shown in the assignee list.")
    parser.add_argument(
        "--role",
        default="agent",
        choices=STAFF_ROLES,
        help="Role to assign to the profile.",
    )
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    email = args.email.strip().lower()
    password = args.password or getpass.getpass("Password: ")
    if not password.strip():
        raise SystemExit("Password is required")

    try:
        asyncio.run(
            _create_staff(
                email=email,
                password=password,
                role=args.role,
                full_name=args.full_name,
            )
        )
    except ValidationError as exc:
        raise SystemExit(exc.message) from exc


if __name__ == "__main__":
    main()

from helpdesk.models.auth_session import AuthSession
from helpdesk.models.auth_user import AuthUser
from helpdesk.models.base import Base, TimestampMixin
from helpdesk.models.profile import Profile
from helpdesk.models.ticket import Ticket

__all__ = [
    "AuthSession",
    "AuthUser",
    "Base",
    "TimestampMixin",
    "Profile",
    "Ticket",
]

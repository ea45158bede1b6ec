from typing import Iterable

from staffdesk.core.errors import ForbiddenError
from staffdesk.schemas.auth_schema import SessionContext


REVIEWER_ROLES = frozenset({"admin", "hr"})


def is_reviewer(role: str) -> bool:
    return role in REVIEWER_ROLES


def require_roles(session: SessionContext, allowed: Iterable[str]) -> None:
    if session.role not in set(allowed):
        raise ForbiddenError()


def can_view_user_scope(session: SessionContext, user_id: str) -> bool:
    """Reviewers see everyone's records, everybody else only their own."""
    return is_reviewer(session.role) or str(user_id) == session.user_id

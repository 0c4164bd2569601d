"""Who may see and who may edit posts and pools."""

from typing import Optional

from core.models import User
from utils.errors import ForbiddenError

from .predicates import Column, Compare, IsTrue, Predicate, TRUE, any_of


def visibility_predicate(user: Optional[User], table: str = 'post') -> Predicate:
    """
    Rows of `table` the acting identity may see.

    Anonymous: public rows only. Admin: everything. Otherwise public rows
    plus the identity's own uploads.
    """
    is_public = IsTrue(Column(table, 'is_public'))
    if user is None:
        return is_public
    if user.is_admin:
        return TRUE
    return any_of(is_public, Compare(Column(table, 'uploader_id'), '=', user.id))


def can_edit(owner_id: int, user: Optional[User]) -> bool:
    if user is None:
        return False
    return user.is_admin or user.id == owner_id


def ensure_can_edit(owner_id: int, user: Optional[User]) -> None:
    if not can_edit(owner_id, user):
        raise ForbiddenError()

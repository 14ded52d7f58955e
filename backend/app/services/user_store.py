"""
Credential Store

Thin persistence layer over the User model. Uniqueness of username and email
is enforced by the database; a violation surfaces as Conflict.
"""
from typing import Optional
from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q

from app.core.errors import Conflict
from app.models.user import User


async def find_by_identifier(username: Optional[str] = None, email: Optional[str] = None) -> Optional[User]:
    """Find a user whose username OR email matches. Both are compared lower-cased."""
    conditions = []
    if username:
        conditions.append(Q(username=username.strip().lower()))
    if email:
        conditions.append(Q(email=email.strip().lower()))
    if not conditions:
        return None
    return await User.filter(Q(*conditions, join_type=Q.OR)).first()


async def find_by_id(user_id) -> Optional[User]:
    return await User.get_or_none(id=user_id)


async def create_user(**fields) -> User:
    try:
        return await User.create(**fields)
    except IntegrityError as e:
        # Lost the race against a concurrent registration
        raise Conflict("User with email or username already exists") from e


async def update_by_id(user_id, **patch) -> Optional[User]:
    """
    Column-level update that skips model save hooks; only `patch` columns change.

    Returns the refreshed user, or None when no row matched.
    """
    try:
        updated = await User.filter(id=user_id).update(**patch)
    except IntegrityError as e:
        raise Conflict("User with email or username already exists") from e
    if not updated:
        return None
    return await User.get_or_none(id=user_id)

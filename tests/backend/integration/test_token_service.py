"""
Token lifecycle against a real (in-memory) database: issue, rotate, revoke.
"""
import uuid

import pytest

from app.core.errors import InternalError, Unauthorized
from app.core.security import create_refresh_token, decode_access_token
from app.models.user import User
from app.services import tokens


pytestmark = pytest.mark.asyncio


async def test_issue_persists_refresh_token(db, create_user):
    user, password = await create_user()
    hash_before = user.password_hash

    pair = await tokens.issue(user.id)

    stored = await User.get(id=user.id)
    assert stored.refresh_token == pair.refresh_token
    # Storing the token must not touch the password hash
    assert stored.password_hash == hash_before
    assert decode_access_token(pair.access_token)["sub"] == str(user.id)


async def test_issue_for_unknown_user_is_internal_error(db):
    with pytest.raises(InternalError):
        await tokens.issue(uuid.uuid4())


async def test_verify_refresh_rotates_token(db, create_user):
    user, _ = await create_user()
    first = await tokens.issue(user.id)

    user_id, second = await tokens.verify_refresh(first.refresh_token)

    assert user_id == str(user.id)
    assert second.refresh_token != first.refresh_token
    assert (await User.get(id=user.id)).refresh_token == second.refresh_token

    # The rotated-out token is now stale
    with pytest.raises(Unauthorized, match="expired or used"):
        await tokens.verify_refresh(first.refresh_token)


async def test_issuing_new_pair_invalidates_previous_session(db, create_user):
    user, _ = await create_user()
    old = await tokens.issue(user.id)
    await tokens.issue(user.id)

    with pytest.raises(Unauthorized):
        await tokens.verify_refresh(old.refresh_token)


async def test_revoke_clears_stored_token(db, create_user):
    user, _ = await create_user()
    pair = await tokens.issue(user.id)

    await tokens.revoke(user.id)

    assert (await User.get(id=user.id)).refresh_token is None
    with pytest.raises(Unauthorized):
        await tokens.verify_refresh(pair.refresh_token)


@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
async def test_verify_refresh_rejects_missing_or_garbage(db, token):
    with pytest.raises(Unauthorized):
        await tokens.verify_refresh(token)


async def test_verify_refresh_rejects_access_token(db, create_user):
    user, _ = await create_user()
    pair = await tokens.issue(user.id)
    with pytest.raises(Unauthorized, match="Invalid refresh token"):
        await tokens.verify_refresh(pair.access_token)


async def test_verify_refresh_unknown_user(db):
    with pytest.raises(Unauthorized, match="Invalid refresh token"):
        await tokens.verify_refresh(create_refresh_token(str(uuid.uuid4())))


async def test_verify_refresh_never_issued_token(db, create_user):
    """A correctly signed token that was never stored (e.g. lost write) is rejected."""
    user, _ = await create_user()
    await tokens.issue(user.id)
    with pytest.raises(Unauthorized):
        await tokens.verify_refresh(create_refresh_token(str(user.id)))

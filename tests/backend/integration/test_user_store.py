"""
Credential store and registration failure paths that the HTTP layer cannot
reach on its own: unique-constraint races and a vanished row after insert.
"""
import pytest
from unittest.mock import AsyncMock, patch

from app.core.errors import Conflict, InternalError
from app.core.security import hash_password
from app.models.user import User
from app.services import accounts, user_store
from app.services.media_base import MediaFiles


pytestmark = pytest.mark.asyncio


def _fields(username: str, email: str) -> dict:
    return {
        "username": username,
        "email": email,
        "full_name": f"{username} Store",
        "avatar": f"https://media.test/{username}.png",
        "password_hash": hash_password("StorePass!1"),
    }


async def test_create_user_duplicate_username_is_conflict(db):
    await user_store.create_user(**_fields("dana", "dana@example.com"))
    with pytest.raises(Conflict) as exc_info:
        await user_store.create_user(**_fields("dana", "other@example.com"))
    assert exc_info.value.status_code == 409
    assert await User.filter(username="dana").count() == 1


async def test_create_user_duplicate_email_is_conflict(db):
    await user_store.create_user(**_fields("dana", "dana@example.com"))
    with pytest.raises(Conflict):
        await user_store.create_user(**_fields("erin", "dana@example.com"))


async def test_update_by_id_to_taken_email_is_conflict(db):
    await user_store.create_user(**_fields("dana", "dana@example.com"))
    erin = await user_store.create_user(**_fields("erin", "erin@example.com"))

    with pytest.raises(Conflict):
        await user_store.update_by_id(erin.id, email="dana@example.com")
    assert (await User.get(id=erin.id)).email == "erin@example.com"


async def test_update_by_id_unknown_user_returns_none(db):
    assert await user_store.update_by_id("00000000-0000-0000-0000-000000000000", full_name="Ghost") is None


async def test_find_by_identifier_needs_an_identifier(db):
    await user_store.create_user(**_fields("dana", "dana@example.com"))
    assert await user_store.find_by_identifier() is None
    assert (await user_store.find_by_identifier(email=" DANA@example.com ")).username == "dana"


async def test_register_missing_row_after_insert_is_internal_error(db, fake_uploader, tmp_path):
    avatar = tmp_path / "avatar.png"
    avatar.write_bytes(b"\x89PNG avatar")
    fields = accounts.RegistrationFields(full_name="Gone", email="gone@example.com", username="gone", password="p1")

    with patch('app.services.accounts.user_store.find_by_id', AsyncMock(return_value=None)):
        with pytest.raises(InternalError) as exc_info:
            await accounts.register_user(fields, MediaFiles(avatar=str(avatar)), fake_uploader)
    assert exc_info.value.message == "Something went wrong while registering the user"
    assert exc_info.value.status_code == 500

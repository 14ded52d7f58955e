import os
import tempfile
import uuid

TEST_DB_URL = "sqlite://:memory:"
os.environ["DATABASE_URL"] = TEST_DB_URL
os.environ.setdefault("MEDIA_BACKEND", "local")
os.environ.setdefault("MEDIA_ROOT", tempfile.mkdtemp(prefix="media-"))

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from app.api.v1.deps import get_media_uploader
from app.core import db as db_module
from app.core.security import hash_password
from app.main import app
from app.models.user import User
from app.services.media_base import MediaUploader, UploadResult

db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=db_module.TORTOISE_ORM)
    await Tortoise.generate_schemas()


class FakeUploader(MediaUploader):
    """
    In-memory media uploader: records every path it is given and returns a
    deterministic URL, or None when `fail_all` is set.
    """

    def __init__(self):
        self.calls: list = []
        self.fail_all = False

    @property
    def name(self) -> str:
        return "Fake"

    def is_available(self) -> bool:
        return True

    async def upload(self, local_path):
        self.calls.append(local_path)
        if not local_path or self.fail_all:
            return None
        assert os.path.exists(local_path), "router must hand over a real local file"
        return UploadResult(url=f"https://media.test/{os.path.basename(local_path)}")


@pytest_asyncio.fixture
async def db():
    """
    Fresh database for service-level tests that do not need HTTP.
    """
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def fake_uploader():
    return FakeUploader()


@pytest_asyncio.fixture
async def client(fake_uploader):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB
    and the fake media uploader.
    """
    await _init_test_db()
    app.dependency_overrides[get_media_uploader] = lambda: fake_uploader
    # Use ASGITransport without lifespan parameter (not supported in all httpx versions)
    try:
        transport = ASGITransport(app=app, lifespan="off")
    except TypeError:
        # Fallback for httpx versions that don't support lifespan parameter
        transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create users directly via ORM.
    """

    async def _create_user(username: str | None = None, password: str = "UserPass!23") -> tuple[User, str]:
        username = username or f"user_{uuid.uuid4().hex[:6]}"
        user = await User.create(
            username=username.lower(),
            email=f"{username.lower()}@example.com",
            full_name=f"{username} Test",
            avatar=f"https://media.test/{username}.png",
            password_hash=hash_password(password),
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(username: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/v1/users/login",
            json={"username": username, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["data"]["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers

"""
Shared fixtures: an app per test backed by a throwaway SQLite database.
"""

from __future__ import annotations

import uuid

import pytest
from httpx import ASGITransport, AsyncClient

from orgboard.core.config import Settings
from orgboard.core.database import init_db
from orgboard.main import create_app
from orgboard.models.user import User


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'orgboard.db'}",
        jwt_secret="test-access-secret",
        jwt_refresh_secret="test-refresh-secret",
        bcrypt_rounds=4,
        rate_limit_enabled=False,
    )


@pytest.fixture
async def app(settings):
    app = create_app(settings)
    await init_db(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class Account:
    """A registered user and the headers to act as them."""

    def __init__(self, payload: dict):
        self.id = payload["user"]["id"]
        self.email = payload["user"]["email"]
        self.access_token = payload["tokens"]["accessToken"]
        self.refresh_token = payload["tokens"]["refreshToken"]
        self.headers = {"Authorization": f"Bearer {self.access_token}"}


@pytest.fixture
def register(client):
    """Factory: register a user and return an ``Account``."""

    async def _register(email: str, first_name: str = "Test", last_name: str = "User") -> Account:
        response = await client.post(
            "/api/v1/auth/register",
            json={
                "email": email,
                "password": "password123",
                "firstName": first_name,
                "lastName": last_name,
            },
        )
        assert response.status_code == 201, response.text
        return Account(response.json())

    return _register


@pytest.fixture
def deactivate(app):
    """Factory: mark a user inactive directly in the database."""

    async def _deactivate(user_id: str) -> None:
        async with app.state.session_factory() as session:
            user = await session.get(User, uuid.UUID(user_id))
            user.is_active = False
            await session.commit()

    return _deactivate


@pytest.fixture
async def alice(register):
    return await register("alice@example.com", "Alice", "Owner")


@pytest.fixture
async def bob(register):
    return await register("bob@example.com", "Bob", "Member")


@pytest.fixture
async def carol(register):
    return await register("carol@example.com", "Carol", "Outsider")


@pytest.fixture
async def org(client, alice):
    """An organization owned by alice."""
    response = await client.post(
        "/api/v1/organizations",
        json={"name": "Tech Corp", "description": "Builds things"},
        headers=alice.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
async def bob_in_org(client, alice, bob, org):
    """Bob invited into alice's org with the plain member role."""
    response = await client.post(
        f"/api/v1/organizations/{org['id']}/members",
        json={"email": bob.email, "role": "member"},
        headers=alice.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
async def project(client, alice, org):
    response = await client.post(
        "/api/v1/projects",
        json={"name": "Launch", "organizationId": org["id"]},
        headers=alice.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
async def task(client, alice, project):
    response = await client.post(
        "/api/v1/tasks",
        json={"title": "Write launch plan", "projectId": project["id"]},
        headers=alice.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()

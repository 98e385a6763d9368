"""
Snippetbox — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite database (aiosqlite) in a temporary
       directory, a fully wired app built by `create_app()`, and an HTTPX
       AsyncClient talking to it over ASGITransport.

Fixture Hierarchy:
    test_settings        Settings pointing at a per-test SQLite file
    └── app              create_app(test_settings) with all tables created
        ├── application  The dependency container (app.state.application)
        │   └── session_factory
        ├── test_client  Anonymous HTTPS client
        └── authenticated_client
                         Client whose session cookie belongs to a real user

The base URL is https:// so that cookies marked Secure are sent back.
"""

import base64
import os
import re
from datetime import datetime, timezone
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./snippetbox_test.db"
os.environ["SECRET_KEY"] = "test-secret-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from snippetbox.config import Settings  # noqa: E402
from snippetbox.database import Base, build_session_factory  # noqa: E402
from snippetbox.main import create_app  # noqa: E402
from snippetbox.middleware.csrf import mask_token  # noqa: E402
from snippetbox.models.user import User  # noqa: E402
from snippetbox.sessions import AUTHENTICATED_USER_ID_KEY, Session  # noqa: E402

BASE_URL = "https://test"

_CSRF_INPUT = re.compile(r"name='csrf_token' value='([^']+)'")


def extract_csrf_token(html: str) -> Optional[str]:
    """The masked CSRF token embedded in a rendered form, if any."""
    match = _CSRF_INPUT.search(html)
    return match.group(1) if match else None


def csrf_header(client: AsyncClient) -> dict:
    """
    An X-CSRF-Token header matching the client's CSRF cookie.

    The client must already hold the cookie (any prior dynamic GET issues it).
    """
    value = client.cookies.get("csrf_token")
    raw = base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))
    return {"X-CSRF-Token": mask_token(raw)}


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'snippetbox.db'}",
        secret_key="test-secret-key-not-real",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """
    A fully wired application on an empty, migrated database.

    ASGITransport does not run the lifespan, so tables are created here and
    the engine is disposed afterwards.
    """
    application = create_app(test_settings)
    engine = application.state.application.engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield application
    await engine.dispose()


@pytest.fixture
def application(app):
    return app.state.application


@pytest.fixture
def session_factory(application):
    return build_session_factory(application.engine)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Anonymous async HTTP client for endpoint testing.

    Usage:
        async def test_ping(test_client):
            response = await test_client.get("/ping")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest_asyncio.fixture
async def user(session_factory):
    """A stored user account."""
    account = User(
        name="Alice",
        email="alice@example.com",
        hashed_password="$2a$12$" + "x" * 53,
        created=datetime.now(timezone.utc),
    )
    async with session_factory() as db:
        db.add(account)
        await db.commit()
    return account


@pytest_asyncio.fixture
async def authenticated_client(app, application, user):
    """
    Client whose session cookie carries the stored user's id.

    The session is committed straight through the session manager, the same
    way a login handler would after checking credentials.
    """
    signed, _ = await application.sessions.commit(
        Session(values={AUTHENTICATED_USER_ID_KEY: user.id})
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url=BASE_URL,
        cookies={application.settings.session_cookie_name: signed},
    ) as client:
        yield client

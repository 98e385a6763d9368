"""
Snippetbox — Middleware Integration Tests
==========================================

What:  Tests for the standard chain (recovery, request logging, security
       headers) and the dynamic chain stages (session, CSRF, authentication).
How:   Requests go through the fully wired app via HTTPX.

What we test:
    ✅ Security headers on every response, static files and errors included
    ✅ One access-log line per request
    ✅ Unhandled errors become 500 with Connection: close
    ✅ Routing failures answer in plain text (404, 405 + Allow)
    ✅ CSRF: cookie issued once, unsafe methods need a matching token
    ✅ Protected routes redirect anonymous clients to the login page
    ✅ A session pointing at a deleted user is not authenticated
"""

import logging
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import delete

from conftest import csrf_header
from snippetbox.exceptions import DatabaseError
from snippetbox.middleware.csrf import TOKEN_LENGTH, mask_token, unmask_token
from snippetbox.middleware.security_headers import SECURITY_HEADERS
from snippetbox.models.user import User


def assert_security_headers(response):
    for name, value in SECURITY_HEADERS.items():
        assert response.headers[name] == value


class TestStandardChain:

    @pytest.mark.asyncio
    async def test_ping(self, test_client):
        response = await test_client.get("/ping")

        assert response.status_code == 200
        assert response.text == "OK"
        assert_security_headers(response)
        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    async def test_static_file(self, test_client):
        response = await test_client.get("/static/css/main.css")

        assert response.status_code == 200
        assert_security_headers(response)
        assert "set-cookie" not in response.headers

    @pytest.mark.asyncio
    async def test_unknown_path_is_plain_404(self, test_client):
        response = await test_client.get("/no/such/page")

        assert response.status_code == 404
        assert response.text == "Not Found"
        assert_security_headers(response)

    @pytest.mark.asyncio
    async def test_wrong_method_is_405_with_allow(self, test_client):
        response = await test_client.delete("/ping")

        assert response.status_code == 405
        assert response.text == "Method Not Allowed"
        assert "GET" in response.headers["allow"]

    @pytest.mark.asyncio
    async def test_request_is_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="snippetbox.access")

        await test_client.get("/ping?probe=1")

        records = [r for r in caplog.records if r.name == "snippetbox.access"]
        assert len(records) == 1
        assert records[0].getMessage().endswith("HTTP/1.1 GET /ping?probe=1")

    @pytest.mark.asyncio
    async def test_unhandled_error_is_recovered(self, test_client, application, monkeypatch):
        monkeypatch.setattr(
            application.snippets, "latest", AsyncMock(side_effect=RuntimeError("boom"))
        )

        response = await test_client.get("/")

        assert response.status_code == 500
        assert response.text == "Internal Server Error"
        assert response.headers["connection"] == "close"
        assert_security_headers(response)

    @pytest.mark.asyncio
    async def test_store_failure_is_server_error(self, test_client, application, monkeypatch):
        monkeypatch.setattr(
            application.snippets, "latest", AsyncMock(side_effect=DatabaseError())
        )

        response = await test_client.get("/")

        assert response.status_code == 500
        assert response.text == "Internal Server Error"
        assert "connection" not in response.headers


class TestCSRF:

    def test_mask_round_trip(self):
        token = bytes(range(TOKEN_LENGTH))
        first, second = mask_token(token), mask_token(token)

        assert first != second
        assert unmask_token(first) == token
        assert unmask_token(second) == token

    def test_unmask_rejects_garbage(self):
        assert unmask_token("") is None
        assert unmask_token("not a token!") is None
        assert unmask_token("YWJj") is None

    @pytest.mark.asyncio
    async def test_cookie_issued_once(self, test_client):
        first = await test_client.get("/")
        assert "csrf_token=" in first.headers["set-cookie"]

        second = await test_client.get("/")
        assert "csrf_token=" not in second.headers.get("set-cookie", "")
        assert second.headers.get_list("vary") == ["Cookie"]

    @pytest.mark.asyncio
    async def test_post_without_token_is_rejected(self, test_client):
        await test_client.get("/")
        response = await test_client.post("/user/login", data={"email": "a@b.c"})

        assert response.status_code == 400
        assert response.text == "Bad Request"

    @pytest.mark.asyncio
    async def test_post_with_wrong_token_is_rejected(self, test_client):
        await test_client.get("/")
        forged = mask_token(b"\x00" * TOKEN_LENGTH)
        response = await test_client.post("/user/login", data={"csrf_token": forged})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_post_without_cookie_is_rejected(self, test_client):
        forged = mask_token(b"\x00" * TOKEN_LENGTH)
        response = await test_client.post("/user/login", headers={"X-CSRF-Token": forged})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_post_with_header_token(self, test_client):
        await test_client.get("/")
        response = await test_client.post("/user/login", headers=csrf_header(test_client))

        assert response.status_code == 200
        assert response.text == "Authenticate and login the user..."


class TestAuthentication:

    @pytest.mark.asyncio
    async def test_anonymous_create_redirects_to_login(self, test_client):
        response = await test_client.get("/snippet/create")

        assert response.status_code == 303
        assert response.headers["location"] == "/user/login"

    @pytest.mark.asyncio
    async def test_authenticated_create_is_not_cached(self, authenticated_client):
        response = await authenticated_client.get("/snippet/create")

        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"

    @pytest.mark.asyncio
    async def test_nav_reflects_authentication(self, test_client, authenticated_client):
        anonymous = await test_client.get("/")
        assert "Login" in anonymous.text
        assert "Create snippet" not in anonymous.text

        signed_in = await authenticated_client.get("/")
        assert "Logout" in signed_in.text
        assert "Create snippet" in signed_in.text

    @pytest.mark.asyncio
    async def test_deleted_user_is_not_authenticated(
        self, authenticated_client, session_factory, user
    ):
        async with session_factory() as db:
            await db.execute(delete(User).where(User.id == user.id))
            await db.commit()

        response = await authenticated_client.get("/snippet/create")

        assert response.status_code == 303
        assert response.headers["location"] == "/user/login"

    @pytest.mark.asyncio
    async def test_logout_requires_authentication(self, test_client):
        await test_client.get("/")
        response = await test_client.post("/user/logout", headers=csrf_header(test_client))

        assert response.status_code == 303

    @pytest.mark.asyncio
    async def test_logout_placeholder(self, authenticated_client):
        await authenticated_client.get("/")
        response = await authenticated_client.post(
            "/user/logout", headers=csrf_header(authenticated_client)
        )

        assert response.status_code == 200
        assert response.text == "Logout the user..."

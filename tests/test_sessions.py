"""
Snippetbox — Session Unit Tests
================================

What:  Tests for Session, SessionManager and the SQL-backed SessionStore.
How:   Runs against the per-test SQLite database.

What we test:
    ✅ Session value helpers (get_int, pop_string, modified flag)
    ✅ Commit then load returns the same values
    ✅ Missing, tampered and expired cookies yield a new session
    ✅ save() writes, skips or clears the cookie as appropriate
    ✅ delete_expired() prunes only expired rows
"""

from datetime import datetime, timedelta, timezone

import pytest
from starlette.responses import Response

from snippetbox.sessions import FLASH_KEY, Session, vary_on_cookie


class TestSession:

    def test_get_int(self):
        s = Session(values={"id": 7, "flag": True, "name": "x"})
        assert s.get_int("id") == 7
        assert s.get_int("flag") == 0
        assert s.get_int("name") == 0
        assert s.get_int("missing") == 0

    def test_pop_string_removes_value(self):
        s = Session(values={FLASH_KEY: "Saved!"})
        assert s.pop_string(FLASH_KEY) == "Saved!"
        assert s.pop_string(FLASH_KEY) == ""
        assert s.modified

    def test_pop_string_absent_key_leaves_session_unmodified(self):
        s = Session()
        assert s.pop_string(FLASH_KEY) == ""
        assert not s.modified

    def test_put_and_remove_mark_modified(self):
        s = Session()
        s.put("k", "v")
        assert s.modified
        assert s.values == {"k": "v"}

        fresh = Session(values={"k": "v"})
        fresh.remove("k")
        assert fresh.modified
        assert fresh.values == {}

    def test_values_is_a_copy(self):
        s = Session(values={"k": 1})
        s.values["k"] = 2
        assert s.get("k") == 1


class TestSessionManager:

    @pytest.mark.asyncio
    async def test_commit_then_load(self, application):
        manager = application.sessions
        session = Session()
        session.put("answer", 42)

        signed, expiry = await manager.commit(session)
        loaded = await manager.load(signed)

        assert session.token is not None
        assert loaded.token == session.token
        assert loaded.get_int("answer") == 42
        assert not loaded.modified
        assert expiry > datetime.now(timezone.utc)

    @pytest.mark.asyncio
    async def test_missing_cookie_gives_new_session(self, application):
        session = await application.sessions.load(None)
        assert session.token is None
        assert session.values == {}

    @pytest.mark.asyncio
    async def test_tampered_cookie_gives_new_session(self, application):
        manager = application.sessions
        session = Session(values={"answer": 42})
        signed, _ = await manager.commit(session)

        loaded = await manager.load(signed[:-2] + "xx")
        assert loaded.token is None
        assert loaded.values == {}

    @pytest.mark.asyncio
    async def test_expired_session_is_invisible(self, application):
        manager = application.sessions
        session = Session(values={"answer": 42})
        signed, _ = await manager.commit(session)
        await manager.store.commit(
            session.token, session.values, datetime.now(timezone.utc) - timedelta(minutes=1)
        )

        loaded = await manager.load(signed)
        assert loaded.values == {}

    @pytest.mark.asyncio
    async def test_save_unmodified_sets_no_cookie(self, application):
        response = Response()
        await application.sessions.save(Session(), response)

        assert "set-cookie" not in response.headers
        assert response.headers["vary"] == "Cookie"

    @pytest.mark.asyncio
    async def test_save_modified_sets_cookie(self, application):
        session = Session()
        session.put(FLASH_KEY, "hello")
        response = Response()

        await application.sessions.save(session, response)

        cookie = response.headers["set-cookie"]
        assert cookie.startswith("session=")
        assert "HttpOnly" in cookie
        assert "Secure" in cookie
        assert "SameSite=lax" in cookie
        assert "Max-Age=43200" in cookie
        assert await application.sessions.store.find(session.token) == {FLASH_KEY: "hello"}

    @pytest.mark.asyncio
    async def test_save_emptied_session_clears_cookie(self, application):
        manager = application.sessions
        session = Session(values={FLASH_KEY: "hello"})
        await manager.commit(session)

        session.remove(FLASH_KEY)
        response = Response()
        await manager.save(session, response)

        assert "Max-Age=0" in response.headers["set-cookie"]
        assert await manager.store.find(session.token) is None

    @pytest.mark.asyncio
    async def test_delete_expired(self, application):
        store = application.sessions.store
        now = datetime.now(timezone.utc)
        await store.commit("live", {"k": 1}, now + timedelta(hours=1))
        await store.commit("dead", {"k": 2}, now - timedelta(hours=1))

        assert await application.sessions.delete_expired() == 1
        assert await store.find("live") == {"k": 1}


class TestVaryOnCookie:

    def test_added_once(self):
        response = Response()
        vary_on_cookie(response)
        vary_on_cookie(response)
        assert response.headers.getlist("vary") == ["Cookie"]

    def test_keeps_other_values(self):
        response = Response(headers={"Vary": "Accept-Encoding"})
        vary_on_cookie(response)
        assert response.headers.getlist("vary") == ["Accept-Encoding", "Cookie"]

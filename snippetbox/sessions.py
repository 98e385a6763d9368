"""
Snippetbox — Server-Side Sessions
==================================

What:  Per-client session state kept in the relational store and referenced
       by a signed cookie.
How:   The cookie carries `<token>.<signature>` (itsdangerous Signer). On each
       dynamic request the session is loaded from the SessionStore, handlers
       read and write it through `Session`, and the load-and-save stage hands
       it back to `SessionManager.save()` once the handler has returned.

Lifecycle:
    - A session gets a token and a row the first time it is written to.
    - Every commit pushes the expiry to now + lifetime and re-issues the
      cookie with the same lifetime.
    - A session whose values are all removed is deleted and its cookie
      cleared.
    - Rows past their expiry are invisible to `load()` and are pruned at
      startup.

Concurrency:
    Two in-flight requests from the same client each load their own copy;
    whichever commits last wins. No locking is applied.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from itsdangerous import BadSignature, Signer
from starlette.responses import Response

from snippetbox.services.session_store import SessionStore

logger = logging.getLogger(__name__)

# Session keys used across the application
FLASH_KEY = "flash"
AUTHENTICATED_USER_ID_KEY = "authenticatedUserID"


def vary_on_cookie(response: Response) -> None:
    """Add `Vary: Cookie` to `response` unless it is already there."""
    if "Cookie" not in response.headers.getlist("Vary"):
        response.headers.append("Vary", "Cookie")


class Session:
    """
    The key/value state of one client for the duration of one request.

    Attributes:
        token:     Raw store token, None until the first commit
        modified:  True once any value has been written or removed
    """

    def __init__(self, token: Optional[str] = None, values: Optional[Dict[str, Any]] = None):
        self.token = token
        self._values: Dict[str, Any] = dict(values or {})
        self.modified = False

    @property
    def values(self) -> Dict[str, Any]:
        return dict(self._values)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def get_int(self, key: str) -> int:
        """The integer stored under `key`, or 0 if absent or not an integer."""
        value = self._values.get(key)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return 0

    def put(self, key: str, value: Any) -> None:
        self._values[key] = value
        self.modified = True

    def pop_string(self, key: str) -> str:
        """
        Read and remove a string value (used for one-shot flash messages).

        Returns "" when the key is absent; an absent key leaves the session
        unmodified.
        """
        if key not in self._values:
            return ""
        value = self._values.pop(key)
        self.modified = True
        return value if isinstance(value, str) else ""

    def remove(self, key: str) -> None:
        if key in self._values:
            del self._values[key]
            self.modified = True


class SessionManager:
    """
    Loads and commits sessions and writes the session cookie.

    Cookie attributes: Path=/, HttpOnly, SameSite=Lax, Max-Age=lifetime and
    Secure unless disabled in the settings.
    """

    def __init__(
        self,
        store: SessionStore,
        secret_key: str,
        lifetime: timedelta = timedelta(hours=12),
        cookie_name: str = "session",
        cookie_secure: bool = True,
    ):
        self.store = store
        self.lifetime = lifetime
        self.cookie_name = cookie_name
        self.cookie_secure = cookie_secure
        self._signer = Signer(secret_key, salt="snippetbox.session")

    async def load(self, cookie_value: Optional[str]) -> Session:
        """
        The session referenced by a cookie value.

        A missing cookie, a bad signature, an unknown token or an expired
        session all yield a new empty session.

        Raises:
            DatabaseError: The store lookup failed
        """
        if not cookie_value:
            return Session()

        try:
            token = self._signer.unsign(cookie_value).decode("utf-8")
        except BadSignature:
            logger.debug("Ignoring session cookie with an invalid signature")
            return Session()

        values = await self.store.find(token)
        if values is None:
            return Session()
        return Session(token=token, values=values)

    async def commit(self, session: Session) -> Tuple[str, datetime]:
        """
        Persist the session, assigning a token on first commit.

        Returns:
            (signed cookie value, expiry)

        Raises:
            DatabaseError: The store write failed
        """
        if session.token is None:
            session.token = secrets.token_urlsafe(32)
        expiry = datetime.now(timezone.utc) + self.lifetime
        await self.store.commit(session.token, session.values, expiry)
        signed = self._signer.sign(session.token).decode("utf-8")
        return signed, expiry

    async def save(self, session: Session, response: Response) -> None:
        """
        Commit a modified session and write (or clear) its cookie on
        `response`. Unmodified sessions are left untouched.
        """
        vary_on_cookie(response)
        if not session.modified:
            return

        if not session.values:
            if session.token is not None:
                await self.store.delete(session.token)
                response.delete_cookie(
                    self.cookie_name,
                    path="/",
                    secure=self.cookie_secure,
                    httponly=True,
                    samesite="lax",
                )
            return

        signed, _ = await self.commit(session)
        response.set_cookie(
            self.cookie_name,
            signed,
            max_age=int(self.lifetime.total_seconds()),
            path="/",
            secure=self.cookie_secure,
            httponly=True,
            samesite="lax",
        )

    async def delete_expired(self) -> int:
        return await self.store.delete_expired()

"""
Snippetbox — Session SQLAlchemy Model
======================================

What:  ORM model for the `sessions` table backing the session manager.
How:   One row per session token. `data` holds the JSON-encoded key/value
       mapping; `expiry` is pushed forward on every commit.

Index on expiry:
    Used by the lookup filter (expiry > now) and by the start-up prune of
    expired rows.
"""

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from snippetbox.database import Base


class SessionRecord(Base):
    """Persisted session state keyed by its (unsigned) token."""

    __tablename__ = "sessions"

    # secrets.token_urlsafe(32) always yields 43 characters
    token: Mapped[str] = mapped_column(String(43), primary_key=True)

    data: Mapped[str] = mapped_column(Text, nullable=False)

    expiry: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_sessions_expiry", "expiry"),
    )

    def __repr__(self) -> str:
        return f"<SessionRecord(token='{self.token[:6]}...', expiry='{self.expiry}')>"

"""
Snippetbox — ORM Models
========================

Importing this package registers every table with `Base.metadata`, which is
what Alembic and the test fixtures rely on.
"""

from snippetbox.models.session import SessionRecord
from snippetbox.models.snippet import Snippet
from snippetbox.models.user import User

__all__ = ["SessionRecord", "Snippet", "User"]

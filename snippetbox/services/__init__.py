"""
Snippetbox — Services Layer
============================

What:  Data-access objects sitting between the route handlers and the
       relational store.

Service Inventory:
    - SnippetService: insert / get / latest over `snippets`
    - UserService:    existence check over `users`
    - SessionStore:   JSON session rows in `sessions`

Each service owns nothing but the shared async session factory, so a single
instance is safe to use from concurrent requests.
"""

from snippetbox.services.session_store import SessionStore
from snippetbox.services.snippet_service import SnippetService
from snippetbox.services.user_service import UserService

__all__ = ["SessionStore", "SnippetService", "UserService"]

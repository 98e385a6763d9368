"""
Snippetbox — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the failure modes the request
       pipeline distinguishes.
How:   Each exception carries a message and an optional context dict. The
       services raise them; handlers translate them into explicit responses
       through the helpers in `snippetbox.helpers`.

Exception Hierarchy:
    SnippetboxError (base)
    ├── NotFoundError          → 404 Not Found (store returned no row)
    ├── DatabaseError          → 500 Internal Server Error
    ├── TemplateNotFoundError  → 500 Internal Server Error (cache miss)
    └── FormDecodeError        → 400 Bad Request (malformed form body)

Security Note:
    `context` is logged server-side only. Clients receive a plain status text
    body for every error.
"""

from typing import Any, Dict, Optional


class SnippetboxError(Exception):
    """
    Base exception for all Snippetbox application errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info (logged, never returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class NotFoundError(SnippetboxError):
    """
    Raised when a requested record does not exist (or is no longer visible).

    The services convert SQLAlchemy's `None` result into this exception so
    handlers can tell "absent" apart from "broken".
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(SnippetboxError):
    """
    Raised when a database operation fails unexpectedly.

    When:    Connection lost mid-query, constraint violation, deadlock, etc.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class TemplateNotFoundError(SnippetboxError):
    """
    Raised when a handler asks for a page that is not in the template cache.

    This is a cache-construction bug, never a consequence of user input.
    """

    def __init__(self, page: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["page"] = page
        super().__init__(message=f"the template {page} does not exist", context=ctx)
        self.page = page


class FormDecodeError(SnippetboxError):
    """
    Raised when a posted form cannot be parsed or decoded into its schema.

    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "The submitted form could not be decoded",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

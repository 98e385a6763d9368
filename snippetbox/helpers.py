"""
Snippetbox — Response Helpers
==============================

What:  The functions handlers use to turn outcomes into responses: error
       responses, page rendering, template data and form decoding.
How:   Failures are returned as explicit responses instead of being raised,
       so a handler always ends by returning one of these.

Error responses:
    client_error(status) → plain status text ("Bad Request", ...)
    not_found()          → 404 "Not Found"
    server_error(exc)    → 500 "Internal Server Error"; the exception, its
                           context and a stack trace go to the log only
"""

import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Mapping, Optional, Type, TypeVar

from jinja2 import Template
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import Request
from starlette.responses import HTMLResponse, PlainTextResponse, Response

from snippetbox.context import get_context
from snippetbox.exceptions import FormDecodeError, SnippetboxError, TemplateNotFoundError
from snippetbox.sessions import FLASH_KEY
from snippetbox.templates import TemplateData

logger = logging.getLogger(__name__)

FormT = TypeVar("FormT", bound=BaseModel)


def server_error(exc: BaseException) -> Response:
    """Log `exc` with a stack trace and answer with a generic 500."""
    context = exc.context if isinstance(exc, SnippetboxError) else {}
    logger.error(
        "%s: %s | Context: %s",
        type(exc).__name__,
        exc,
        context,
        exc_info=exc,
        stack_info=True,
    )
    return client_error(HTTPStatus.INTERNAL_SERVER_ERROR)


def client_error(status: int, headers: Optional[Mapping[str, str]] = None) -> Response:
    return PlainTextResponse(
        HTTPStatus(status).phrase,
        status_code=status,
        headers=headers,
    )


def not_found() -> Response:
    return client_error(HTTPStatus.NOT_FOUND)


def render(
    templates: Mapping[str, Template],
    status: int,
    page: str,
    data: TemplateData,
) -> Response:
    """
    Render a cached page into a complete HTML response.

    The page is rendered to a string first; the status code and body are only
    committed once rendering succeeded, so a failing template produces a
    clean 500 and never a truncated page.
    """
    template = templates.get(page)
    if template is None:
        return server_error(TemplateNotFoundError(page))

    try:
        body = template.render(dict(data))
    except Exception as exc:
        return server_error(exc)

    return HTMLResponse(body, status_code=status)


def new_template_data(request: Request) -> TemplateData:
    """
    Fresh template data for this request.

    Pops the flash message from the session, so it is shown exactly once.
    """
    context = get_context(request)
    flash = context.session.pop_string(FLASH_KEY) if context.session is not None else ""
    return TemplateData(
        current_year=datetime.now(timezone.utc).year,
        flash=flash,
        csrf_token=context.csrf_token,
        is_authenticated=context.is_authenticated,
    )


async def decode_post_form(request: Request, schema: Type[FormT]) -> FormT:
    """
    Parse the request body and decode its fields into `schema`.

    Raises:
        FormDecodeError: The body is malformed or a field cannot be converted
                         to its declared type
    """
    try:
        form = await request.form()
    except (MultiPartException, HTTPException) as e:
        raise FormDecodeError(context={"error": str(e)}) from e

    try:
        return schema.model_validate(dict(form))
    except ValidationError as e:
        raise FormDecodeError(
            context={"fields": [".".join(map(str, err["loc"])) for err in e.errors()]},
        ) from e

"""
Snippetbox — Snippet Route Handlers
====================================

What:  Home page, snippet detail page and the snippet-create form.
How:   Each handler takes the request, talks to SnippetService and ends by
       returning a response built by `snippetbox.helpers`. Store failures are
       answered with explicit error responses; nothing is left to propagate.

Route Inventory:
    GET  /                    home         (dynamic chain)
    GET  /snippet/view/{id}   view         (dynamic chain)
    GET  /snippet/create      create       (protected chain)
    POST /snippet/create      create_post  (protected chain)
"""

import logging
import re
from http import HTTPStatus
from typing import Optional

from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from snippetbox.application import Application
from snippetbox.context import get_context
from snippetbox.exceptions import DatabaseError, FormDecodeError, NotFoundError
from snippetbox.helpers import (
    client_error,
    decode_post_form,
    new_template_data,
    not_found,
    render,
    server_error,
)
from snippetbox.schemas.snippet import SnippetCreateForm
from snippetbox.sessions import FLASH_KEY
from snippetbox.validator import max_chars, not_blank, permitted_int

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r"[+-]?[0-9]+")

# Largest value the snippets.id INTEGER column can hold
MAX_ID = 2**31 - 1

# Expiry pre-selected on an empty create form
DEFAULT_EXPIRY_DAYS = 365


def parse_id(raw: str) -> Optional[int]:
    """A positive integer id within the column range, or None for anything else."""
    if not _ID_PATTERN.fullmatch(raw):
        return None
    value = int(raw)
    return value if 1 <= value <= MAX_ID else None


class SnippetHandlers:
    """Snippet pages, bound to the application container."""

    def __init__(self, app: Application):
        self.app = app

    async def home(self, request: Request) -> Response:
        try:
            snippets = await self.app.snippets.latest()
        except DatabaseError as exc:
            return server_error(exc)

        data = new_template_data(request)
        data.snippets = snippets
        return render(self.app.templates, HTTPStatus.OK, "home.html", data)

    async def view(self, request: Request) -> Response:
        """
        Detail page for one snippet.

        An id that is not a positive integer answers 404, exactly like an id
        that matches no visible snippet.
        """
        snippet_id = parse_id(request.path_params["id"])
        if snippet_id is None:
            return not_found()

        try:
            snippet = await self.app.snippets.get(snippet_id)
        except NotFoundError:
            return not_found()
        except DatabaseError as exc:
            return server_error(exc)

        data = new_template_data(request)
        data.snippet = snippet
        return render(self.app.templates, HTTPStatus.OK, "view.html", data)

    async def create(self, request: Request) -> Response:
        data = new_template_data(request)
        data.form = SnippetCreateForm(expires=DEFAULT_EXPIRY_DAYS)
        return render(self.app.templates, HTTPStatus.OK, "create.html", data)

    async def create_post(self, request: Request) -> Response:
        """
        Validate and store a new snippet.

        Outcomes:
            400 - the body could not be decoded
            422 - validation failed; the form is re-rendered with the
                  submitted values and one message per failing field
            303 - stored; redirect to the new snippet with a flash message
        """
        try:
            form = await decode_post_form(request, SnippetCreateForm)
        except FormDecodeError as exc:
            logger.info("Rejected snippet form: %s | Context: %s", exc.message, exc.context)
            return client_error(HTTPStatus.BAD_REQUEST)

        permitted = self.app.settings.permitted_expiry_days
        form.check_field(not_blank(form.title), "title", "This field cannot be blank")
        form.check_field(
            max_chars(form.title, 100),
            "title",
            "This field cannot be more than 100 characters long",
        )
        form.check_field(not_blank(form.content), "content", "This field cannot be blank")
        form.check_field(
            permitted_int(form.expires, *permitted),
            "expires",
            "This field must equal " + _humanize_choices(permitted),
        )

        if not form.valid():
            data = new_template_data(request)
            data.form = form
            return render(
                self.app.templates, HTTPStatus.UNPROCESSABLE_ENTITY, "create.html", data
            )

        try:
            snippet_id = await self.app.snippets.insert(form.title, form.content, form.expires)
        except DatabaseError as exc:
            return server_error(exc)

        session = get_context(request).session
        if session is not None:
            session.put(FLASH_KEY, "Snippet successfully created!")

        return RedirectResponse(f"/snippet/view/{snippet_id}", status_code=HTTPStatus.SEE_OTHER)


def _humanize_choices(choices) -> str:
    """[1, 7, 365] → "1, 7 or 365"."""
    values = [str(c) for c in choices]
    if len(values) < 2:
        return "".join(values)
    return ", ".join(values[:-1]) + " or " + values[-1]

"""
Snippetbox — Application Dependency Container
==============================================

What:  The immutable bundle of shared dependencies: settings, data-access
       services, session manager, template cache and the engine they share.
How:   `build_application()` assembles it once at startup. `create_app()`
       hands it to the route and middleware constructors; nothing reads it
       from a global.
"""

import logging
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping

from jinja2 import Template
from sqlalchemy.ext.asyncio import AsyncEngine

from snippetbox.config import Settings
from snippetbox.database import build_engine, build_session_factory
from snippetbox.services import SessionStore, SnippetService, UserService
from snippetbox.sessions import SessionManager
from snippetbox.templates import new_template_cache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Application:
    settings: Settings
    engine: AsyncEngine
    snippets: SnippetService
    users: UserService
    sessions: SessionManager
    templates: Mapping[str, Template]


def build_application(settings: Settings) -> Application:
    """
    Assemble the dependency container from `settings`.

    Raises:
        jinja2.TemplateError: A template failed to compile
    """
    engine = build_engine(settings)
    session_factory = build_session_factory(engine)

    secret_key = settings.secret_key
    if not secret_key:
        logger.warning("SECRET_KEY not set; generated a temporary session signing key")
        secret_key = secrets.token_urlsafe(32)

    sessions = SessionManager(
        store=SessionStore(session_factory),
        secret_key=secret_key,
        lifetime=timedelta(hours=settings.session_lifetime_hours),
        cookie_name=settings.session_cookie_name,
        cookie_secure=settings.cookie_secure,
    )

    return Application(
        settings=settings,
        engine=engine,
        snippets=SnippetService(session_factory),
        users=UserService(session_factory),
        sessions=sessions,
        templates=new_template_cache(settings.html_dir),
    )

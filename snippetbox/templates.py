"""
Snippetbox — Template Cache
============================

What:  Compiles every page template once at startup and keeps them in a
       read-only mapping keyed by page file name (e.g. "home.html").
How:   A Jinja2 Environment loads from `ui/html`. Each page in `pages/`
       extends `base.html`, and the base layout includes the shared
       `partials/`. The base and every partial are compiled eagerly, so a
       syntax error anywhere stops startup instead of surfacing on a request.

Layout:
    ui/html/base.html           shared layout (blocks: title, main)
    ui/html/partials/*.html     shared fragments included by the base
    ui/html/pages/*.html        one cache entry per file
"""

import logging
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping, Optional

from jinja2 import Environment, FileSystemLoader, Template, select_autoescape
from pydantic import BaseModel, Field

from snippetbox.schemas.snippet import SnippetRead

logger = logging.getLogger(__name__)


class TemplateData(BaseModel):
    """
    What:  Everything a page template can read.
    When:  Built fresh for every render by `helpers.new_template_data()`;
           handlers then fill in the page-specific fields.
    """
    current_year: int
    snippet: Optional[SnippetRead] = None
    snippets: List[SnippetRead] = Field(default_factory=list)
    form: Any = None
    flash: str = ""
    csrf_token: str = ""
    is_authenticated: bool = False


def human_date(t: datetime) -> str:
    """Format a timestamp as e.g. "17 Mar 2026 at 10:15"."""
    if t is None:
        return ""
    return t.strftime("%d %b %Y at %H:%M")


def new_template_cache(html_dir: Path) -> Mapping[str, Template]:
    """
    Build the page-name → compiled template mapping.

    Args:
        html_dir: Directory containing base.html, partials/ and pages/

    Returns:
        Read-only mapping with one entry per file in `pages/`.

    Raises:
        jinja2.TemplateError: A template failed to compile
    """
    env = Environment(
        loader=FileSystemLoader(str(html_dir)),
        autoescape=select_autoescape(["html"]),
    )
    env.filters["human_date"] = human_date

    env.get_template("base.html")
    for partial in sorted((html_dir / "partials").glob("*.html")):
        env.get_template(f"partials/{partial.name}")

    cache = {}
    for page in sorted((html_dir / "pages").glob("*.html")):
        cache[page.name] = env.get_template(f"pages/{page.name}")

    logger.info("Template cache built: %s", ", ".join(cache) or "(empty)")
    return MappingProxyType(cache)

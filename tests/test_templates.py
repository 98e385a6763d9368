"""
Snippetbox — Template Cache & Rendering Tests
==============================================

What we test:
    ✅ Every page in ui/html/pages is cached by file name
    ✅ human_date formatting
    ✅ render(): unknown page → 500, template failure → clean 500
    ✅ Autoescaping of user content
"""

from datetime import datetime, timezone
from http import HTTPStatus

import jinja2
import pytest

from snippetbox.config import PACKAGE_UI_DIR
from snippetbox.helpers import render
from snippetbox.schemas.snippet import SnippetRead
from snippetbox.templates import TemplateData, human_date, new_template_cache


@pytest.fixture
def templates():
    return new_template_cache(PACKAGE_UI_DIR / "html")


def make_data(**kwargs) -> TemplateData:
    return TemplateData(current_year=2026, **kwargs)


class TestTemplateCache:

    def test_pages_are_cached_by_file_name(self, templates):
        assert {"home.html", "view.html", "create.html"} <= set(templates)

    def test_cache_is_read_only(self, templates):
        with pytest.raises(TypeError):
            templates["extra.html"] = None

    def test_syntax_error_fails_construction(self, tmp_path):
        (tmp_path / "pages").mkdir()
        (tmp_path / "partials").mkdir()
        (tmp_path / "base.html").write_text("{% block main %}{% endblock %}")
        (tmp_path / "pages" / "broken.html").write_text("{% if %}")

        with pytest.raises(jinja2.TemplateSyntaxError):
            new_template_cache(tmp_path)


class TestHumanDate:

    def test_format(self):
        t = datetime(2026, 3, 17, 10, 15, tzinfo=timezone.utc)
        assert human_date(t) == "17 Mar 2026 at 10:15"

    def test_none(self):
        assert human_date(None) == ""


class TestRender:

    def test_render_page(self, templates):
        response = render(templates, HTTPStatus.OK, "home.html", make_data())

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert b"There's nothing to see here... yet!" in response.body
        assert b"2026" in response.body

    def test_unknown_page_is_server_error(self, templates, caplog):
        response = render(templates, HTTPStatus.OK, "missing.html", make_data())

        assert response.status_code == 500
        assert response.body == b"Internal Server Error"
        assert "the template missing.html does not exist" in caplog.text

    def test_render_failure_is_clean_server_error(self, templates):
        """view.html needs a snippet; without one rendering fails and no page leaks."""
        response = render(templates, HTTPStatus.OK, "view.html", make_data())

        assert response.status_code == 500
        assert response.body == b"Internal Server Error"

    def test_content_is_escaped(self, templates):
        now = datetime.now(timezone.utc)
        snippet = SnippetRead(
            id=1, title="<script>alert(1)</script>", content="x", created=now, expires=now
        )
        response = render(templates, HTTPStatus.OK, "view.html", make_data(snippet=snippet))

        assert b"<script>" not in response.body
        assert b"&lt;script&gt;" in response.body

    def test_flash_and_custom_status(self, templates):
        response = render(
            templates, HTTPStatus.UNPROCESSABLE_ENTITY, "home.html", make_data(flash="Saved!")
        )
        assert response.status_code == 422
        assert b"Saved!" in response.body

"""
Snippetbox — Routes Package
============================

What:  The route table, partitioned by the middleware each route needs.

Route Inventory:
    Always public (standard chain only):
        GET  /ping                  health.ping
        GET  /static/{path}         static files (mounted in main.py)
    Public dynamic (session + CSRF + auth context):
        GET  /                      snippets.home
        GET  /snippet/view/{id}     snippets.view
        GET  /user/signup           users.signup
        POST /user/signup           users.signup_post
        GET  /user/login            users.login
        POST /user/login            users.login_post
    Protected (dynamic + authentication required):
        GET  /snippet/create        snippets.create
        POST /snippet/create        snippets.create_post
        POST /user/logout           users.logout_post
"""

from fastapi import APIRouter

from snippetbox.application import Application
from snippetbox.middleware import dynamic_chain, protected_chain
from snippetbox.routes import health
from snippetbox.routes.snippets import SnippetHandlers
from snippetbox.routes.users import UserHandlers


def build_router(app: Application) -> APIRouter:
    """Wire every route to its handler wrapped in the right chain."""
    router = APIRouter()
    router.include_router(health.router)

    snippets = SnippetHandlers(app)
    users = UserHandlers()
    dynamic = dynamic_chain(app)
    protected = protected_chain(app)

    router.add_route("/", dynamic.then(snippets.home), methods=["GET"])
    router.add_route("/snippet/view/{id}", dynamic.then(snippets.view), methods=["GET"])

    router.add_route("/user/signup", dynamic.then(users.signup), methods=["GET"])
    router.add_route("/user/signup", dynamic.then(users.signup_post), methods=["POST"])
    router.add_route("/user/login", dynamic.then(users.login), methods=["GET"])
    router.add_route("/user/login", dynamic.then(users.login_post), methods=["POST"])

    router.add_route("/snippet/create", protected.then(snippets.create), methods=["GET"])
    router.add_route("/snippet/create", protected.then(snippets.create_post), methods=["POST"])
    router.add_route("/user/logout", protected.then(users.logout_post), methods=["POST"])

    return router

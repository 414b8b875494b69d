"""Clutterbuck — a minimal request router for HTTP applications.

Does request routing, and *only* request routing. Routes are matched by
exact string or by regular expression, the first registered match runs,
and whatever it returns is turned into a well-formed response.

Basic usage::

    import re

    from clutterbuck import App

    app = App()

    @app.get("/")
    def index():
        return {"hello": "world"}

    @app.get(re.compile(r"^/users/([^/]+)$"))
    def user(name):
        return {"user": name}

``app`` is an ASGI application; ``app.wsgi`` is the WSGI one.
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "ArgumentError",
    "ClutterbuckError",
    "ConfigurationError",
    "HTTPError",
    "InvalidMatcherError",
    "MethodNotAllowedError",
    "NotFoundError",
    "Request",
    "RequestContext",
    "Response",
    "Route",
    "Router",
    "RouterSealedError",
    "get_context",
    "set_header",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import clutterbuck`` fast while providing a clean top-level API.
    """
    if name == "App":
        from clutterbuck.app import App

        return App

    if name == "AppConfig":
        from clutterbuck.config import AppConfig

        return AppConfig

    if name == "Request":
        from clutterbuck.http.request import Request

        return Request

    if name == "Response":
        from clutterbuck.http.response import Response

        return Response

    if name == "Route":
        from clutterbuck.routing.route import Route

        return Route

    if name == "Router":
        from clutterbuck.routing.router import Router

        return Router

    if name in ("RequestContext", "get_context", "set_header"):
        from clutterbuck import context as _ctx

        return getattr(_ctx, name)

    if name in (
        "ArgumentError",
        "ClutterbuckError",
        "ConfigurationError",
        "HTTPError",
        "InvalidMatcherError",
        "MethodNotAllowedError",
        "NotFoundError",
        "RouterSealedError",
    ):
        from clutterbuck import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

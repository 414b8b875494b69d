"""Clutterbuck exception hierarchy.

Shared across Route, Router, App, and the server adapters so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class ClutterbuckError(Exception):
    """Base for all clutterbuck-specific errors."""


class ConfigurationError(ClutterbuckError):
    """Raised when the route table is configured incorrectly.

    Always raised synchronously at registration time so a broken app
    fails during startup, not on its first request.
    """


class ArgumentError(ConfigurationError, TypeError):
    """A registration call was missing its handler or got a bad verb."""


class InvalidMatcherError(ConfigurationError, TypeError):
    """A route matcher was neither a literal string nor a compiled pattern."""


class RouterSealedError(ConfigurationError, RuntimeError):
    """A route was registered after the table started serving requests."""


@dataclass(frozen=True, slots=True)
class HTTPError(ClutterbuckError):
    """An error that maps directly to an HTTP status code.

    Raised by ``Router.find_route`` and turned into a terminal response by
    ``Router.serve``. Never escapes ``serve``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        return self.detail or str(self.status)


class NotFoundError(HTTPError):
    """404 — no route's matcher accepts the request path."""

    path: str

    def __init__(self, path: str) -> None:
        super().__init__(status=404, detail=path)
        object.__setattr__(self, "path", path)


class MethodNotAllowedError(HTTPError):
    """405 — some route accepts the path, but none for this verb.

    The message is ``"<verb> not permitted on <path>"``; the verbs that
    would have been accepted travel in an ``Allow`` header.
    """

    verb: str
    path: str
    allowed: tuple[str, ...]

    def __init__(self, verb: str, path: str, allowed: tuple[str, ...] = ()) -> None:
        super().__init__(
            status=405,
            detail=f"{verb} not permitted on {path}",
            headers=(("Allow", ", ".join(allowed)),) if allowed else (),
        )
        # HTTPError is frozen; extra attributes go around its __setattr__
        object.__setattr__(self, "verb", verb)
        object.__setattr__(self, "path", path)
        object.__setattr__(self, "allowed", allowed)

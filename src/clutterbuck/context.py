"""Request-scoped context via ContextVar.

Provides:
- ``RequestContext``: the per-request object a handler runs against.
- ``context_var``: the current ``RequestContext`` for this task/thread.
- ``get_context()`` / ``set_header()``: shortcuts for handlers.

``Route.run`` binds the context around the handler call and resets it
afterwards, so handlers never see another request's state.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local across
    worker threads. One ``RequestContext`` is created per ``serve`` call
    and never shared, so no locks are needed.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import Any

from clutterbuck.http.request import Request


class RequestContext:
    """Mutable per-request state: the request and the response headers.

    Handlers reach it through ``get_context()``. Setting ``Content-Type``
    here opts the handler's return value out of content negotiation.

    Usage::

        from clutterbuck.context import get_context

        @router.get("/report")
        def report():
            get_context().set_header("Content-Type", "text/csv")
            return ["a,b\\n", "1,2\\n"]
    """

    __slots__ = ("_headers", "path", "request", "state")

    def __init__(self, request: Request, path: str | None = None) -> None:
        self.request = request
        self.path = path if path is not None else request.path
        self.state: dict[str, Any] = {}
        self._headers: list[tuple[str, str]] = []

    @property
    def env(self) -> Request:
        """The inbound request descriptor."""
        return self.request

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        """Response headers set so far, in insertion order."""
        return tuple(self._headers)

    def set_header(self, name: str, value: str) -> None:
        """Set response header *name*, replacing any earlier values."""
        wanted = name.lower()
        self._headers = [(k, v) for k, v in self._headers if k.lower() != wanted]
        self._headers.append((name, value))

    def add_header(self, name: str, value: str) -> None:
        """Append a response header, keeping earlier values of the same name."""
        self._headers.append((name, value))

    def get_header(self, name: str, default: str | None = None) -> str | None:
        """Return the first response header value for *name*."""
        wanted = name.lower()
        for key, value in self._headers:
            if key.lower() == wanted:
                return value
        return default

    def has_header(self, name: str) -> bool:
        return self.get_header(name) is not None

    def __repr__(self) -> str:
        return f"<RequestContext {self.request.method} {self.path!r}>"


context_var: ContextVar[RequestContext] = ContextVar("clutterbuck_context")
"""The context of the request whose handler is running."""


def get_context() -> RequestContext:
    """Return the current request context.

    Raises ``LookupError`` if called outside a handler.
    """
    return context_var.get()


def set_header(name: str, value: str) -> None:
    """Set a response header on the current request."""
    context_var.get().set_header(name, value)

"""Ordered route table and the dispatch algorithm.

Routes are registered during setup and frozen into an immutable tuple the
first time a request is served (or when ``seal()`` is called).
"""

import logging
import threading
from collections.abc import Callable, Iterable, Iterator

from clutterbuck._internal.types import Handler, Matcher
from clutterbuck.context import RequestContext
from clutterbuck.errors import (
    ArgumentError,
    MethodNotAllowedError,
    NotFoundError,
    RouterSealedError,
)
from clutterbuck.http.request import Request
from clutterbuck.http.response import Response
from clutterbuck.routing.route import Route
from clutterbuck.server.errors import http_error_response
from clutterbuck.server.negotiation import negotiate

logger = logging.getLogger("clutterbuck.routing")

# What a verb wrapper returns: the handler, or a decorator awaiting one
Registration = Handler | Callable[[Handler], Handler]


class Router:
    """An ordered route table. First registered, first served.

    Usage::

        router = Router()

        @router.get("/status")
        def status():
            return {"ok": True}

        @router.put(re.compile(r"^/users/(\\d+)$"))
        def update_user(user_id):
            ...

        response = router.serve(Request("GET", "/status"))

    Thread safety:
        Registration is single-threaded (setup code at import time).
        The first ``serve()`` seals the table under a Lock with a double
        check, so concurrent first requests see one consistent table.
        After that the table is a tuple and is only ever read.
    """

    __slots__ = ("_lock", "_pending", "_routes")

    def __init__(self) -> None:
        self._pending: list[Route] = []
        self._routes: tuple[Route, ...] | None = None
        self._lock = threading.Lock()

    # -- Registration --

    def add_handler(self, verb: str, matcher: Matcher, handler: Handler | None = None) -> Handler:
        """Register *handler* for requests with method *verb* and a path *matcher* accepts.

        If more than one route matches a request, the one registered first
        wins. ``verb`` is compared case-sensitively, so only use this
        directly for verbs without a wrapper (``get``, ``put``, ...).

        A ``str`` matcher must equal the request path exactly. A compiled
        pattern only has to be found somewhere in the path, and its
        capturing groups are passed to the handler as positional
        arguments. Patterns are not anchored for you.

        Raises ``ArgumentError`` if *handler* is missing or not callable,
        ``InvalidMatcherError`` if *matcher* is not a ``str`` or compiled
        pattern, and ``RouterSealedError`` once the table is serving.
        """
        if self._routes is not None:
            msg = (
                "Cannot register routes after the router has started serving requests. "
                "Register every route during application setup."
            )
            raise RouterSealedError(msg)
        if not isinstance(verb, str) or not verb:
            msg = f"HTTP verb must be a non-empty string, got {verb!r}"
            raise ArgumentError(msg)
        if handler is None:
            msg = f"Must pass a handler for {verb} {matcher!r}"
            raise ArgumentError(msg)
        if not callable(handler):
            msg = f"Handler for {verb} {matcher!r} is not callable: {handler!r}"
            raise ArgumentError(msg)

        route = Route(verb, matcher, handler)
        self._pending.append(route)
        logger.debug(
            "Registered %s -> %s", route.description, getattr(handler, "__qualname__", handler)
        )
        return handler

    def route(self, verb: str, matcher: Matcher) -> Callable[[Handler], Handler]:
        """Register a handler for an arbitrary verb via decorator."""

        def decorator(func: Handler) -> Handler:
            return self.add_handler(verb, matcher, func)

        return decorator

    def get(self, matcher: Matcher, handler: Handler | None = None) -> Registration:
        """Register a handler for ``GET`` and ``HEAD``.

        ``HEAD`` runs the very same handler; the body is dropped later,
        when the response is assembled.
        """
        if handler is None:
            return lambda func: self.get(matcher, func)
        self.add_handler("GET", matcher, handler)
        return self.add_handler("HEAD", matcher, handler)

    def put(self, matcher: Matcher, handler: Handler | None = None) -> Registration:
        """Register a handler for ``PUT``."""
        return self._one_verb("PUT", matcher, handler)

    def post(self, matcher: Matcher, handler: Handler | None = None) -> Registration:
        """Register a handler for ``POST``."""
        return self._one_verb("POST", matcher, handler)

    def delete(self, matcher: Matcher, handler: Handler | None = None) -> Registration:
        """Register a handler for ``DELETE``."""
        return self._one_verb("DELETE", matcher, handler)

    def patch(self, matcher: Matcher, handler: Handler | None = None) -> Registration:
        """Register a handler for ``PATCH``."""
        return self._one_verb("PATCH", matcher, handler)

    def _one_verb(
        self, verb: str, matcher: Matcher, handler: Handler | None
    ) -> Registration:
        if handler is None:
            return self.route(verb, matcher)
        return self.add_handler(verb, matcher, handler)

    # -- Table state --

    @property
    def sealed(self) -> bool:
        return self._routes is not None

    @property
    def routes(self) -> tuple[Route, ...]:
        """Every registered route, in registration order."""
        if self._routes is not None:
            return self._routes
        return tuple(self._pending)

    def __len__(self) -> int:
        return len(self.routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes)

    def seal(self) -> None:
        """Freeze the table. Any later registration raises ``RouterSealedError``.

        Safe to call more than once and from several threads.
        """
        if self._routes is not None:
            return
        with self._lock:
            if self._routes is not None:
                return
            self._routes = tuple(self._pending)
            logger.debug("Sealed route table with %d route(s)", len(self._routes))

    # -- Dispatch --

    def find_route(self, verb: str, path: str) -> Route:
        """Grovel through the table for the route that should handle a request.

        Raises ``NotFoundError`` if no route handles *path* at all.
        Raises ``MethodNotAllowedError`` if some route handles *path*, but
        none of those answers *verb*.
        """
        candidates = [route for route in self.routes if route.handles(path)]
        if not candidates:
            raise NotFoundError(path)

        for route in candidates:
            if route.verb == verb:
                return route

        raise MethodNotAllowedError(verb, path, _distinct_verbs(candidates))

    def allowed_verbs(self, path: str) -> tuple[str, ...]:
        """Verbs some route would accept for *path*, in registration order."""
        return _distinct_verbs(route for route in self.routes if route.handles(path))

    def serve(self, request: Request) -> Response:
        """Route *request*, run its handler, and build the response.

        An empty path is treated as ``/``. Unknown paths give a ``404``
        and known paths with the wrong verb a ``405``, both as
        ``text/plain``. ``HEAD`` responses keep their headers but lose
        their body. Exceptions raised by the handler itself propagate.
        """
        self.seal()
        path = request.path or "/"

        try:
            route = self.find_route(request.method, path)
        except (NotFoundError, MethodNotAllowedError) as exc:
            logger.debug("%s %s -> %d (%s)", request.method, path, exc.status, exc)
            response = http_error_response(exc)
        else:
            context = RequestContext(request, path)
            response = negotiate(route.run(context, path), context)

        if request.method == "HEAD":
            response = response.without_body()
        return response


def _distinct_verbs(routes: Iterable[Route]) -> tuple[str, ...]:
    verbs: dict[str, None] = {}
    for route in routes:
        verbs.setdefault(route.verb)
    return tuple(verbs)

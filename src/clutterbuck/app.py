"""Clutterbuck application class.

Mutable during setup (route registration, lifecycle hooks).
Frozen when the first request or lifespan event arrives.
"""

import inspect
import logging
from collections.abc import Callable

from clutterbuck._internal.asgi import Environ, Receive, Scope, Send, StartResponse, WSGIBody
from clutterbuck._internal.types import Handler, Hook, Matcher
from clutterbuck.config import AppConfig
from clutterbuck.errors import RouterSealedError
from clutterbuck.http.request import Request
from clutterbuck.http.response import Response
from clutterbuck.routing.router import Registration, Router
from clutterbuck.server.handler import handle_request, handle_wsgi

logger = logging.getLogger("clutterbuck.server")


class App:
    """A routed application, callable by ASGI and WSGI servers.

    A thin proxy around one ``Router``: registration calls go straight to
    it, and every request gets a fresh per-request context seeded with
    the shared, sealed route table.

    Usage::

        app = App()

        @app.get("/")
        def index():
            return {"hello": "world"}

        # uvicorn module:app, or any other ASGI server
        # gunicorn "module:app.wsgi", or any other WSGI server
    """

    __slots__ = ("_shutdown_hooks", "_startup_hooks", "config", "router")

    def __init__(self, config: AppConfig | None = None, *, router: Router | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self.router: Router = router if router is not None else Router()
        self._startup_hooks: list[Hook] = []
        self._shutdown_hooks: list[Hook] = []

    # -- Route registration --

    def add_handler(self, verb: str, matcher: Matcher, handler: Handler | None = None) -> Handler:
        """Register a handler for an arbitrary verb. See ``Router.add_handler``."""
        return self.router.add_handler(verb, matcher, handler)

    def route(self, verb: str, matcher: Matcher) -> Callable[[Handler], Handler]:
        """Register a handler for an arbitrary verb via decorator."""
        return self.router.route(verb, matcher)

    def get(self, matcher: Matcher, handler: Handler | None = None) -> Registration:
        """Register a handler for ``GET`` and ``HEAD``."""
        return self.router.get(matcher, handler)

    def put(self, matcher: Matcher, handler: Handler | None = None) -> Registration:
        return self.router.put(matcher, handler)

    def post(self, matcher: Matcher, handler: Handler | None = None) -> Registration:
        return self.router.post(matcher, handler)

    def delete(self, matcher: Matcher, handler: Handler | None = None) -> Registration:
        return self.router.delete(matcher, handler)

    def patch(self, matcher: Matcher, handler: Handler | None = None) -> Registration:
        return self.router.patch(matcher, handler)

    # -- Lifecycle hooks --

    def on_startup(self, func: Hook) -> Hook:
        """Register a hook to run when the ASGI server starts.

        Sync or async::

            @app.on_startup
            async def setup():
                ...
        """
        self._check_not_sealed()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Hook) -> Hook:
        """Register a hook to run when the ASGI server shuts down."""
        self._check_not_sealed()
        self._shutdown_hooks.append(func)
        return func

    # -- Serving --

    def serve(self, request: Request) -> Response:
        """Route a single request. Handler exceptions propagate."""
        return self.router.serve(request)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles the lifespan protocol directly, then delegates HTTP scopes
        to the request handler. Other scope types (websocket) are ignored.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self.router.seal()
        await handle_request(scope, receive, send, router=self.router, config=self.config)

    def wsgi(self, environ: Environ, start_response: StartResponse) -> WSGIBody:
        """WSGI entry point. Lifecycle hooks do not run under WSGI."""
        self.router.seal()
        return handle_wsgi(environ, start_response, router=self.router, config=self.config)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Seals the route table at startup (before the first HTTP request),
        then runs registered startup/shutdown hooks and signals completion
        back to the server.
        """
        self.router.seal()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.run_startup_hooks()
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                try:
                    await self.run_shutdown_hooks()
                except Exception as exc:
                    logger.exception("Shutdown hook failed")
                    await send({"type": "lifespan.shutdown.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def run_startup_hooks(self) -> None:
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def run_shutdown_hooks(self) -> None:
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    def _check_not_sealed(self) -> None:
        if self.router.sealed:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and hooks before the server starts."
            )
            raise RouterSealedError(msg)

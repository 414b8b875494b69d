"""Host adapters — translate ASGI scopes and WSGI environs to clutterbuck types.

The only components that touch raw ASGI/WSGI. They build a ``Request``,
hand it to ``Router.serve``, and send the ``Response`` back. Exceptions
raised by handlers stop here and become a 500.
"""

import logging

from anyio import to_thread

from clutterbuck._internal.asgi import Environ, Receive, Scope, Send, StartResponse, WSGIBody
from clutterbuck.config import AppConfig
from clutterbuck.http.request import Request
from clutterbuck.http.response import Response
from clutterbuck.routing.router import Router
from clutterbuck.server.errors import internal_error_response
from clutterbuck.server.sender import send_response, start_wsgi_response

logger = logging.getLogger("clutterbuck.server")


def _serve_or_500(router: Router, request: Request, config: AppConfig) -> Response:
    try:
        response = router.serve(request)
    except Exception as exc:
        response = internal_error_response(exc, debug=config.debug)
    if config.log_requests:
        logger.info("%s %s %d", request.method, request.path or "/", response.status)
    return response


async def handle_request(
    scope: Scope,
    receive: Receive,  # noqa: ARG001
    send: Send,
    *,
    router: Router,
    config: AppConfig,
) -> None:
    """Process a single ASGI HTTP request."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)
    if config.threaded_handlers:
        response = await to_thread.run_sync(_serve_or_500, router, request, config)
    else:
        response = _serve_or_500(router, request, config)
    await send_response(response, send)


def handle_wsgi(
    environ: Environ,
    start_response: StartResponse,
    *,
    router: Router,
    config: AppConfig,
) -> WSGIBody:
    """Process a single WSGI request."""
    request = Request.from_environ(environ)
    response = _serve_or_500(router, request, config)
    return start_wsgi_response(response, start_response)

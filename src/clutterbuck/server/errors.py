"""Terminal error responses.

Dispatch failures (404, 405) become plain-text responses inside
``Router.serve``. Handler crashes are not the router's business; the
host adapters in ``clutterbuck.app`` turn them into a 500 with
``internal_error_response``.
"""

import logging
import traceback

from clutterbuck.errors import HTTPError
from clutterbuck.http.response import Response

logger = logging.getLogger("clutterbuck.server")

NOT_FOUND_BODY = "Not found"
INTERNAL_ERROR_BODY = "Internal Server Error"


def _plain_text(status: int, body: str, headers: tuple[tuple[str, str], ...] = ()) -> Response:
    return Response(
        status=status,
        headers=(("Content-Type", "text/plain"), *headers),
        body=(body,),
    ).with_content_length()


def http_error_response(exc: HTTPError) -> Response:
    """The terminal ``text/plain`` response for a dispatch failure.

    404s always read ``Not found``; anything else carries the error's
    message (for a 405, ``"<verb> not permitted on <path>"``).
    """
    body = NOT_FOUND_BODY if exc.status == 404 else str(exc)
    return _plain_text(exc.status, body, exc.headers)


def internal_error_response(exc: BaseException, *, debug: bool = False) -> Response:
    """Log an unhandled handler exception and build a 500 response.

    In debug mode the body is the formatted traceback.
    """
    logger.exception("Unhandled exception in handler: %s", exc)
    if debug:
        body = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    else:
        body = INTERNAL_ERROR_BODY
    return _plain_text(500, body)

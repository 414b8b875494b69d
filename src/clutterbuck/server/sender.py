"""Response sending — translates a Response into ASGI messages or a WSGI reply."""

import logging
from http import HTTPStatus

from clutterbuck._internal.asgi import Send, StartResponse, WSGIBody
from clutterbuck.http.response import Response, encode_chunk

logger = logging.getLogger("clutterbuck.server")


def body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC 9110: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def _wire_headers(response: Response) -> list[tuple[str, str]]:
    if body_allowed(response.status):
        return list(response.headers)
    return [(k, v) for k, v in response.headers if k.lower() != "content-length"]


async def send_response(response: Response, send: Send) -> None:
    """Translate a Response into ASGI ``send()`` calls."""
    raw_headers = [
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in _wire_headers(response)
    ]
    body = response.body_bytes if body_allowed(response.status) else b""

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )


def start_wsgi_response(response: Response, start_response: StartResponse) -> WSGIBody:
    """Call ``start_response`` and return the body iterable for a WSGI server."""
    status_line = f"{response.status} {_reason(response.status)}"
    start_response(status_line, _wire_headers(response))
    if not body_allowed(response.status):
        return []
    return [encode_chunk(chunk) for chunk in response.body]


def _reason(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        logger.debug("No reason phrase for status %d", status)
        return "Unknown"

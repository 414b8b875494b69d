"""Content negotiation — turns a handler's return value into a Response.

A handler may return a finished ``Response``, a framed
``(status, headers, body)`` triple, or just a body. The body then goes
through a fixed decision table:

1. ``Content-Type`` already set (on the context, which wins, or in the framed
   headers) -> pass the body through, wrapped into chunks if needed.
2. Body is already a sequence of ``str``/``bytes`` chunks
   -> assume it is serialized JSON, ``application/json``.
3. Body is JSON text, or can be serialized as JSON
   -> ``application/json``.
4. Anything else -> ``text/plain`` with the value's string form.

``Content-Length`` is recomputed from the final body every time.
"""

import json as json_module
from collections.abc import Iterator, Mapping
from typing import Any

from clutterbuck.context import RequestContext
from clutterbuck.http.response import Chunk, Response

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain"


def negotiate(result: Any, context: RequestContext) -> Response:
    """Normalize a handler's return value into a Response."""
    status, framed_headers, body = unframe(result)
    if context.has_header("Content-Type"):
        framed_headers = tuple(
            (name, value) for name, value in framed_headers if name.lower() != "content-type"
        )
    response = Response(status=status, headers=(*context.headers, *framed_headers))

    if response.content_type is not None:
        return response.with_body(*as_chunks(body)).with_content_length()

    body = _materialize(body)
    if is_chunk_sequence(body):
        return (
            response.with_header("Content-Type", JSON_CONTENT_TYPE)
            .with_body(*body)
            .with_content_length()
        )

    encoded = to_json(body)
    if encoded is not None:
        return (
            response.with_header("Content-Type", JSON_CONTENT_TYPE)
            .with_body(encoded)
            .with_content_length()
        )

    return (
        response.with_header("Content-Type", TEXT_CONTENT_TYPE)
        .with_body(*as_chunks(body))
        .with_content_length()
    )


def unframe(result: Any) -> tuple[int, tuple[tuple[str, str], ...], Any]:
    """Split a handler result into ``(status, headers, body)``.

    Bare values become ``(200, (), value)``.
    """
    if isinstance(result, Response):
        return result.status, result.headers, result.body
    if _is_framed(result):
        status, headers, body = result
        return status, _header_pairs(headers), body
    return 200, (), result


def is_chunk_sequence(value: Any) -> bool:
    """Does *value* already look like serialized output (a sequence of chunks)?"""
    if not isinstance(value, (list, tuple)):
        return False
    return all(isinstance(chunk, (str, bytes)) for chunk in value)


def as_chunks(value: Any) -> tuple[Chunk, ...]:
    """Coerce a body into a tuple of chunks, wrapping scalars."""
    value = _materialize(value)
    if is_chunk_sequence(value):
        return tuple(value)
    if isinstance(value, (str, bytes)):
        return (value,)
    return (str(value),)


def to_json(value: Any) -> str | bytes | None:
    """JSON text for *value*, or ``None`` if it cannot be expressed as JSON.

    Strings (and bytes) that already parse as JSON are kept as they are.
    Everything else, other strings included, goes through ``json.dumps``;
    bytes that are not JSON text cannot be serialized and give ``None``.
    """
    if isinstance(value, (str, bytes)):
        try:
            json_module.loads(value)
        except ValueError:
            pass  # not JSON text; fall through to json.dumps
        else:
            return value
    try:
        return json_module.dumps(value)
    except (TypeError, ValueError):
        return None


def _materialize(value: Any) -> Any:
    """Drain one-shot iterators (generators) so the body can be measured."""
    if isinstance(value, Iterator) and not isinstance(value, (str, bytes)):
        return list(value)
    return value


def _is_framed(value: Any) -> bool:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        return False
    status, headers, _ = value
    if not isinstance(status, int) or isinstance(status, bool):
        return False
    if not 100 <= status <= 599:
        return False
    if isinstance(headers, Mapping):
        return True
    return isinstance(headers, (list, tuple)) and all(
        isinstance(pair, (list, tuple)) and len(pair) == 2 for pair in headers
    )


def _header_pairs(headers: Any) -> tuple[tuple[str, str], ...]:
    items = headers.items() if isinstance(headers, Mapping) else headers
    return tuple((str(name), str(value)) for name, value in items)

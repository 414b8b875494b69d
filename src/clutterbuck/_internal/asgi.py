"""ASGI and WSGI callable signatures.

Raw types only; the rest of clutterbuck works with ``Request`` and
``Response``.
"""

from collections.abc import Awaitable, Callable, Iterable, MutableMapping
from typing import Any, TypeAlias

# ASGI 3.0
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]

# WSGI (PEP 3333)
Environ: TypeAlias = dict[str, Any]
StartResponse: TypeAlias = Callable[..., Any]
WSGIBody: TypeAlias = Iterable[bytes]

"""Immutable inbound request descriptor.

The router only ever looks at ``method`` and ``path``; the rest is carried
so handlers can read what the host server received.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from clutterbuck.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is already percent-decoded and relative to the application's
    mount point. The query string is kept raw; parsing it is the
    handler's business.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query_string: bytes = b""
    root_path: str = ""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path plus the raw query string, relative to the mount point."""
        if self.query_string:
            return f"{self.path}?{self.query_string.decode('latin-1')}"
        return self.path

    # -- Factories --

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope.

        ASGI servers put the mount point in ``root_path`` and may leave it
        at the front of ``path``; it is stripped so routes always see the
        application-relative path. Only whole segments are stripped:
        ``/apple`` under ``/app`` stays ``/apple``.
        """
        root_path = scope.get("root_path", "")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=_strip_mount(scope["path"], root_path),
            headers=Headers.from_asgi(scope.get("headers", ())),
            query_string=scope.get("query_string", b""),
            root_path=root_path,
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
        )

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> Request:
        """Create a Request from a WSGI environ.

        ``PATH_INFO`` is already relative to ``SCRIPT_NAME``. WSGI decodes
        it as latin-1; it is re-decoded as UTF-8 here.
        """
        path = environ.get("PATH_INFO", "")
        try:
            path = path.encode("latin-1").decode("utf-8")
        except UnicodeError:
            pass  # not UTF-8 on the wire; keep the latin-1 form
        addr = environ.get("REMOTE_ADDR")
        protocol = environ.get("SERVER_PROTOCOL", "HTTP/1.1")
        return cls(
            method=environ["REQUEST_METHOD"],
            path=path,
            headers=Headers.from_environ(environ),
            query_string=environ.get("QUERY_STRING", "").encode("latin-1"),
            root_path=environ.get("SCRIPT_NAME", ""),
            http_version=protocol.partition("/")[2] or "1.1",
            client=(addr, int(environ.get("REMOTE_PORT", 0) or 0)) if addr else None,
        )


def _strip_mount(path: str, root_path: str) -> str:
    """*path* relative to the mount point *root_path*, on segment boundaries."""
    if not root_path or root_path == "/":
        return path
    if path == root_path:
        return "/"
    if path.startswith(root_path + "/"):
        return path[len(root_path) :]
    return path

"""HTTP response with a chainable .with_*() transformation API.

The shape is the three-part contract a host server needs: an integer
status, an ordered list of header pairs (duplicate names allowed), and a
body made of chunks. Each transformation returns a new Response.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

Chunk = str | bytes


def encode_chunk(chunk: Chunk) -> bytes:
    """A body chunk as bytes (``str`` chunks are UTF-8 encoded)."""
    return chunk.encode("utf-8") if isinstance(chunk, str) else chunk


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    ``headers`` keeps insertion order and may repeat a name (several
    ``Link`` headers, say). Header lookups are case-insensitive.
    """

    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()
    body: tuple[Chunk, ...] = ()

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str] | Iterable[tuple[str, str]]) -> Response:
        """Return a new Response with additional headers, in order."""
        items = headers.items() if isinstance(headers, Mapping) else headers
        return replace(self, headers=(*self.headers, *((str(k), str(v)) for k, v in items)))

    def without_header(self, name: str) -> Response:
        """Return a new Response with every *name* header removed."""
        wanted = name.lower()
        return replace(
            self, headers=tuple((k, v) for k, v in self.headers if k.lower() != wanted)
        )

    def with_body(self, *chunks: Chunk) -> Response:
        """Return a new Response with a different body."""
        return replace(self, body=chunks)

    def without_body(self) -> Response:
        """Return a new Response with an empty body and the same headers."""
        return replace(self, body=())

    def with_content_length(self) -> Response:
        """Return a new Response whose ``Content-Length`` matches its body."""
        return self.without_header("Content-Length").with_header(
            "Content-Length", str(self.content_length)
        )

    # -- Header access --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of header *name*, or *default*."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return default

    def get_list(self, name: str) -> list[str]:
        """Return every value of header *name*, in order."""
        wanted = name.lower()
        return [value for key, value in self.headers if key.lower() == wanted]

    @property
    def content_type(self) -> str | None:
        return self.header("Content-Type")

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        return b"".join(encode_chunk(chunk) for chunk in self.body)

    @property
    def text(self) -> str:
        """Body as string."""
        return self.body_bytes.decode("utf-8")

    @property
    def content_length(self) -> int:
        """Size of the encoded body in bytes."""
        return sum(len(encode_chunk(chunk)) for chunk in self.body)

    def as_tuple(self) -> tuple[int, list[tuple[str, str]], list[Chunk]]:
        """The ``(status, headers, body)`` triple handed to host servers."""
        return self.status, list(self.headers), list(self.body)

"""Request headers as handlers see them.

ASGI hands over raw byte pairs, WSGI a flat environ of ``HTTP_*`` keys.
Both are decoded once into the same read-only view, keyed by lower-cased
name, so a handler never has to care which host it runs under.
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

# CGI keeps these two without the HTTP_ prefix
_UNPREFIXED = {"CONTENT_TYPE": "content-type", "CONTENT_LENGTH": "content-length"}


class Headers(Mapping[str, str]):
    """Read-only, case-insensitive, multi-valued request headers.

    ``headers["Accept"]`` gives the first value sent for a name;
    ``get_list`` gives all of them in the order received.
    """

    __slots__ = ("_values",)

    _values: dict[str, tuple[str, ...]]

    def __init__(self, pairs: Mapping[str, str] | Iterable[tuple[str, str]] = ()) -> None:
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        values: dict[str, list[str]] = {}
        for name, value in items:
            values.setdefault(name.lower(), []).append(value)
        self._values = {name: tuple(found) for name, found in values.items()}

    @classmethod
    def from_asgi(cls, raw: Iterable[tuple[bytes, bytes]]) -> "Headers":
        """Decode an ASGI scope's ``headers`` list (latin-1, as HTTP/1.1 sends it)."""
        return cls((name.decode("latin-1"), value.decode("latin-1")) for name, value in raw)

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> "Headers":
        """Collect ``HTTP_*`` keys and the two un-prefixed CGI headers.

        Empty ``CONTENT_TYPE``/``CONTENT_LENGTH`` values are how WSGI
        servers say the header was absent, so they are skipped.
        """
        pairs: list[tuple[str, str]] = []
        for key, value in environ.items():
            if key.startswith("HTTP_"):
                pairs.append((key[5:].replace("_", "-"), value))
            elif key in _UNPREFIXED and value:
                pairs.append((_UNPREFIXED[key], value))
        return cls(pairs)

    def __getitem__(self, name: str) -> str:
        return self._values[name.lower()][0]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Headers({self._values!r})"

    def get_list(self, name: str) -> list[str]:
        """Every value sent for *name*, in order; empty if it was not sent."""
        return list(self._values.get(name.lower(), ()))

"""The Route frozen dataclass."""

import re
from dataclasses import dataclass
from typing import Any

from clutterbuck._internal.types import Handler, Matcher
from clutterbuck.context import RequestContext, context_var
from clutterbuck.errors import InvalidMatcherError, NotFoundError


@dataclass(frozen=True, slots=True)
class Route:
    """A verb, a matcher, and the handler they lead to.

    Created during setup, owned by a ``Router`` and never changed after.

    A literal ``str`` matcher accepts exactly that path: no normalization,
    no trailing-slash tolerance. A compiled pattern accepts any path it
    can be *found* in (``re.search``); patterns are not anchored for you,
    so ``re.compile("/users")`` also handles ``/admin/users/edit``.
    Anchor with ``^`` and ``$`` when you mean the whole path.
    """

    verb: str
    matcher: Matcher
    handler: Handler

    def __post_init__(self) -> None:
        if isinstance(self.matcher, str):
            return
        if isinstance(self.matcher, re.Pattern) and isinstance(self.matcher.pattern, str):
            return
        msg = (
            "Route matcher must be a string or a compiled str pattern, "
            f"got {type(self.matcher).__name__}: {self.matcher!r}"
        )
        raise InvalidMatcherError(msg)

    @property
    def is_pattern(self) -> bool:
        return not isinstance(self.matcher, str)

    @property
    def description(self) -> str:
        """``"<verb> <matcher>"``, for logs and error messages."""
        if isinstance(self.matcher, str):
            return f"{self.verb} {self.matcher}"
        return f"{self.verb} /{self.matcher.pattern}/"

    def handles(self, path: str) -> bool:
        """Can this route handle a request for *path*?"""
        if isinstance(self.matcher, str):
            return self.matcher == path
        return self.matcher.search(path) is not None

    def run(self, context: RequestContext, path: str) -> Any:
        """Invoke the handler for *path* with *context* as the current request.

        Literal routes call the handler with no arguments. Pattern routes
        pass the capturing groups, left to right; a group that did not
        take part in the match arrives as ``None``.

        Raises ``NotFoundError`` if *path* is not handled by a pattern route.
        """
        if isinstance(self.matcher, str):
            args: tuple[str | None, ...] = ()
        else:
            match = self.matcher.search(path)
            if match is None:
                raise NotFoundError(path)
            args = match.groups()

        token = context_var.set(context)
        try:
            return self.handler(*args)
        finally:
            context_var.reset(token)

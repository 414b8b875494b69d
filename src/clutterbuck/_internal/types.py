"""Shared type aliases used across clutterbuck modules."""

import re
from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler — called with the captured groups of its matcher, if any
Handler: TypeAlias = Callable[..., Any]

# Route matcher — a literal path or a compiled pattern
Matcher: TypeAlias = str | re.Pattern[str]

# Lifecycle hook — run at ASGI lifespan startup/shutdown
Hook: TypeAlias = Callable[[], Any]

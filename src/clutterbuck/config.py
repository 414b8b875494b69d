"""Application configuration.

AppConfig is a frozen dataclass read once at startup. There are no
environment variables and no config files.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, log_requests=True)
    """

    # 500 responses carry the handler's traceback instead of a bare message
    debug: bool = False

    # ASGI: run the synchronous router in a worker thread;
    # a slow handler then blocks only its own request
    threaded_handlers: bool = True

    # Log "<method> <path> <status>" at INFO on clutterbuck.server
    log_requests: bool = False

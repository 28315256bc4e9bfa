"""Request ID logging context for tracing a lookup across modules.

Every log record gets a ``request_id`` attribute so a single voice-agent
call can be followed from the HTTP handler down to the Caspio queries.

Usage:
    from bestagent.logging_context import configure_logging, set_request_id

    configure_logging("INFO")
    set_request_id("req-abc123")
    logging.getLogger(__name__).info("Looking up caller")
    # -> ... [req-abc123]: Looking up caller
"""

import logging
from contextvars import ContextVar

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s [%(request_id)s]: %(message)s"

_request_id: ContextVar[str] = ContextVar("request_id", default="-")


def set_request_id(request_id: str) -> None:
    """Set the correlation ID for the current context."""
    _request_id.set(request_id)


def get_request_id() -> str:
    """Retrieve the current correlation ID."""
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler whose records carry the request ID."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid stacking handlers when the app factory runs more than once
    for handler in root.handlers:
        if getattr(handler, "_bestagent", False):
            return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.addFilter(RequestIdFilter())
    handler._bestagent = True  # type: ignore[attr-defined]
    root.addHandler(handler)

# =============================================================================
# app/logging_utils.py - Request-Scoped Logging
# =============================================================================
# Carries a request id through every log line emitted while handling a request.
#
# - request_id_var: ContextVar set by RequestIDMiddleware for each request
# - RequestIDFilter: stamps `%(request_id)s` on every LogRecord ("-" outside
#   of a request, e.g. during startup)
# - configure_logging(): basicConfig with the filter attached
# =============================================================================

from __future__ import annotations

import logging
from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"


def get_request_id() -> str:
    """Return the id of the request currently being handled, or "-"."""
    return request_id_var.get()


class RequestIDFilter(logging.Filter):
    """Ensures `%(request_id)s` is always present in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


def configure_logging(debug: bool = False) -> None:
    """
    Configure root logging once at startup.

    The filter is attached to the root handlers (not loggers) so records
    propagated from any module logger are stamped before formatting.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIDFilter) for f in handler.filters):
            handler.addFilter(RequestIDFilter())

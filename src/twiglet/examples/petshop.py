"""Pet shop walkthrough.

Purpose
-------
Exercise every public feature once, in the order a small web service would:
structured start-up event, plain text event, a request-scoped logger, an error
with an attached exception, and a final HTTP response event.

Used by the ``twiglet demo`` command and by the example tests.
"""

from __future__ import annotations

from typing import Final

from ..logger import Logger

PORT: Final[int] = 8080
REQUEST_TRACE_ID: Final[str] = "126bb6fa-28a2-470f-b013-eefbf9182b2d"


class DatabaseTimeout(Exception):
    """Stand-in failure for the walkthrough."""


def run_demo(logger: Logger) -> Logger:
    """Emit the walkthrough events through *logger*; return the request logger.

    Examples
    --------
    >>> import io
    >>> buffer = io.StringIO()
    >>> _ = run_demo(Logger("petshop", output=buffer))
    >>> len(buffer.getvalue().splitlines())
    4
    """

    logger.info(
        {
            "event": {"action": "startup"},
            "message": f"Ready to go, listening on port {PORT}",
            "server": {"port": PORT},
        }
    )
    logger.info(f"Ready to go, listening on port {PORT}")

    request_logger = logger.with_properties(
        {
            "event": {"action": "HTTP request"},
            "trace.id": REQUEST_TRACE_ID,
        }
    )

    try:
        raise DatabaseTimeout("Connection timed-out")
    except DatabaseTimeout as exc:
        request_logger.error({"message": "DB connection failed."}, exc)

    request_logger.info(
        {
            "message": "Internal Server Error",
            "http.request.method": "get",
            "http.response.status_code": 500,
        }
    )
    return request_logger

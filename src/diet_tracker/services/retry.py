"""Retry helper for outbound HTTP lookups."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

_logger = logging.getLogger(__name__)


async def call_with_retry(
    func: Callable[[], Awaitable[dict[str, object]]],
    *,
    action: str,
    attempts: int = 1,
    delay_seconds: float = 0.3,
) -> dict[str, object]:
    """Call ``func``, retrying ``attempts`` extra times before re-raising."""
    attempt = 0
    while True:
        try:
            return await func()
        except Exception as exc:
            attempt += 1
            _logger.warning(
                "Lookup %s failed (attempt %s/%s, status=%s): %s",
                action,
                attempt,
                attempts + 1,
                status_code_from_exception(exc),
                exc,
            )
            if attempt > attempts:
                raise
            await asyncio.sleep(delay_seconds)


def status_code_from_exception(exc: Exception) -> str:
    """Extract the HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return str(status_code)
    return "n/a"

"""Backend health check: ping the analysis service before starting the dashboard."""

import asyncio
import logging

from src.backend.base import AnalysisBackend

logger = logging.getLogger(__name__)

_TIMEOUT_SEC = 5.0


async def check_backend(backend: AnalysisBackend, timeout_sec: float | None = None) -> tuple[bool, str]:
    """Ping the parties endpoint.

    Returns:
        (ok, error_message); error_message is "" when ok is True.
    """
    try:
        await asyncio.wait_for(
            backend.list_parties(),
            timeout=timeout_sec if timeout_sec is not None else _TIMEOUT_SEC,
        )
        return True, ""
    except TimeoutError:
        return False, "Health check timed out"
    except Exception as exc:
        logger.debug("Health check failed: %s", exc)
        return False, str(exc)

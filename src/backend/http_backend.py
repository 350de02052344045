"""HTTP adapter for the analysis service using httpx with native async."""

import logging
import time
from typing import Any

import httpx

from config.config_loader import ApiConfig
from src.backend.base import AnalysisBackend, BackendError
from src.backend.payloads import parse_analysis_result, parse_history, parse_parties, parse_snapshot
from src.models import AnalysisResult, Party

logger = logging.getLogger(__name__)


class HttpAnalysisBackend(AnalysisBackend):
    """Analysis service reached over HTTP (base path /api/v1)."""

    def __init__(self, config: ApiConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url.rstrip("/"),
            headers={"Accept": "application/json"},
            timeout=config.timeout_sec,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            BackendError: On timeout, transport error, non-2xx status or non-JSON body.
        """
        start = time.monotonic()
        try:
            response = await self._client.request(
                method,
                endpoint,
                timeout=timeout if timeout is not None else self._config.timeout_sec,
                **kwargs,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise BackendError(endpoint, f"Request timed out: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            body = exc.response.text[:200] if exc.response is not None else ""
            raise BackendError(
                endpoint,
                f"HTTP {exc.response.status_code}: {body}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise BackendError(endpoint, f"HTTP error: {exc}") from exc

        latency = time.monotonic() - start
        logger.debug("%s %s -> %d in %.2fs", method, endpoint, response.status_code, latency)

        try:
            return response.json()
        except ValueError as exc:
            raise BackendError(endpoint, "Response is not valid JSON", response.status_code) from exc

    async def list_parties(self) -> list[Party]:
        data = await self._request("GET", "/parties")
        try:
            parties = parse_parties(data)
        except ValueError as exc:
            raise BackendError("/parties", f"Invalid API response format: {exc}") from exc
        logger.info("Loaded %d parties from %s", len(parties), self.base_url)
        return parties

    async def analyze(self, party_name: str) -> AnalysisResult:
        start = time.monotonic()
        data = await self._request(
            "POST",
            "/analyze",
            json={"party_name": party_name},
            timeout=self._config.analyze_timeout_sec,
        )
        try:
            result = parse_analysis_result(data)
        except ValueError as exc:
            raise BackendError("/analyze", f"Invalid analysis payload: {exc}") from exc
        logger.info(
            "Analysis for %s: score %d in %.2fs",
            party_name,
            result.sentiment_score,
            time.monotonic() - start,
        )
        return result

    async def latest_snapshot(self, party_name: str) -> AnalysisResult | None:
        data = await self._request("GET", "/latest", params={"party_name": party_name})
        try:
            return parse_snapshot(data)
        except ValueError as exc:
            raise BackendError("/latest", f"Invalid snapshot payload: {exc}") from exc

    async def history(self, party_id: int) -> list[AnalysisResult]:
        endpoint = f"/history/{party_id}"
        try:
            return parse_history(await self._request("GET", endpoint))
        except (BackendError, ValueError) as exc:
            logger.warning("History unavailable for party %d: %s", party_id, exc)
            return []

"""Abstract base for the remote analysis service."""

from abc import ABC, abstractmethod

from src.models import AnalysisResult, Party


class BackendError(Exception):
    """Raised when a backend call fails."""

    def __init__(self, endpoint: str, message: str, status_code: int | None = None) -> None:
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(f"[{endpoint}] {message}")


class AnalysisBackend(ABC):
    """Abstract base for the analysis service consumed by the orchestrator."""

    @abstractmethod
    async def list_parties(self) -> list[Party]:
        """Return the party catalog.

        Raises:
            BackendError: On transport failure, HTTP error or non-array payload.
        """
        ...

    @abstractmethod
    async def analyze(self, party_name: str) -> AnalysisResult:
        """Run a fresh (expensive) analysis for the party.

        Raises:
            BackendError: On transport failure, HTTP error or invalid payload.
        """
        ...

    @abstractmethod
    async def latest_snapshot(self, party_name: str) -> AnalysisResult | None:
        """Return the latest cached analysis, or None when none exists.

        Raises:
            BackendError: On transport failure, HTTP error or invalid payload.
        """
        ...

    @abstractmethod
    async def history(self, party_id: int) -> list[AnalysisResult]:
        """Return past analyses for the party. Never raises; [] on failure."""
        ...

    async def aclose(self) -> None:
        """Release transport resources. Default: nothing to release."""
        return None

    async def __aenter__(self) -> "AnalysisBackend":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

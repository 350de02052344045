"""Shared pytest fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from config.config_loader import ApiConfig, AppConfig, DashboardConfig
from src.backend.base import AnalysisBackend
from src.models import AnalysisResult, Party


@pytest.fixture
def sample_api_config() -> ApiConfig:
    return ApiConfig(
        base_url="http://backend.test/api/v1",
        timeout_sec=5,
        analyze_timeout_sec=30,
    )


@pytest.fixture
def sample_app_config(sample_api_config: ApiConfig, tmp_path: Path) -> AppConfig:
    return AppConfig(
        api=sample_api_config,
        dashboard=DashboardConfig(
            auto_select_first=True,
            health_check_timeout_sec=1,
            output_dir=tmp_path / "reports",
        ),
    )


@pytest.fixture
def dmk() -> Party:
    return Party(id=1, name="DMK", color="#dd2e44", leader="M.K. Stalin")


@pytest.fixture
def aiadmk() -> Party:
    return Party(id=2, name="AIADMK", color="#27ae60", leader="Edappadi Palaniswami")


@pytest.fixture
def sample_parties(dmk: Party, aiadmk: Party) -> list[Party]:
    return [dmk, aiadmk]


@pytest.fixture
def sample_result() -> AnalysisResult:
    return AnalysisResult(sentiment_score=72, key_topics=("economy",), emotion="Hopeful")


@pytest.fixture
def snapshot_result() -> AnalysisResult:
    return AnalysisResult(
        sentiment_score=55,
        key_topics=("jobs", "welfare"),
        emotion="Anxious",
        created_at="2026-10-18T09:30:00Z",
    )


class MockBackend(AnalysisBackend):
    """Test double AnalysisBackend. Every call is an AsyncMock that tests can reconfigure."""

    def __init__(
        self,
        parties: list[Party] | None = None,
        snapshot: AnalysisResult | None = None,
        analysis: AnalysisResult | None = None,
    ) -> None:
        # Shadow the class methods with AsyncMocks at the instance level.
        # ABC check passes because the methods are defined in the class body below.
        self.list_parties = AsyncMock(return_value=list(parties or []))  # type: ignore[assignment]
        self.latest_snapshot = AsyncMock(return_value=snapshot)  # type: ignore[assignment]
        self.analyze = AsyncMock(  # type: ignore[assignment]
            return_value=analysis or AnalysisResult(sentiment_score=50)
        )
        self.history = AsyncMock(return_value=[])  # type: ignore[assignment]

    async def list_parties(self) -> list[Party]:  # type: ignore[override]
        return []

    async def analyze(self, party_name: str) -> AnalysisResult:  # type: ignore[override]
        return AnalysisResult(sentiment_score=50)

    async def latest_snapshot(self, party_name: str) -> AnalysisResult | None:  # type: ignore[override]
        return None

    async def history(self, party_id: int) -> list[AnalysisResult]:  # type: ignore[override]
        return []


@pytest.fixture
def mock_backend(sample_parties: list[Party], sample_result: AnalysisResult) -> MockBackend:
    return MockBackend(parties=sample_parties, snapshot=None, analysis=sample_result)

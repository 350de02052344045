"""Load settings.yaml into typed dataclasses. Applies the base URL override from the environment."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"


@dataclass
class ApiConfig:
    base_url: str
    timeout_sec: float
    analyze_timeout_sec: float
    base_url_env: str = "ELECTION_PULSE_API_URL"


@dataclass
class DashboardConfig:
    auto_select_first: bool
    health_check_timeout_sec: float
    output_dir: Path


@dataclass
class AppConfig:
    api: ApiConfig
    dashboard: DashboardConfig


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing.
    The backend base URL may be overridden by the environment variable named
    in api.base_url_env (loaded from .env by the CLI).
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    api_raw = raw["api"]
    base_url_env = str(api_raw.get("base_url_env", "ELECTION_PULSE_API_URL"))
    base_url = str(api_raw["base_url"])

    env_url = os.environ.get(base_url_env, "").strip()
    if env_url:
        logger.info("Backend URL overridden by %s: %s", base_url_env, env_url)
        base_url = env_url

    api = ApiConfig(
        base_url=base_url,
        timeout_sec=float(api_raw["timeout_sec"]),
        analyze_timeout_sec=float(api_raw.get("analyze_timeout_sec", api_raw["timeout_sec"])),
        base_url_env=base_url_env,
    )

    dashboard_raw = raw.get("dashboard") or {}
    dashboard = DashboardConfig(
        auto_select_first=bool(dashboard_raw.get("auto_select_first", True)),
        health_check_timeout_sec=float(dashboard_raw.get("health_check_timeout_sec", 5)),
        output_dir=Path(dashboard_raw.get("output_dir", "./reports")),
    )

    return AppConfig(api=api, dashboard=dashboard)

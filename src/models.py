"""Pure dataclasses for the Election Pulse dashboard. No I/O, no deps."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Party:
    id: int
    name: str
    color: str             # "#rrggbb"
    leader: str = ""


@dataclass(frozen=True)
class AnalysisResult:
    sentiment_score: int   # 0..100
    key_topics: tuple[str, ...] = ()
    emotion: str | None = None
    created_at: str | None = None  # only set on snapshots


class Phase(Enum):
    IDLE = "idle"
    LOADING_SNAPSHOT = "loading_snapshot"
    LOADING_ANALYSIS = "loading_analysis"
    READY = "ready"
    FAILED = "failed"


_LOADING_PHASES = frozenset({Phase.LOADING_SNAPSHOT, Phase.LOADING_ANALYSIS})


@dataclass(frozen=True)
class SessionState:
    parties: tuple[Party, ...] = ()
    selected_party: Party | None = None
    result: AnalysisResult | None = None
    phase: Phase = Phase.IDLE
    error: str | None = None
    generation: int = 0
    is_fallback: bool = False
    results_by_party: Mapping[int, AnalysisResult] = field(default_factory=dict)

    @property
    def loading(self) -> bool:
        return self.phase in _LOADING_PHASES

"""Session events and the pure transition function of the analysis state machine.

Every change to SessionState goes through transition(). Events produced by a
network call carry the generation that was current when the call was issued;
an event whose generation no longer matches is stale and leaves the state
untouched.
"""

from dataclasses import dataclass, replace

from src.models import AnalysisResult, Party, Phase, SessionState

ANALYSIS_FAILED_MESSAGE = "Analysis failed. Please check backend connection."


@dataclass(frozen=True)
class PartiesLoaded:
    parties: tuple[Party, ...]
    is_fallback: bool = False


@dataclass(frozen=True)
class PartySelected:
    party: Party


@dataclass(frozen=True)
class RefreshRequested:
    pass


@dataclass(frozen=True)
class SnapshotResolved:
    generation: int
    result: AnalysisResult | None  # None: no snapshot, or the lookup failed


@dataclass(frozen=True)
class AnalysisSucceeded:
    generation: int
    result: AnalysisResult


@dataclass(frozen=True)
class AnalysisFailed:
    generation: int
    message: str = ANALYSIS_FAILED_MESSAGE


Event = (
    PartiesLoaded
    | PartySelected
    | RefreshRequested
    | SnapshotResolved
    | AnalysisSucceeded
    | AnalysisFailed
)


def is_current(state: SessionState, generation: int, phase: Phase) -> bool:
    """True when a response issued under `generation` may still be applied."""
    return state.generation == generation and state.phase is phase


def _ready(state: SessionState, result: AnalysisResult) -> SessionState:
    party = state.selected_party
    cache = dict(state.results_by_party)
    if party is not None:
        cache[party.id] = result
    return replace(
        state,
        phase=Phase.READY,
        result=result,
        error=None,
        results_by_party=cache,
    )


def transition(state: SessionState, event: Event) -> SessionState:
    """Return the state that follows `event`. Returns `state` itself when nothing changes.

    Raises:
        ValueError: If a selected party is not part of the loaded catalog.
        TypeError: On an unknown event type.
    """
    if isinstance(event, PartiesLoaded):
        parties = tuple(event.parties)
        if state.selected_party is not None and state.selected_party not in parties:
            return replace(
                state,
                parties=parties,
                is_fallback=event.is_fallback,
                selected_party=None,
                result=None,
                phase=Phase.IDLE,
                error=None,
                generation=state.generation + 1,
            )
        return replace(state, parties=parties, is_fallback=event.is_fallback)

    if isinstance(event, PartySelected):
        if event.party not in state.parties:
            raise ValueError(f"Party {event.party.name!r} is not in the loaded catalog")
        return replace(
            state,
            selected_party=event.party,
            result=state.results_by_party.get(event.party.id),
            phase=Phase.LOADING_SNAPSHOT,
            error=None,
            generation=state.generation + 1,
        )

    if isinstance(event, RefreshRequested):
        if state.selected_party is None:
            return state
        # The current result stays visible while the fresh analysis runs.
        return replace(
            state,
            phase=Phase.LOADING_ANALYSIS,
            error=None,
            generation=state.generation + 1,
        )

    if isinstance(event, SnapshotResolved):
        if not is_current(state, event.generation, Phase.LOADING_SNAPSHOT):
            return state
        if event.result is None:
            return replace(state, phase=Phase.LOADING_ANALYSIS)
        return _ready(state, event.result)

    if isinstance(event, AnalysisSucceeded):
        if not is_current(state, event.generation, Phase.LOADING_ANALYSIS):
            return state
        return _ready(state, event.result)

    if isinstance(event, AnalysisFailed):
        if not is_current(state, event.generation, Phase.LOADING_ANALYSIS):
            return state
        return replace(state, phase=Phase.FAILED, error=event.message or ANALYSIS_FAILED_MESSAGE)

    raise TypeError(f"Unknown event: {event!r}")

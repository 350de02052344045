"""Render-state projection: SessionState -> DashboardView. Pure, no I/O."""

from dataclasses import dataclass

from src.models import SessionState

PANEL_LOADING = "loading"
PANEL_ERROR = "error"
PANEL_EMPTY = "empty"
PANEL_RESULT = "result"

# Gauge colours: below 30 negative, below 60 neutral, otherwise positive.
_BANDS: tuple[tuple[int, str, str], ...] = (
    (30, "negative", "#e74c3c"),
    (60, "neutral", "#f1c40f"),
    (101, "positive", "#27ae60"),
)

NO_EMOTION_LABEL = "Neutral / Unclear"


@dataclass(frozen=True)
class PartyButton:
    id: int
    name: str
    color: str
    active: bool


@dataclass(frozen=True)
class DashboardView:
    panel: str                        # one of PANEL_*
    updating: bool                    # result shown while a new one loads
    parties: tuple[PartyButton, ...]
    selected_party_id: int | None
    selected_party_name: str | None
    loading: bool
    error: str | None
    sentiment_score: int | None
    score_band: str | None
    score_color: str | None
    key_topics: tuple[str, ...]
    emotion: str | None
    emotion_label: str | None
    loading_message: str
    refresh_label: str
    can_refresh: bool
    is_fallback: bool


def score_band(score: int) -> tuple[str, str]:
    """Return (band, colour) for a 0..100 sentiment score."""
    for upper, band, color in _BANDS:
        if score < upper:
            return band, color
    return _BANDS[-1][1], _BANDS[-1][2]


def _choose_panel(state: SessionState) -> str:
    if state.error:
        return PANEL_ERROR
    if state.result is not None:
        return PANEL_RESULT
    if state.loading:
        return PANEL_LOADING
    return PANEL_EMPTY


def project(state: SessionState) -> DashboardView:
    party = state.selected_party
    result = state.result
    panel = _choose_panel(state)

    buttons = tuple(
        PartyButton(id=p.id, name=p.name, color=p.color, active=party is not None and p.id == party.id)
        for p in state.parties
    )

    band = color = None
    if result is not None:
        band, color = score_band(result.sentiment_score)

    return DashboardView(
        panel=panel,
        updating=panel == PANEL_RESULT and state.loading,
        parties=buttons,
        selected_party_id=party.id if party else None,
        selected_party_name=party.name if party else None,
        loading=state.loading,
        error=state.error,
        sentiment_score=result.sentiment_score if result else None,
        score_band=band,
        score_color=color,
        key_topics=result.key_topics if result else (),
        emotion=result.emotion if result else None,
        emotion_label=(result.emotion or NO_EMOTION_LABEL) if result else None,
        loading_message=f"Crunching numbers for {party.name if party else 'election'}...",
        refresh_label="Analyzing..." if state.loading else "Refresh Analysis",
        can_refresh=party is not None and not state.loading,
        is_fallback=state.is_fallback,
    )

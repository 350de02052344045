"""Convert backend JSON payloads into model dataclasses.

Parsers raise ValueError on malformed input; the HTTP adapter turns that into
a BackendError for the endpoint that produced the payload.
"""

from typing import Any

from src.models import AnalysisResult, Party

_DEFAULT_COLOR = "#718096"


def parse_party(raw: Any) -> Party:
    if not isinstance(raw, dict):
        raise ValueError(f"party entry is not an object: {raw!r}")
    try:
        party_id = int(raw["id"])
        name = str(raw["name"]).strip()
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"party entry missing id/name: {raw!r}") from exc
    if not name:
        raise ValueError(f"party entry has empty name: {raw!r}")
    # The Go backend serialises the colour as color_hex.
    color = raw.get("color") or raw.get("color_hex") or _DEFAULT_COLOR
    return Party(
        id=party_id,
        name=name,
        color=str(color),
        leader=str(raw.get("leader") or ""),
    )


def parse_parties(raw: Any) -> list[Party]:
    """Parse the /parties payload. A non-array payload is an error."""
    if not isinstance(raw, list):
        raise ValueError(f"expected an array of parties, got {type(raw).__name__}")
    return [parse_party(item) for item in raw]


def _clamp_score(value: Any) -> int:
    try:
        score = round(float(value))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"sentiment_score is not numeric: {value!r}") from exc
    return max(0, min(100, score))


def parse_analysis_result(raw: Any) -> AnalysisResult:
    if not isinstance(raw, dict):
        raise ValueError(f"analysis payload is not an object: {raw!r}")
    if "sentiment_score" not in raw:
        raise ValueError("analysis payload has no sentiment_score")

    topics_raw = raw.get("key_topics") or []
    if not isinstance(topics_raw, list):
        raise ValueError(f"key_topics is not an array: {topics_raw!r}")

    emotion = raw.get("emotion")
    emotion = str(emotion).strip() if emotion else None

    created_at = raw.get("created_at")
    return AnalysisResult(
        sentiment_score=_clamp_score(raw["sentiment_score"]),
        key_topics=tuple(str(t) for t in topics_raw if str(t).strip()),
        emotion=emotion or None,
        created_at=str(created_at) if created_at else None,
    )


def parse_snapshot(raw: Any) -> AnalysisResult | None:
    """Parse the /latest payload. exists=false means no cached snapshot."""
    if not isinstance(raw, dict):
        raise ValueError(f"snapshot payload is not an object: {raw!r}")
    if not raw.get("exists", False):
        return None
    return parse_analysis_result(raw)


def parse_history(raw: Any) -> list[AnalysisResult]:
    if not isinstance(raw, list):
        raise ValueError(f"expected an array of snapshots, got {type(raw).__name__}")
    return [parse_analysis_result(item) for item in raw]

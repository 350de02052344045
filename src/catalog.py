"""Party catalog loading with an offline fallback list."""

import logging
from dataclasses import dataclass

from src.backend.base import AnalysisBackend, BackendError
from src.models import Party

logger = logging.getLogger(__name__)

# Shown when the backend cannot provide the catalog, so the dashboard stays usable.
FALLBACK_PARTIES: tuple[Party, ...] = (
    Party(id=1, name="DMK", color="#dd2e44", leader="M.K. Stalin"),
    Party(id=2, name="AIADMK", color="#27ae60", leader="Edappadi Palaniswami"),
    Party(id=3, name="TVK", color="#f1c40f", leader="Vijay"),
)


@dataclass(frozen=True)
class PartyCatalog:
    parties: tuple[Party, ...]
    is_fallback: bool = False


async def load_catalog(backend: AnalysisBackend) -> PartyCatalog:
    """Fetch the party list, substituting FALLBACK_PARTIES on failure.

    Never raises. The returned catalog records whether
    the list came from the network (is_fallback=False) or not.
    """
    try:
        parties = await backend.list_parties()
    except BackendError as exc:
        logger.warning("Party catalog unavailable, using offline list: %s", exc)
        return PartyCatalog(parties=FALLBACK_PARTIES, is_fallback=True)
    except Exception as exc:
        logger.warning("Party catalog raised unexpectedly, using offline list: %s", exc)
        return PartyCatalog(parties=FALLBACK_PARTIES, is_fallback=True)

    return PartyCatalog(parties=tuple(parties), is_fallback=False)

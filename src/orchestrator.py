"""Analysis orchestration: selection, snapshot fall-through, refresh, supersession."""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from src.backend.base import AnalysisBackend, BackendError
from src.catalog import PartyCatalog, load_catalog
from src.models import AnalysisResult, Party, Phase, SessionState
from src.state import (
    ANALYSIS_FAILED_MESSAGE,
    AnalysisFailed,
    AnalysisSucceeded,
    Event,
    PartiesLoaded,
    PartySelected,
    RefreshRequested,
    SnapshotResolved,
    is_current,
    transition,
)

logger = logging.getLogger(__name__)


class AnalysisOrchestrator:
    """Owns the session state and drives the backend calls behind it.

    All state changes go through dispatch(). select() and refresh() return
    immediately with the new loading state applied and run the network calls
    in a background task; a later select() or refresh() supersedes earlier
    tasks, whose results are then dropped by the generation check.
    """

    def __init__(
        self,
        backend: AnalysisBackend,
        on_change: Callable[[SessionState], None] | None = None,
        auto_select: bool = True,
    ) -> None:
        self._backend = backend
        self._on_change = on_change
        self._auto_select = auto_select
        self._state = SessionState()
        self._tasks: set[asyncio.Task] = set()

    @property
    def state(self) -> SessionState:
        return self._state

    def dispatch(self, event: Event) -> SessionState:
        """Apply an event. Notifies on_change only when the state actually changed."""
        new_state = transition(self._state, event)
        if new_state is self._state:
            logger.debug("Ignored stale or no-op event %s", type(event).__name__)
            return self._state
        self._state = new_state
        if self._on_change:
            self._on_change(new_state)
        return new_state

    async def load_parties(self) -> PartyCatalog:
        """Load the catalog once and auto-select the first party if none is selected."""
        catalog = await load_catalog(self._backend)
        self.dispatch(PartiesLoaded(parties=catalog.parties, is_fallback=catalog.is_fallback))
        if self._auto_select and self._state.selected_party is None and catalog.parties:
            self.select(catalog.parties[0])
        return catalog

    def select(self, party: Party) -> asyncio.Task:
        """Select a party: look up its snapshot, falling back to a fresh analysis.

        Raises:
            ValueError: If the party is not in the loaded catalog.
        """
        self.dispatch(PartySelected(party))
        logger.info("Selected %s", party.name)
        return self._spawn(self._resolve_selection(party, self._state.generation))

    def select_by_name(self, name: str) -> asyncio.Task:
        """Select a party by case-insensitive name.

        Raises:
            ValueError: If no loaded party has that name.
        """
        wanted = name.strip().lower()
        for party in self._state.parties:
            if party.name.lower() == wanted:
                return self.select(party)
        known = ", ".join(p.name for p in self._state.parties)
        raise ValueError(f"Unknown party {name!r}. Known parties: {known}")

    def refresh(self) -> asyncio.Task | None:
        """Force a fresh analysis of the selected party, bypassing the snapshot.

        Returns None when no party is selected.
        """
        party = self._state.selected_party
        if party is None:
            logger.debug("Refresh requested with no party selected")
            return None
        self.dispatch(RefreshRequested())
        logger.info("Refreshing analysis for %s", party.name)
        return self._spawn(self._run_analysis(party, self._state.generation))

    async def wait_idle(self) -> None:
        """Wait until every spawned task, including superseded ones, has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def history(self, party: Party) -> list[AnalysisResult]:
        """Past analyses for a party. Not part of the session state."""
        return await self._backend.history(party.id)

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _resolve_selection(self, party: Party, generation: int) -> None:
        if not is_current(self._state, generation, Phase.LOADING_SNAPSHOT):
            logger.debug("Skipping snapshot lookup for superseded selection of %s", party.name)
            return
        try:
            snapshot = await self._backend.latest_snapshot(party.name)
        except BackendError as exc:
            # Cache lookup is best-effort: treat failure as "no snapshot".
            logger.warning("Snapshot lookup failed for %s: %s", party.name, exc)
            snapshot = None
        except Exception as exc:
            logger.warning("Snapshot lookup for %s raised unexpectedly: %s", party.name, exc)
            snapshot = None

        self.dispatch(SnapshotResolved(generation=generation, result=snapshot))

        if is_current(self._state, generation, Phase.LOADING_ANALYSIS):
            logger.info("No snapshot for %s, running fresh analysis", party.name)
            await self._run_analysis(party, generation)

    async def _run_analysis(self, party: Party, generation: int) -> None:
        try:
            result = await self._backend.analyze(party.name)
        except Exception as exc:
            if self._state.generation != generation:
                logger.debug("Dropping failure of superseded analysis for %s: %s", party.name, exc)
            elif isinstance(exc, BackendError):
                logger.error("Analysis failed for %s: %s", party.name, exc)
            else:
                logger.error("Analysis for %s raised unexpectedly: %s", party.name, exc)
            self.dispatch(AnalysisFailed(generation=generation, message=ANALYSIS_FAILED_MESSAGE))
            return

        self.dispatch(AnalysisSucceeded(generation=generation, result=result))

"""
Debounced address suggestions for the listing form.

One engine serves one input session. Keystrokes re-arm a debounce timer;
when it fires, a single lookup is issued for the query text at that moment.
Each lookup is tagged with that query, and its result is applied only if the
query is still current when it arrives, so a slow response for an older
query can never replace the candidates of a newer one.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Set

import httpx

from app.core.config import get_settings
from app.core.scheduler import DebounceScheduler
from app.geocoding.models import Candidate, SuggestionPanel, SuggestionState, parse_candidates

settings = get_settings()
logger = logging.getLogger(__name__)

Lookup = Callable[[str], Awaitable[Any]]
PanelListener = Callable[[SuggestionPanel], None]
SelectListener = Callable[[Candidate], None]


class AddressSuggestionEngine:
    """Turns keystrokes into debounced geocoder lookups and ranked candidates."""

    def __init__(
        self,
        lookup: Lookup,
        scheduler: Optional[DebounceScheduler] = None,
        delay: Optional[float] = None,
        limit: Optional[int] = None,
        on_change: Optional[PanelListener] = None,
        on_select: Optional[SelectListener] = None,
    ):
        self._lookup = lookup
        self._scheduler = scheduler or DebounceScheduler()
        self.delay = delay if delay is not None else settings.SUGGESTION_DEBOUNCE_MS / 1000
        self.limit = limit if limit is not None else settings.SUGGESTION_LIMIT
        self._on_change = on_change
        self._on_select = on_select
        self._inflight: Set[asyncio.Task] = set()

        self.query = ""
        self.address = ""
        self.candidates: List[Candidate] = []
        self.show_suggestions = False
        self.loading = False
        self.state: SuggestionState = "idle"

    @property
    def closed(self) -> bool:
        return self.state == "cancelled"

    @property
    def panel_visible(self) -> bool:
        """The panel shows while focused and there is something to show."""
        return self.show_suggestions and (bool(self.query.strip()) or self.loading)

    def snapshot(self) -> SuggestionPanel:
        return SuggestionPanel(
            query=self.query,
            address=self.address,
            visible=self.panel_visible,
            loading=self.loading,
            state=self.state,
            candidates=list(self.candidates),
        )

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.snapshot())

    # ==================== Input events ====================

    def on_query_change(self, text: str) -> None:
        """Record a keystroke and re-arm the debounce timer. No network call."""
        if self.closed:
            return

        self.query = text
        self.show_suggestions = True
        self.state = "typing"
        self._scheduler.schedule(self.delay, self.debounce_fire)
        self._notify()

    def on_focus(self) -> None:
        if self.closed:
            return
        self.show_suggestions = True
        self._notify()

    def on_blur(self) -> None:
        if self.closed:
            return
        self.show_suggestions = False
        self.loading = False
        self.state = "idle"
        self._notify()

    def debounce_fire(self) -> Optional[asyncio.Task]:
        """
        Run after the quiet period. Blank queries clear the candidates;
        anything else starts exactly one lookup for the current query.
        """
        if self.closed:
            return None

        query = self.query
        if not query.strip():
            self.candidates = []
            self.loading = False
            self.state = "idle"
            self._notify()
            return None

        self.loading = True
        self.state = "loading"
        self._notify()

        task = asyncio.get_running_loop().create_task(self._run_lookup(query))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _run_lookup(self, query: str) -> None:
        try:
            payload = await self._lookup(query)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error searching locations for {query!r}: {e}")
            self.on_lookup_error(query)
            return
        except Exception as e:
            logger.exception(f"Unexpected error searching locations for {query!r}: {e}")
            self.on_lookup_error(query)
            return
        self.on_lookup_result(payload, query)

    # ==================== Lookup outcomes ====================

    def _is_current(self, for_query: str) -> bool:
        if self.closed:
            return False
        if for_query != self.query:
            logger.debug(f"Discarding stale suggestions for {for_query!r} (current {self.query!r})")
            return False
        return True

    def on_lookup_result(self, response: Any, for_query: str) -> bool:
        """
        Apply a lookup response if ``for_query`` is still the current query.

        Returns True when the candidate list was replaced.
        """
        if not self._is_current(for_query):
            return False

        self.candidates = parse_candidates(response, self.limit)
        self.loading = False
        if self.show_suggestions:
            self.state = "populated" if self.candidates else "empty"
        self._notify()
        return True

    def on_lookup_error(self, for_query: str) -> bool:
        """Clear the candidates after a failed lookup for the current query."""
        if not self._is_current(for_query):
            return False

        self.candidates = []
        self.loading = False
        if self.show_suggestions:
            self.state = "empty"
        self._notify()
        return True

    def on_candidate_select(self, candidate: Candidate) -> None:
        """Use the candidate label as the address and close the panel."""
        if self.closed:
            return

        # A fire armed by earlier keystrokes would search for the label
        self._scheduler.cancel_all()
        self.address = candidate.label
        self.query = candidate.label
        self.show_suggestions = False
        self.loading = False
        self.state = "idle"
        if self._on_select is not None:
            self._on_select(candidate)
        self._notify()

    def select_index(self, index: int) -> Candidate:
        """Select the candidate at ``index`` in the visible list."""
        if not 0 <= index < len(self.candidates):
            raise IndexError(f"No suggestion at position {index}")
        candidate = self.candidates[index]
        self.on_candidate_select(candidate)
        return candidate

    def close(self) -> None:
        """Tear down: drop the pending fire and any in-flight lookups."""
        self._scheduler.cancel_all()
        for task in list(self._inflight):
            task.cancel()
        self._inflight.clear()
        self.query = ""
        self.candidates = []
        self.loading = False
        self.show_suggestions = False
        self.state = "cancelled"

"""Fire-and-forget preference tracking."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from airease_core.schemas import (
    FlightSelectionEvent,
    SortEvent,
    TimeFilterEvent,
    TrackingEvent,
)

if TYPE_CHECKING:
    from airease_client.api import AireaseClient
    from airease_core.schemas import ScoredFlight

logger = logging.getLogger(__name__)


class PreferenceTracker:
    """Sends user actions to the preferences service as one-way messages.

    ``record_*`` methods are plain functions returning ``None``: there is
    nothing to await and no result or error comes back to the caller. Each
    event is posted at most once from a background task; transport failures
    are logged at DEBUG and dropped. No retry, queueing or ordering.
    """

    def __init__(self, client: AireaseClient) -> None:
        self._client = client
        self._pending: set[asyncio.Task[None]] = set()

    def record_sort_action(self, sort_by: str) -> None:
        """User picked a sort option (price, duration, score, ...)."""
        self._send(SortEvent(sort_by=sort_by))

    def record_time_filter(self, time_range: str) -> None:
        """User applied a departure time range such as ``"6-12"``."""
        self._send(TimeFilterEvent(time_range=time_range))

    def record_flight_selection(self, selected: ScoredFlight) -> None:
        """User opened a flight's details."""
        flight = selected.flight
        self._send(
            FlightSelectionEvent(
                flight_id=flight.id,
                flight_number=flight.flight_number,
                airline=flight.airline,
                airline_code=flight.airline_code,
                departure_city=flight.departure_city,
                arrival_city=flight.arrival_city,
                departure_time=flight.departure_time.isoformat(),
                price=flight.price,
                overall_score=selected.score.overall_score,
                cabin=flight.cabin,
            )
        )

    @property
    def pending(self) -> int:
        """Number of events still in flight."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for in-flight events, e.g. before closing the HTTP client."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _send(self, event: TrackingEvent) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, dropping %s event", event.kind)
            return
        task = loop.create_task(
            self._client.post_event(event), name=f"track-{event.kind.value}"
        )
        self._pending.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.debug("Failed to track %s: %s", task.get_name(), exc)

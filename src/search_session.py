# src/search_session.py

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional, Union

from core.date_matrix import build_date_matrix
from core.errors import SearchError
from core.models import (
    DateMatrixEntry,
    Failed,
    Idle,
    Offer,
    SearchQuery,
    Searching,
    SessionState,
    SortBy,
    Success,
)
from core.normalizer import ensure_offers_list, normalize_offers
from core.query_builder import build_request, default_query, make_query, parse_iso_date
from core.selection import parse_sort_by, select_offers, validate_max_stops

logger = logging.getLogger(__name__)

DEFAULT_MAX_STOPS = 2


@dataclass(frozen=True)
class SearchTicket:
    """Identifies one triggered search and the options it was triggered with."""

    seq: int
    query: SearchQuery
    max_stops: int
    sort_by: SortBy


class SearchSession:
    """
    Owns the current query, filter options and results for one user.

    Every trigger gets a monotonically increasing sequence number. Only the
    latest ticket may commit; completions for older tickets are dropped, so
    the visible result follows trigger order, not arrival order.
    """

    def __init__(self, client, config, query: Optional[SearchQuery] = None):
        self.client = client
        self.config = config
        self.query: SearchQuery = query or default_query(config)
        self.max_stops: int = DEFAULT_MAX_STOPS
        self.sort_by: SortBy = SortBy.PRICE
        self.state: SessionState = Idle()
        self._seq = 0
        self._activated = False

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def latest_seq(self) -> int:
        return self._seq

    @property
    def loading(self) -> bool:
        return isinstance(self.state, Searching)

    @property
    def offers(self) -> List[Offer]:
        if isinstance(self.state, Success):
            return list(self.state.offers)
        return []

    @property
    def error(self) -> Optional[str]:
        if isinstance(self.state, Failed):
            return self.state.message
        return None

    # ------------------------------------------------------------------
    # Query / option updates (no search is triggered)
    # ------------------------------------------------------------------

    def update_query(self, **changes: Any) -> SearchQuery:
        """Replace the query wholesale; unknown fields raise TypeError."""
        fields = {f.name: getattr(self.query, f.name) for f in dataclasses.fields(self.query)}
        unknown = set(changes) - set(fields)
        if unknown:
            raise TypeError(f"Unknown query fields: {', '.join(sorted(unknown))}")
        fields.update(changes)
        self.query = make_query(**fields)
        return self.query

    def set_filters(self, max_stops: Optional[int] = None, sort_by: Union[str, SortBy, None] = None) -> None:
        """Options for the next search; invalid values raise ValidationError."""
        if max_stops is not None:
            self.max_stops = validate_max_stops(max_stops)
        if sort_by is not None:
            self.sort_by = parse_sort_by(sort_by)

    def date_matrix(self) -> List[DateMatrixEntry]:
        return build_date_matrix(self.query.departure_date)

    def pick_date(self, day: Union[date, str]) -> SearchQuery:
        return self.update_query(departure_date=parse_iso_date(day))

    # ------------------------------------------------------------------
    # Search lifecycle
    # ------------------------------------------------------------------

    def begin(self, query: Optional[SearchQuery] = None) -> SearchTicket:
        """Enter Searching: previous results and error are cleared."""
        if query is not None:
            self.query = query
        self._seq += 1
        ticket = SearchTicket(
            seq=self._seq,
            query=self.query,
            max_stops=self.max_stops,
            sort_by=self.sort_by,
        )
        self.state = Searching(seq=ticket.seq)
        return ticket

    def is_current(self, ticket: SearchTicket) -> bool:
        return ticket.seq == self._seq

    def resolve(self, ticket: SearchTicket, payload: Any) -> bool:
        """Commit a response for ``ticket``. Returns False if it was superseded."""
        if not self.is_current(ticket):
            logger.debug("Dropping stale response for search #%s (latest #%s)", ticket.seq, self._seq)
            return False

        try:
            ensure_offers_list(payload)
            offers = normalize_offers(payload, ticket.query.destination_code)
            selected = select_offers(offers, ticket.max_stops, ticket.sort_by)
        except SearchError as exc:
            return self.reject(ticket, exc)

        logger.info(
            "Search #%s: %d offers, %d after filters", ticket.seq, len(offers), len(selected)
        )
        self.state = Success(offers=selected)
        return True

    def reject(self, ticket: SearchTicket, error: Exception) -> bool:
        """Record a failure for ``ticket``. Offers are cleared, not kept."""
        if not self.is_current(ticket):
            logger.debug("Dropping stale failure for search #%s (latest #%s)", ticket.seq, self._seq)
            return False

        message = error.message if isinstance(error, SearchError) else (str(error) or "Search failed")
        logger.warning("Search #%s failed: %s", ticket.seq, message)
        self.state = Failed(message=message)
        return True

    def search(self, query: Optional[SearchQuery] = None) -> SessionState:
        ticket = self.begin(query)
        try:
            descriptor = build_request(ticket.query)
            payload = self.client.search(descriptor)
        except SearchError as exc:
            self.reject(ticket, exc)
        else:
            self.resolve(ticket, payload)
        return self.state

    def activate(self) -> SessionState:
        """Run the initial search once so the page is not empty."""
        if self._activated:
            return self.state
        self._activated = True
        return self.search()

# src/services/search_client.py

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from core.errors import ParseError, TransportError
from core.models import RequestDescriptor
from core.normalizer import ensure_offers_list

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/search"


class SearchApiClient:
    """
    Minimal client for the aggregation endpoint (GET /api/search).

    The endpoint owns provider credentials and talks to Amadeus / Tequila;
    this side only sends the normalized query and decodes the JSON reply.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: int = 20,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._http = session or requests

    @classmethod
    def from_config(cls, config) -> "SearchApiClient":
        return cls(base_url=config.base_url, timeout_seconds=config.timeout_seconds)

    def search(self, descriptor: RequestDescriptor) -> Dict[str, Any]:
        url = f"{self.base_url}{SEARCH_PATH}"
        params = descriptor.to_params()
        logger.info("GET %s %s", SEARCH_PATH, params)

        try:
            resp = self._http.get(
                url,
                params=params,
                headers={"Cache-Control": "no-store", "Accept": "application/json"},
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            logger.warning("Search request failed: %s", exc)
            raise TransportError(str(exc) or None) from exc

        if not 200 <= resp.status_code < 300:
            logger.warning("Search endpoint answered HTTP %s", resp.status_code)
            raise TransportError(f"HTTP {resp.status_code}", status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            logger.warning("Search endpoint returned a non-JSON body")
            raise ParseError("Invalid JSON in search response") from exc

        ensure_offers_list(payload)

        return payload

"""NominatimClient: async address resolution and autosuggest.

Usage::

    from propbuddy.config import get_settings
    from propbuddy.geocoding.client import NominatimClient

    async with NominatimClient(get_settings()) as geocoder:
        match = await geocoder.resolve("Flinders Street Station, Melbourne")

Every query is restricted to the configured viewbox with ``bounded=1``.

Failure strategy
----------------
- Zero results from ``resolve`` raises NotFound.
- Network errors, non-2xx responses and unparseable payloads raise
  GeocoderUnavailable (a NotFound subclass). Nothing is retried.
- ``suggest`` never raises; failures and stale responses yield ``[]``.
"""
from __future__ import annotations

import logging
from typing import Any

import httpx

from propbuddy.config import Settings
from propbuddy.errors import GeocoderUnavailable, NotFound
from propbuddy.geocoding.debounce import Debouncer
from propbuddy.geocoding.models import NominatimPlace
from propbuddy.models import AddressMatch, AddressSuggestion

logger = logging.getLogger(__name__)


class NominatimClient:
    """Async client for Nominatim's ``/search`` endpoint.

    One instance serves one suggestion stream: the debouncer is shared by all
    ``suggest`` calls on the instance, so a newer call supersedes older ones.
    """

    def __init__(self, settings: Settings) -> None:
        self._client = httpx.AsyncClient(
            base_url=settings.nominatim_base_url,
            headers={"User-Agent": settings.nominatim_user_agent},
            timeout=httpx.Timeout(settings.http_timeout_seconds, connect=10.0),
        )
        self._viewbox = settings.geocoder_viewbox
        self._suggest_limit = settings.suggest_limit
        self._min_chars = settings.suggest_min_chars
        self._debouncer = Debouncer(settings.suggest_debounce_seconds)

    async def __aenter__(self) -> "NominatimClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -----------------------------------------------------------------------
    # Internal transport layer
    # -----------------------------------------------------------------------

    async def _search(self, query: str, limit: int, **extra: Any) -> list[NominatimPlace]:
        """GET /search and parse the candidate list.

        Raises:
            GeocoderUnavailable: transport error, non-2xx status or a payload
                that is not a list of places.
        """
        params: dict[str, Any] = {
            "q": query,
            "format": "json",
            "addressdetails": 1,
            "limit": limit,
            "viewbox": self._viewbox,
            "bounded": 1,
        }
        params.update(extra)

        try:
            response = await self._client.get("/search", params=params)
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, list):
                raise ValueError(f"expected a JSON array, got {type(payload).__name__}")
            return [NominatimPlace.model_validate(item) for item in payload]
        except (httpx.HTTPError, ValueError) as exc:
            # pydantic.ValidationError and JSONDecodeError are ValueErrors.
            raise GeocoderUnavailable(query, str(exc)) from exc

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    async def resolve(self, text: str) -> AddressMatch:
        """Resolve free text to the single best match inside the viewbox.

        Args:
            text: Raw address text; surrounding whitespace is ignored.

        Returns:
            AddressMatch with coordinate, display name and derived suburb.

        Raises:
            NotFound: No candidate matched (or the text was blank).
            GeocoderUnavailable: The geocoder call itself failed.
        """
        query = text.strip()
        if not query:
            raise NotFound(text)

        places = await self._search(query, limit=1)
        if not places:
            raise NotFound(query)

        match = places[0].to_address_match()
        logger.debug("Resolved %r to %s", query, match.coordinate)
        return match

    async def suggest(self, text: str) -> list[AddressSuggestion]:
        """Return up to ``suggest_limit`` suggestions for partial input.

        Debounced: the request is only issued if no newer ``suggest`` call
        arrives within the debounce delay, and results are dropped if a newer
        call started while this one was in flight.

        Args:
            text: Partial address typed so far.

        Returns:
            Suggestions in geocoder rank order; ``[]`` for short input,
            superseded calls and failures.
        """
        token = self._debouncer.next_token()
        query = text.strip()
        if len(query) < self._min_chars:
            return []

        if not await self._debouncer.settle(token):
            return []

        try:
            places = await self._search(query, limit=self._suggest_limit, autocomplete=1)
        except GeocoderUnavailable as exc:
            logger.warning("Suggestion lookup failed for %r: %s", query, exc)
            return []

        if not self._debouncer.is_current(token):
            logger.debug("Discarding stale suggestions for %r", query)
            return []

        return [place.to_suggestion() for place in places]

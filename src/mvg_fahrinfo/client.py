from __future__ import annotations

from typing import Iterable, List, Optional

import requests
from pydantic import JsonValue

from . import urls
from .decode import (
    decode_connections,
    decode_departure_info,
    decode_json,
    decode_locations,
)
from .http import DEFAULT_TIMEOUT, create_session, fetch
from .models import Connection, Departure, DepartureInfo, Location, Station


class MVG:
    """Client for the MVG fahrinfo API.

    Holds one pooled session for its whole lifetime; instances can be shared
    between threads. Every call performs exactly one request and either
    returns decoded models or raises an :class:`~mvg_fahrinfo.errors.MVGError`.

    Args:
        session: Session to use instead of a fresh one from ``create_session``.
        timeout: Connect/read timeout in seconds per request.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: Optional[str] = None,
    ):
        self.session = session or create_session(user_agent=user_agent)
        self.timeout = timeout

    def __enter__(self) -> "MVG":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _get(self, url: str, context: str) -> bytes:
        return fetch(self.session, url, context, timeout=self.timeout)

    def stations_by_name(self, search: str) -> List[Location]:
        """Search locations by name. An empty term yields the API's default list."""
        body = self._get(urls.query_url_name(search), f"search {search!r}")
        return decode_locations(body)

    def stations_by_id(self, station_id: str) -> List[Location]:
        """Look a station up by id.

        Unknown ids raise ``UnexpectedStatus``; callers wanting a name search
        fallback have to do it themselves.
        """
        body = self._get(urls.query_url_id(station_id), f"station id {station_id}")
        return decode_locations(body)

    def departure_info_by_id(self, station_id: str) -> DepartureInfo:
        """Departures and serving lines of a station."""
        body = self._get(urls.departure_url(station_id), f"station id {station_id}")
        return decode_departure_info(body)

    def departures_by_id(self, station_id: str) -> List[Departure]:
        return self.departure_info_by_id(station_id).departures

    def connections(
        self,
        from_id: str,
        to_id: str,
        options: Optional[urls.RoutingOptions] = None,
    ) -> List[Connection]:
        """Connections between two stations; an empty list means no route."""
        body = self._get(
            urls.routing_url(from_id, to_id, options),
            f"station ids {from_id} - {to_id}",
        )
        return decode_connections(body)

    def nearby_stations(self, latitude: float, longitude: float) -> List[Location]:
        body = self._get(
            urls.nearby_url(latitude, longitude),
            f"coordinates {latitude}, {longitude}",
        )
        return decode_locations(body)

    def interruptions(self) -> JsonValue:
        """The raw interruptions feed; its payload is not interpreted."""
        return decode_json(self._get(urls.interruptions_url(), "interruptions"))


def stations_only(locations: Iterable[Location]) -> List[Station]:
    """Keep only the station variants of a location list."""
    return [loc for loc in locations if isinstance(loc, Station)]

from __future__ import annotations

import string
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# URL scheme of the MVG fahrinfo API, see
# https://github.com/leftshift/python_mvg_api/blob/master/mvg_api/__init__.py
BASE_URL = "https://www.mvg.de/api/fahrinfo"
QUERY_NAME_URL = BASE_URL + "/location/queryWeb?q={}"
DEPARTURE_URL = BASE_URL + "/departure/{}?footway=0"
NEARBY_URL = BASE_URL + "/location/nearby?latitude={}&longitude={}"
ROUTING_URL = BASE_URL + "/routing/?"
INTERRUPTIONS_URL = "https://www.mvg.de/.rest/betriebsaenderungen/api/interruptions"

_UNRESERVED = frozenset((string.ascii_letters + string.digits).encode("ascii"))


def percent_encode(value: str) -> str:
    """Escape every UTF-8 byte of ``value`` that is not an ASCII letter or digit."""
    return "".join(
        chr(byte) if byte in _UNRESERVED else f"%{byte:02X}"
        for byte in value.encode("utf-8")
    )


class RoutingOptions(BaseModel):
    """Optional routing filters. Defaults emit no extra query parameters."""

    model_config = ConfigDict(frozen=True)

    time: Optional[datetime] = None
    arrival: bool = False
    max_walk_time_to_start: Optional[int] = Field(default=None, ge=0)
    max_walk_time_to_dest: Optional[int] = Field(default=None, ge=0)
    change_limit: Optional[int] = Field(default=None, ge=0)
    ubahn: bool = True
    bus: bool = True
    tram: bool = True
    sbahn: bool = True

    def query_params(self) -> List[str]:
        params: List[str] = []
        if self.time is not None:
            params.append(f"time={int(self.time.timestamp() * 1000)}")
            # arrival only means something together with a time
            if self.arrival:
                params.append("arrival=true")
        if self.max_walk_time_to_start is not None:
            params.append(f"maxTravelTimeFootwayToStation={self.max_walk_time_to_start}")
        if self.max_walk_time_to_dest is not None:
            params.append(f"maxTravelTimeFootwayToDestination={self.max_walk_time_to_dest}")
        if self.change_limit is not None:
            params.append(f"changeLimit={self.change_limit}")
        if not self.ubahn:
            params.append("transportTypeUnderground=false")
        if not self.bus:
            params.append("transportTypeBus=false")
        if not self.tram:
            params.append("transportTypeTram=false")
        if not self.sbahn:
            params.append("transportTypeSBahn=false")
        return params


def query_url_name(name: str) -> str:
    """URL to query stations by (free text) name."""
    return QUERY_NAME_URL.format(percent_encode(name))


def query_url_id(station_id: str) -> str:
    """URL to query a station by id.

    The API has no dedicated endpoint for this, the departure endpoint is reused.
    """
    return DEPARTURE_URL.format(station_id)


def departure_url(station_id: str) -> str:
    """URL to query departures by station id."""
    return DEPARTURE_URL.format(station_id)


def nearby_url(latitude: float, longitude: float) -> str:
    """URL to query stations near a coordinate."""
    return NEARBY_URL.format(latitude, longitude)


def routing_url(from_id: str, to_id: str, options: Optional[RoutingOptions] = None) -> str:
    """URL to query connections between two station ids."""
    params = [f"fromStation={from_id}", f"toStation={to_id}"]
    if options is not None:
        params.extend(options.query_params())
    return ROUTING_URL + "&".join(params)


def interruptions_url() -> str:
    """URL of the interruptions feed."""
    return INTERRUPTIONS_URL

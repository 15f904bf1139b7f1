from __future__ import annotations

from typing import List, Type, TypeVar, Union

from pydantic import BaseModel, JsonValue, TypeAdapter, ValidationError

from .errors import DecodeError
from .models import (
    Connection,
    ConnectionList,
    Departure,
    DepartureInfo,
    Location,
    Locations,
)

M = TypeVar("M", bound=BaseModel)

LOCATION = TypeAdapter(Location)
OPAQUE_JSON = TypeAdapter(JsonValue)


def decode(kind: Union[Type[M], TypeAdapter], body: bytes | str):
    """Validate a JSON body against a model class or a ``TypeAdapter``.

    Raises:
        DecodeError: body is not JSON or does not match the expected shape.
            ``errors`` holds pydantic's error list with field locations.
    """
    try:
        if isinstance(kind, TypeAdapter):
            return kind.validate_json(body)
        return kind.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(
            f"Could not decode {e.title}: {e}", e.errors(include_url=False)
        ) from e


def decode_locations(body: bytes | str) -> List[Location]:
    return decode(Locations, body).locations


def decode_location(body: bytes | str) -> Location:
    """Decode a single location object, e.g. a plain station."""
    return decode(LOCATION, body)


def decode_departure_info(body: bytes | str) -> DepartureInfo:
    return decode(DepartureInfo, body)


def decode_departures(body: bytes | str) -> List[Departure]:
    return decode_departure_info(body).departures


def decode_connections(body: bytes | str) -> List[Connection]:
    return decode(ConnectionList, body).connection_list


def decode_json(body: bytes | str) -> JsonValue:
    """Decode a body without interpreting it."""
    return decode(OPAQUE_JSON, body)

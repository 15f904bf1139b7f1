"""Typed client for the MVG fahrinfo API."""

__version__ = "0.3.0"

from .errors import (  # noqa: E402
    DecodeError,
    InvalidRequestTarget,
    MVGError,
    TransportError,
    UnexpectedStatus,
)
from .models import (  # noqa: E402
    Address,
    Connection,
    ConnectionPart,
    Departure,
    DepartureInfo,
    Footway,
    Location,
    Position,
    Product,
    ServingLine,
    Station,
    Transportation,
)
from .urls import RoutingOptions  # noqa: E402
from .client import MVG, stations_only  # noqa: E402

__all__ = [
    "__version__",
    "MVG",
    "stations_only",
    "RoutingOptions",
    "MVGError",
    "InvalidRequestTarget",
    "TransportError",
    "UnexpectedStatus",
    "DecodeError",
    "Location",
    "Station",
    "Address",
    "Position",
    "Connection",
    "ConnectionPart",
    "Transportation",
    "Footway",
    "Departure",
    "DepartureInfo",
    "ServingLine",
    "Product",
]

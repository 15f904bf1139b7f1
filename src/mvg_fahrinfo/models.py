"""Typed model of the MVG fahrinfo payloads.

Python field names are snake_case, the wire uses camelCase. Locations and
connection parts are tagged unions resolved on their discriminator field
(``type`` and ``connectionPartType``); unknown tags fail validation.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Annotated, Any, ClassVar, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, JsonValue, model_validator
from pydantic.alias_generators import to_camel

UInt8 = Annotated[int, Field(ge=0, le=255)]
Int8 = Annotated[int, Field(ge=-128, le=127)]
EpochMillis = Annotated[int, Field(ge=0)]


def local_time(epoch_millis: int) -> datetime:
    """Convert epoch milliseconds (UTC based) to an aware local datetime."""
    return datetime.fromtimestamp(epoch_millis / 1000, tz=timezone.utc).astimezone()


class Product(str, Enum):
    SBAHN = "SBAHN"
    UBAHN = "UBAHN"
    BUS = "BUS"
    BAHN = "BAHN"
    TRAM = "TRAM"

    @property
    def display_name(self) -> str:
        return _PRODUCT_NAMES[self]


_PRODUCT_NAMES = {
    Product.SBAHN: "S-Bahn",
    Product.UBAHN: "U-Bahn",
    Product.BUS: "Bus",
    Product.BAHN: "Bahn",
    Product.TRAM: "Tram",
}


class WireModel(BaseModel):
    """Immutable model with camelCase wire aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        """Re-encode to the wire shape, emitting only fields that were present."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class _Tagged(WireModel):
    tag_field: ClassVar[str] = "type"

    def model_post_init(self, __context: Any) -> None:
        # defaulted tags still belong to the wire shape
        self.model_fields_set.add(self.tag_field)


# ---------------------------------------------------------------------------
# Locations


class Station(_Tagged):
    type: Literal["station"] = "station"
    latitude: float
    longitude: float
    id: str
    diva_id: int = Field(ge=0)
    place: str
    name: str
    has_live_data: bool
    has_zoom_data: bool
    products: List[str]
    aliases: Optional[str] = None
    link: Optional[str] = None
    tariff_zones: str
    # per line metadata, shape owned by the API
    lines: JsonValue

    @property
    def coordinates(self) -> Tuple[float, float]:
        return self.latitude, self.longitude

    def display_name(self) -> str:
        return f"{self.name}, {self.place}"


class Address(_Tagged):
    type: Literal["address"] = "address"
    latitude: float
    longitude: float
    place: str
    street: str
    poi: bool

    @property
    def coordinates(self) -> Tuple[float, float]:
        return self.latitude, self.longitude

    def display_name(self) -> str:
        return f"{self.street}, {self.place}"


class Position(_Tagged):
    """A bare coordinate."""

    type: Literal["location"] = "location"
    latitude: float
    longitude: float

    @property
    def coordinates(self) -> Tuple[float, float]:
        return self.latitude, self.longitude

    def display_name(self) -> str:
        return f"{self.latitude}, {self.longitude}"


Location = Annotated[Union[Station, Address, Position], Field(discriminator="type")]


class Locations(WireModel):
    locations: List[Location]


# ---------------------------------------------------------------------------
# Departures


class ServingLine(WireModel):
    destination: str
    sev: bool
    partial_net: str
    product: Product
    line_number: str
    diva_id: str


class Departure(WireModel):
    departure_time: EpochMillis
    product: Product
    label: str
    destination: str
    live: bool
    cancelled: bool
    line_background_color: str
    departure_id: str
    sev: bool
    platform: str
    stop_position_number: UInt8

    def departure_local(self) -> datetime:
        return local_time(self.departure_time)

    def minutes_until(self, now: Optional[datetime] = None) -> int:
        """Whole minutes from ``now`` (default: current time) until departure."""
        # naive values are taken as local time
        now = now.astimezone() if now is not None else datetime.now(tz=timezone.utc)
        return int((self.departure_local() - now).total_seconds() // 60)


class DepartureInfo(WireModel):
    serving_lines: List[ServingLine]
    departures: List[Departure]


# ---------------------------------------------------------------------------
# Connections


class PathDescriptor(WireModel):
    from_index: UInt8 = Field(alias="from")
    to_index: UInt8 = Field(alias="to")
    level: Int8


class Stop(WireModel):
    location: Location
    time: EpochMillis
    delay: int
    arr_delay: int

    def time_local(self) -> datetime:
        return local_time(self.time)


class _Leg(_Tagged):
    tag_field: ClassVar[str] = "connection_part_type"

    from_location: Location = Field(alias="from")
    to_location: Location = Field(alias="to")
    path: List[Location]
    path_description: List[PathDescriptor] = Field(default_factory=list)
    departure: EpochMillis
    arrival: EpochMillis
    cancelled: bool
    zoom_notice_departure: bool = False
    zoom_notice_arrival: bool = False
    departure_stop_position_number: UInt8
    arrival_stop_position_number: UInt8
    no_changing_required: bool = False

    def departure_time(self) -> datetime:
        return local_time(self.departure)

    def arrival_time(self) -> datetime:
        return local_time(self.arrival)

    def duration(self) -> timedelta:
        return timedelta(milliseconds=self.arrival - self.departure)


class Transportation(_Leg):
    connection_part_type: Literal["TRANSPORTATION"] = "TRANSPORTATION"
    stops: List[Stop]
    interchange_path: List[Location] = Field(default_factory=list)
    delay: int
    arr_delay: int
    product: Product
    label: str
    server_id: Optional[str] = None
    destination: Optional[str] = None
    sev: bool
    departure_platform: str
    arrival_platform: str
    from_id: Optional[str] = None
    departure_id: Optional[str] = None
    info_messages: Optional[List[str]] = None

    @property
    def is_delayed(self) -> bool:
        return self.delay > 0 or self.arr_delay > 0

    def display_label(self) -> str:
        return f"{self.product.display_name} {self.label}"


class Footway(_Leg):
    connection_part_type: Literal["FOOTWAY"] = "FOOTWAY"
    interchange_path: List[JsonValue] = Field(default_factory=list)


ConnectionPart = Annotated[
    Union[Transportation, Footway], Field(discriminator="connection_part_type")
]


class Connection(WireModel):
    zoom_notice_from: bool = False
    zoom_notice_to: bool = False
    from_location: Location = Field(alias="from")
    to_location: Location = Field(alias="to")
    departure: EpochMillis
    arrival: EpochMillis
    connection_part_list: List[ConnectionPart]
    efa_ticket_ids: List[str]
    server_id: int
    ring_from: UInt8
    ring_to: UInt8
    old_tarif: bool
    banner_hash: str

    @model_validator(mode="after")
    def _parts_in_order(self) -> "Connection":
        parts = self.connection_part_list
        for prev, part in zip(parts, parts[1:]):
            if part.departure < prev.arrival:
                raise ValueError(
                    f"connection parts out of order: part departing at {part.departure} "
                    f"starts before previous arrival at {prev.arrival}"
                )
        return self

    def departure_time(self) -> datetime:
        return local_time(self.departure)

    def arrival_time(self) -> datetime:
        return local_time(self.arrival)

    def duration(self) -> timedelta:
        return timedelta(milliseconds=self.arrival - self.departure)

    def transportations(self) -> List[Transportation]:
        return [p for p in self.connection_part_list if isinstance(p, Transportation)]

    @property
    def transfers(self) -> int:
        return max(len(self.transportations()) - 1, 0)


class ConnectionList(WireModel):
    connection_list: List[Connection]

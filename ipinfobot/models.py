"""Dataclasses for queries, lookup records, and reply candidates."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .document import Document


@dataclass(frozen=True)
class Query:
    """One inline query as delivered by Telegram."""

    id: str
    text: str


@dataclass(frozen=True)
class GeoPoint:
    """Numeric coordinates, as sent in a map pin."""

    latitude: float
    longitude: float


@dataclass
class Geolocation:
    """Where an IP is located. Every field may be missing on its own."""

    latitude: str | None = None
    longitude: str | None = None
    city: str | None = None
    region: str | None = None
    country_name: str | None = None
    postal: str | None = None

    @property
    def coordinates(self) -> GeoPoint | None:
        """Parsed coordinates, or None unless both parse as numbers."""
        if self.latitude is None or self.longitude is None:
            return None
        try:
            return GeoPoint(float(self.latitude), float(self.longitude))
        except ValueError:
            return None

    @property
    def has_area(self) -> bool:
        return any((self.city, self.region, self.country_name))


@dataclass
class Company:
    """The organization that owns an IP address."""

    name: str
    domain: str
    type: str | None = None  # e.g. "isp", "hosting", "business"


@dataclass
class IPNetwork:
    """The autonomous system an IP address is routed through."""

    label: str  # e.g. "AS15169"
    name: str
    domain: str | None = None
    route: str | None = None  # e.g. "8.8.8.0/24"
    type: str | None = None


@dataclass
class IPRecord:
    """ipinfo.io data for a single IP address."""

    address: str
    hostname: str | None = None
    geolocation: Geolocation | None = None
    company: Company | None = None
    network: IPNetwork | None = None
    organization: str | None = None
    phone: str | None = None


@dataclass
class Prefix:
    """One announced network block of an ASN."""

    netblock: str
    id: str | None = None
    country: str | None = None


@dataclass
class ASNRecord:
    """ipinfo.io data for an autonomous system."""

    label: str
    name: str
    domain: str | None = None
    country: str | None = None
    registry: str | None = None
    allocated: str | None = None
    num_ips: int = 0
    prefixes: list[Prefix] = field(default_factory=list)
    prefixes6: list[Prefix] = field(default_factory=list)


class CandidateKind(Enum):
    """Reply card variants. The value is the card's Telegram result id."""

    FALLBACK = "-1"
    FULL_SUMMARY = "1"
    MAP_PIN = "2"
    COMPANY = "3"
    NETWORK = "4"
    LOCATION = "5"
    PREFIX_LIST = "6"
    ASN_SUMMARY = "7"


@dataclass(frozen=True)
class ReplyCandidate:
    """One selectable inline result: either a text document or a map pin."""

    kind: CandidateKind
    id: str
    title: str
    description: str | None = None
    document: Document | None = None
    point: GeoPoint | None = None

    def __post_init__(self):
        if (self.document is None) == (self.point is None):
            raise ValueError("needs exactly one of document or point")

"""
Shared data types for the Mamãe Zen service
"""
import datetime
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class AppView(Enum):
    DASHBOARD = "dashboard"
    CRY_ANALYZER = "cry_analyzer"
    CONSULTANT = "consultant"
    MAPS = "maps"
    RECIPES = "recipes"
    SOUNDS = "sounds"
    PREGNANCY = "pregnancy"


class SpecialistType(Enum):
    PEDIATRICIAN = "pediatra"
    PSYCHOLOGIST = "psicologa"
    NUTRITIONIST = "nutricionista"


class LocationStatus(Enum):
    UNKNOWN = "unknown"
    ACTIVE = "active"
    PERMISSION_DENIED = "permission_denied"
    SIGNAL_LOST = "signal_lost"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def to_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass
class Place:
    id: str
    name: str
    address: str
    rating: float
    is_open: bool
    distance_label: str
    category: str
    coordinate: Optional[Coordinate] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Place":
        """Build a place from the camelCase record the AI (or the offline table) returns."""
        lat, lng = data.get("lat"), data.get("lng")
        coordinate = None
        if lat is not None and lng is not None:
            coordinate = Coordinate(float(lat), float(lng))
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            address=str(data.get("address", "")),
            rating=float(data.get("rating") or 0.0),
            is_open=bool(data.get("isOpen", False)),
            distance_label=str(data.get("distance") or ""),
            category=str(data.get("type") or "hospital"),
            coordinate=coordinate,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "rating": self.rating,
            "is_open": self.is_open,
            "distance": self.distance_label,
            "category": self.category,
            "coordinate": self.coordinate.to_dict() if self.coordinate else None,
        }


@dataclass
class NavigationSession:
    selected_place: Place
    origin_coordinate: Coordinate
    started_at: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc))


@dataclass
class CryAnalysisResult:
    category: str
    probability: float
    advice: str
    emotional_tone: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Recipe:
    title: str
    description: str
    ingredients: List[str]
    instructions: List[str]
    benefits: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SoundTrack:
    id: str
    title: str
    category: str  # 'baby' | 'nature' | 'womb' | 'mom'
    video_id: str
    duration: str
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PregnancyWeek:
    week: int
    size_comparison: str
    fruit: str
    weight: str
    length: str
    description: str
    development: str
    nutrition: str
    avoid: str
    health_tip: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Outcome(Generic[T]):
    """Result of a remote call: the real value, or the static substitute.

    `reason` is only for logs; callers render `value` either way.
    """
    value: T
    fallback: bool = False
    reason: Optional[str] = None

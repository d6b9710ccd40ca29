"""
Navigation View Controller for the maps screen.

LIST -> STARTING_NAVIGATION -> GUIDED -> LIST, with LIST -> SEARCHING -> LIST
for queries. This controller is the only owner of the continuous location
subscription and of the comfort-phrase timer.
"""
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

import config
import local_database as local_db
from comfort import ComfortPhraseScheduler
from location import DEFAULT_COORDINATE, LocationErrorKind, LocationProvider
from models import Coordinate, NavigationSession, Place
from places import SOS_QUERY, PlaceSearchClient
from speech import SpeechAnnouncer
from timers import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

GREETING_RATE = 0.9
MAP_EMBED_URL = "https://maps.google.com/maps?saddr={olat},{olng}&daddr={dlat},{dlng}&t=m&z=17&output=embed"

REFUSED_NO_LOCATION = (
    "Não conseguimos iniciar a rota: o acesso à localização foi negado. "
    "Ative a permissão nas configurações do navegador."
)
REFUSED_BUSY = "Encerre a navegação atual antes de buscar ou escolher outro local."


class NavigationRefused(Exception):
    """A transition the user asked for was blocked; the message is shown as an alert."""


class NavState(Enum):
    LIST = "list"
    SEARCHING = "searching"
    STARTING_NAVIGATION = "starting_navigation"
    GUIDED = "guided"


@dataclass
class Notice:
    kind: str
    text: str
    dismissible: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "text": self.text, "dismissible": self.dismissible}


_NOTICES = {
    LocationErrorKind.PERMISSION_DENIED: Notice(
        "permission_denied",
        "Permissão de localização negada. A rota guiada fica desativada até você liberar o GPS.",
        dismissible=False,
    ),
    LocationErrorKind.UNSUPPORTED: Notice(
        "unsupported", "GPS indisponível neste aparelho. Usando localização padrão.", dismissible=False,
    ),
    LocationErrorKind.SIGNAL_LOST: Notice(
        "signal_lost", "Sinal de GPS perdido. Usando a última posição conhecida.", dismissible=True,
    ),
    LocationErrorKind.TIMEOUT: Notice(
        "signal_lost", "Usando GPS Offline.", dismissible=True,
    ),
}


# --- Views: one variant per state, each carrying only what it renders ---

@dataclass
class ListView:
    places: List[Place]
    query: str


@dataclass
class SearchingView:
    query: str


@dataclass
class StartingView:
    place: Place
    greeting: str


@dataclass
class GuidedView:
    session: NavigationSession
    coordinate: Coordinate
    support_message: Optional[str]


View = Union[ListView, SearchingView, StartingView, GuidedView]


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlng = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * 6371.0 * math.asin(math.sqrt(h))


def route_summary(origin: Coordinate, place: Place) -> Dict[str, Any]:
    # Places without coordinates route to the city default
    destination = place.coordinate or DEFAULT_COORDINATE
    distance = haversine_km(origin, destination)
    return {
        "map_url": MAP_EMBED_URL.format(olat=origin.latitude, olng=origin.longitude,
                                        dlat=destination.latitude, dlng=destination.longitude),
        "distance_km": round(distance, 1),
        "eta_minutes": max(1, math.ceil(distance / config.URBAN_SPEED_KMH * 60)),
        "instruction": "Siga para o destino",
        "destination": place.name,
    }


def _render_list(view: ListView) -> Dict[str, Any]:
    return {
        "query": view.query,
        "places": [p.to_dict() for p in view.places],
        "categories": local_db.PLACE_CATEGORIES,
    }


def _render_searching(view: SearchingView) -> Dict[str, Any]:
    return {"query": view.query, "message": "Buscando via Satélite..."}


def _render_starting(view: StartingView) -> Dict[str, Any]:
    return {"place": view.place.to_dict(), "greeting": view.greeting}


def _render_guided(view: GuidedView) -> Dict[str, Any]:
    return {
        "place": view.session.selected_place.to_dict(),
        "started_at": view.session.started_at.isoformat(),
        "origin": view.session.origin_coordinate.to_dict(),
        "coordinate": view.coordinate.to_dict(),
        "support_message": view.support_message,
        "route": route_summary(view.coordinate, view.session.selected_place),
    }


_RENDERERS: Dict[type, Callable[[Any], Dict[str, Any]]] = {
    ListView: _render_list,
    SearchingView: _render_searching,
    StartingView: _render_starting,
    GuidedView: _render_guided,
}


def render_view(view: View) -> Dict[str, Any]:
    return _RENDERERS[type(view)](view)


class NavigationViewController:
    def __init__(self, provider: LocationProvider, search_client: PlaceSearchClient,
                 announcer: SpeechAnnouncer, comfort: ComfortPhraseScheduler,
                 scheduler: Scheduler):
        self.provider = provider
        self.search_client = search_client
        self.announcer = announcer
        self.comfort = comfort
        self.scheduler = scheduler

        self.state = NavState.LIST
        self.places: List[Place] = []
        self.query = ""
        self.session: Optional[NavigationSession] = None
        self.notice: Optional[Notice] = None
        self._pending_searches = 0
        self._guided_timer: Optional[TimerHandle] = None

    # --- Location ---
    def locate(self) -> Coordinate:
        coordinate = self.provider.get_current_location()
        self._refresh_notice()
        return coordinate

    def dismiss_notice(self) -> None:
        if self.notice and self.notice.dismissible:
            self.notice = None

    def permission_granted(self) -> None:
        self.provider.reset_permission()
        if self.notice and self.notice.kind == "permission_denied":
            self.notice = None
        self._sync_tracking()

    # --- Search ---
    def begin_search(self, query: str, use_current: bool = False) -> Optional[Coordinate]:
        """
        Enter SEARCHING and return the origin to search from, or None for a
        blank query (handled locally, nothing is sent anywhere).
        """
        if not (query or "").strip():
            return None
        if self.state not in (NavState.LIST, NavState.SEARCHING):
            raise NavigationRefused(REFUSED_BUSY)
        self.query = query.strip()
        self.state = NavState.SEARCHING
        self._pending_searches += 1
        return self.provider.coordinate if use_current else self.locate()

    def complete_search(self, query: str, places: List[Place]) -> None:
        # Whichever search resolves last wins
        self.places = list(places)
        self.query = query.strip()
        self._pending_searches = max(0, self._pending_searches - 1)
        if self.state == NavState.SEARCHING and self._pending_searches == 0:
            self.state = NavState.LIST

    def search(self, query: str) -> List[Place]:
        origin = self.begin_search(query)
        if origin is None:
            return []
        places = self.search_client.search(query, origin)
        self.complete_search(query, places)
        return places

    def sos(self) -> List[Place]:
        origin = self.begin_search(SOS_QUERY, use_current=True)
        places = self.search_client.search(SOS_QUERY, origin)
        self.complete_search(SOS_QUERY, places)
        return places

    def find_place(self, place_id: str) -> Optional[Place]:
        return next((p for p in self.places if p.id == place_id), None)

    # --- Guided navigation ---
    def select_place(self, place: Place) -> NavigationSession:
        if self.state != NavState.LIST:
            raise NavigationRefused(REFUSED_BUSY)
        origin = self.locate()
        if self.provider.permission_denied:
            logger.info("Refusing guided navigation to %s: location permission denied", place.name)
            raise NavigationRefused(REFUSED_NO_LOCATION)

        self.session = NavigationSession(selected_place=place, origin_coordinate=origin)
        self.state = NavState.STARTING_NAVIGATION
        self.announcer.say(local_db.NAVIGATION_GREETING, rate=GREETING_RATE)

        # Wait roughly as long as the greeting takes to say
        delay = self.announcer.estimate_duration(local_db.NAVIGATION_GREETING, GREETING_RATE)
        self._guided_timer = self.scheduler.call_later(delay, self._enter_guided)
        logger.info("Starting navigation to %s (guided view in %.1fs)", place.name, delay)
        return self.session

    def _enter_guided(self) -> None:
        self._guided_timer = None
        if self.state != NavState.STARTING_NAVIGATION or self.session is None:
            return
        self.state = NavState.GUIDED
        self.comfort.start()
        self._sync_tracking()

    def exit_navigation(self) -> None:
        """Explicit user exit. Safe from any state; previous results stay listed."""
        self.announcer.cancel_all()
        self.comfort.stop()
        if self._guided_timer is not None:
            self._guided_timer.cancel()
            self._guided_timer = None
        self.session = None
        self.provider.stop_watching()
        if self.state in (NavState.STARTING_NAVIGATION, NavState.GUIDED):
            logger.info("Navigation ended")
            self.state = NavState.LIST

    def teardown(self) -> None:
        self.exit_navigation()
        self.state = NavState.LIST

    def _sync_tracking(self) -> None:
        guided = self.state == NavState.GUIDED and self.session is not None
        self.provider.sync_watching(guided, self._on_position, self._on_location_error)

    def _on_position(self, coordinate: Coordinate) -> None:
        if self.notice and self.notice.dismissible:
            self.notice = None

    def _on_location_error(self, kind: LocationErrorKind) -> None:
        self._refresh_notice()
        self._sync_tracking()

    def _refresh_notice(self) -> None:
        kind = self.provider.last_error
        if self.provider.permission_denied:
            kind = LocationErrorKind.PERMISSION_DENIED
        if kind is not None:
            self.notice = _NOTICES[kind]
        elif self.notice and self.notice.dismissible:
            self.notice = None

    # --- Rendering ---
    @property
    def view(self) -> View:
        if self.state == NavState.GUIDED and self.session is not None:
            return GuidedView(self.session, self.provider.coordinate, self.comfort.displayed)
        if self.state == NavState.STARTING_NAVIGATION and self.session is not None:
            return StartingView(self.session.selected_place, local_db.NAVIGATION_GREETING)
        if self.state == NavState.SEARCHING:
            return SearchingView(self.query)
        return ListView(self.places, self.query)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "view": render_view(self.view),
            "location": {
                "status": self.provider.status.value,
                "coordinate": self.provider.coordinate.to_dict(),
                "watching": self.provider.watching,
            },
            "notice": self.notice.to_dict() if self.notice else None,
        }

"""
Location Provider: last-known coordinate plus a status classification.
"""
import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

import config
from models import Coordinate, LocationStatus

logger = logging.getLogger(__name__)

DEFAULT_COORDINATE = Coordinate(config.DEFAULT_LATITUDE, config.DEFAULT_LONGITUDE)


class LocationErrorKind(Enum):
    PERMISSION_DENIED = "permission_denied"
    UNSUPPORTED = "unsupported"
    TIMEOUT = "timeout"
    SIGNAL_LOST = "signal_lost"


# Browser GeolocationPositionError.code
BROWSER_ERROR_CODES = {
    1: LocationErrorKind.PERMISSION_DENIED,
    2: LocationErrorKind.SIGNAL_LOST,  # POSITION_UNAVAILABLE
    3: LocationErrorKind.TIMEOUT,
}

_STATUS_FOR_ERROR = {
    LocationErrorKind.PERMISSION_DENIED: LocationStatus.PERMISSION_DENIED,
    LocationErrorKind.UNSUPPORTED: LocationStatus.UNSUPPORTED,
    LocationErrorKind.TIMEOUT: LocationStatus.SIGNAL_LOST,
    LocationErrorKind.SIGNAL_LOST: LocationStatus.SIGNAL_LOST,
}


class LocationError(Exception):
    def __init__(self, kind: LocationErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind


FixCallback = Callable[[Coordinate], None]
ErrorCallback = Callable[[LocationErrorKind], None]


class PositionSource:
    """The device GPS. One process-wide handle per client, owned by one controller."""

    def read_once(self) -> Coordinate:
        raise NotImplementedError

    def watch(self, on_fix: FixCallback, on_error: ErrorCallback) -> None:
        raise NotImplementedError

    def clear_watch(self) -> None:
        raise NotImplementedError


class ClientPositionSource(PositionSource):
    """
    GPS readings pushed by the browser.

    The client runs getCurrentPosition on load and, while `watching` is true,
    watchPosition; every result or error is posted back here.
    """

    def __init__(self, max_age_s: float = config.LOCATION_MAX_AGE_S,
                 clock: Callable[[], float] = time.monotonic):
        self.max_age_s = max_age_s
        self._clock = clock
        self._lock = threading.Lock()
        self._last_fix: Optional[Coordinate] = None
        self._last_fix_at: Optional[float] = None
        self._last_error: Optional[LocationErrorKind] = None
        self._on_fix: Optional[FixCallback] = None
        self._on_error: Optional[ErrorCallback] = None

    @property
    def watching(self) -> bool:
        return self._on_fix is not None

    def push_fix(self, coordinate: Coordinate) -> None:
        with self._lock:
            self._last_fix = coordinate
            self._last_fix_at = self._clock()
            self._last_error = None
            callback = self._on_fix
        if callback:
            callback(coordinate)

    def push_error(self, kind: LocationErrorKind) -> None:
        with self._lock:
            self._last_error = kind
            callback = self._on_error
        if callback:
            callback(kind)

    def read_once(self) -> Coordinate:
        with self._lock:
            if self._last_error is not None:
                raise LocationError(self._last_error)
            if self._last_fix is None:
                raise LocationError(LocationErrorKind.TIMEOUT, "no position reported yet")
            if self._clock() - self._last_fix_at > self.max_age_s:
                raise LocationError(LocationErrorKind.TIMEOUT, "last position is stale")
            return self._last_fix

    def watch(self, on_fix: FixCallback, on_error: ErrorCallback) -> None:
        with self._lock:
            self._on_fix = on_fix
            self._on_error = on_error

    def clear_watch(self) -> None:
        with self._lock:
            self._on_fix = None
            self._on_error = None


class LocationProvider:
    def __init__(self, source: PositionSource, default: Coordinate = DEFAULT_COORDINATE):
        self.source = source
        self.default = default
        self.status = LocationStatus.UNKNOWN
        self.last_coordinate: Optional[Coordinate] = None
        self.last_error: Optional[LocationErrorKind] = None
        self.watching = False
        self._on_update: Optional[FixCallback] = None
        self._on_error: Optional[ErrorCallback] = None

    @property
    def coordinate(self) -> Coordinate:
        """Last good reading, or the default so dependents always have one."""
        return self.last_coordinate or self.default

    @property
    def permission_denied(self) -> bool:
        return self.status == LocationStatus.PERMISSION_DENIED

    def get_current_location(self) -> Coordinate:
        try:
            coordinate = self.source.read_once()
        except LocationError as e:
            self._record_error(e.kind)
            return self.coordinate
        self._record_fix(coordinate)
        return coordinate

    def start_watching(self, on_update: Optional[FixCallback] = None,
                       on_error: Optional[ErrorCallback] = None) -> bool:
        if self.watching:
            return True
        if self.permission_denied:
            logger.info("Not watching position: permission denied")
            return False
        if on_update is not None:
            self._on_update = on_update
        if on_error is not None:
            self._on_error = on_error
        self.watching = True
        self.source.watch(self._handle_fix, self._handle_error)
        logger.debug("Continuous tracking started")
        return True

    def stop_watching(self) -> None:
        if not self.watching:
            return
        self.watching = False
        self.source.clear_watch()
        logger.debug("Continuous tracking stopped")

    def sync_watching(self, navigation_active: bool,
                      on_update: Optional[FixCallback] = None,
                      on_error: Optional[ErrorCallback] = None) -> None:
        """Watch iff a navigation session is active and permission is not denied."""
        if navigation_active and not self.permission_denied:
            self.start_watching(on_update, on_error)
        else:
            self.stop_watching()

    def reset_permission(self) -> None:
        """The user granted access again in the browser settings."""
        if self.permission_denied:
            self.status = LocationStatus.UNKNOWN
            self.last_error = None

    def _handle_fix(self, coordinate: Coordinate) -> None:
        self._record_fix(coordinate)
        if self._on_update:
            self._on_update(coordinate)

    def _handle_error(self, kind: LocationErrorKind) -> None:
        self._record_error(kind)
        if self._on_error:
            self._on_error(kind)

    def _record_fix(self, coordinate: Coordinate) -> None:
        self.last_coordinate = coordinate
        self.last_error = None
        if not self.permission_denied:
            self.status = LocationStatus.ACTIVE

    def _record_error(self, kind: LocationErrorKind) -> None:
        # last_coordinate is kept on purpose: dependents keep routing with it
        self.last_error = kind
        if self.permission_denied:
            return
        self.status = _STATUS_FOR_ERROR[kind]
        logger.info("Location error: %s (status now %s)", kind.value, self.status.value)

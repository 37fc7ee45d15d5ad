from __future__ import annotations

import logging
from typing import Protocol

from pydantic import ValidationError

from ..catalog.models import Coordinates

logger = logging.getLogger(__name__)


class GeolocationProvider(Protocol):
    def current_position(self) -> Coordinates | None: ...


class QueryGeolocation:
    """
    Position reported by the client alongside its request.

    Clients whose geolocation was denied or timed out send nothing, which
    reads as "position unknown" rather than an error.
    """

    def __init__(self, lat: float | None, lon: float | None) -> None:
        self.lat = lat
        self.lon = lon

    def current_position(self) -> Coordinates | None:
        if self.lat is None or self.lon is None:
            return None
        try:
            return Coordinates(latitude=self.lat, longitude=self.lon)
        except ValidationError:
            logger.debug("Ignoring out-of-range position lat=%s lon=%s", self.lat, self.lon)
            return None


class FixedGeolocation:
    def __init__(self, position: Coordinates | None) -> None:
        self.position = position

    def current_position(self) -> Coordinates | None:
        return self.position

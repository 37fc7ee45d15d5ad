from __future__ import annotations

import pytest

from backend.catalog.models import Coordinates
from backend.geo.provider import FixedGeolocation, QueryGeolocation


def test_query_position_reported():
    assert QueryGeolocation(37.8, -122.27).current_position() == Coordinates(
        latitude=37.8, longitude=-122.27
    )


@pytest.mark.parametrize("lat, lon", [(None, None), (37.8, None), (None, -122.27)])
def test_query_position_missing(lat, lon):
    assert QueryGeolocation(lat, lon).current_position() is None


@pytest.mark.parametrize("lat, lon", [(91.0, 0.0), (0.0, -181.0)])
def test_query_position_out_of_range(lat, lon):
    assert QueryGeolocation(lat, lon).current_position() is None


def test_fixed_position():
    here = Coordinates(latitude=37.4, longitude=-122.1)
    assert FixedGeolocation(here).current_position() is here
    assert FixedGeolocation(None).current_position() is None

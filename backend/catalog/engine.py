from __future__ import annotations

from typing import Any, Callable

import numpy as np
import pandas as pd

from .models import Coordinates, FilterField, FilterOptions, FilterSpec

EARTH_RADIUS_MILES = 3959.0


def _matches(column: pd.Series, predicate: Callable[[Any], bool]) -> pd.Series:
    """Evaluate ``predicate`` per cell and return a boolean mask aligned to ``column``."""
    return pd.Series([predicate(v) for v in column], index=column.index, dtype=bool)


def filter_catalog(catalog: pd.DataFrame, spec: FilterSpec) -> pd.DataFrame:
    """
    Keep the entries that satisfy every active constraint in ``spec``.

    Interests are OR'd across the selected set; every other field is AND'd.
    Catalog order is preserved.
    """
    mask = pd.Series(True, index=catalog.index, dtype=bool)

    if spec.duration:
        mask = mask & (catalog["duration"] == spec.duration)

    if spec.age_range:
        age = spec.age_range
        mask = mask & _matches(catalog["age_ranges"], lambda ages: age in ages)

    if spec.interests:
        wanted = set(spec.interests)
        mask = mask & _matches(catalog["interests"], lambda tags: bool(wanted & set(tags)))

    if spec.region:
        mask = mask & (catalog["region"] == spec.region)

    # City is applied on its own, whether or not a region is selected
    if spec.city:
        mask = mask & (catalog["city"] == spec.city)

    return catalog.loc[mask]


def haversine_miles(lat1, lon1, lat2, lon2):
    """Great-circle distance in miles. Accepts scalars or numpy arrays."""
    d_lat = np.radians(np.asarray(lat2, dtype=float) - lat1)
    d_lon = np.radians(np.asarray(lon2, dtype=float) - lon1)
    a = (
        np.sin(d_lat / 2) ** 2
        + np.cos(np.radians(lat1)) * np.cos(np.radians(lat2)) * np.sin(d_lon / 2) ** 2
    )
    # Rounding can push a just past 1 for antipodal points
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def rank_by_distance(entries: pd.DataFrame, observer: Coordinates | None) -> pd.DataFrame:
    """
    Order ``entries`` nearest-first from ``observer``.

    Without an observer the input comes back untouched. Entries with no
    coordinates stay in the slots they already occupy; the located entries
    are stably sorted into the remaining slots.
    """
    if observer is None or entries.empty:
        return entries

    ranked = entries.copy()
    distances = haversine_miles(
        observer.latitude,
        observer.longitude,
        ranked["latitude"].to_numpy(dtype=float),
        ranked["longitude"].to_numpy(dtype=float),
    )
    ranked["distance_miles"] = distances

    located = np.flatnonzero(~np.isnan(distances))
    positions = np.arange(len(ranked))
    positions[located] = located[np.argsort(distances[located], kind="stable")]
    return ranked.iloc[positions]


def format_distance(miles: float) -> str:
    return f"{miles:.1f} miles away"


def _with_override(spec: FilterSpec, field: FilterField, value: str) -> FilterSpec:
    if field == "interests":
        # Multi-select adds to the current selection
        interests = list(spec.interests)
        if value not in interests:
            interests.append(value)
        return spec.model_copy(update={"interests": interests})
    return spec.model_copy(update={field: value})


def is_option_viable(catalog: pd.DataFrame, spec: FilterSpec, field: FilterField, value: str) -> bool:
    """Would choosing ``value`` for ``field`` leave at least one location?"""
    return not filter_catalog(catalog, _with_override(spec, field, value)).empty


def available_options(
    catalog: pd.DataFrame,
    spec: FilterSpec,
    options: FilterOptions,
) -> dict[str, dict[str, bool]]:
    """Viability of every offered filter choice, given the current selection."""
    candidates: dict[FilterField, list[str]] = {
        "duration": list(options.durations),
        "age_range": list(options.age_ranges),
        "interests": list(options.interests),
        "region": list(options.regions),
        "city": options.cities_for(spec.region),
    }
    return {
        field: {value: is_option_viable(catalog, spec, field, value) for value in values}
        for field, values in candidates.items()
    }

from __future__ import annotations

import json
import logging
import math
from typing import Any

import pandas as pd

from .config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from .engine import format_distance
from .models import Coordinates, FilterOptions, LocationOut

logger = logging.getLogger(__name__)

CATALOG_COLUMNS: list[str] = [
    "id",
    "name",
    "address",
    "city",
    "region",
    "latitude",
    "longitude",
    "cost",
    "duration",
    "age_ranges",
    "interests",
    "parent_quotes",
    "insider_tips",
    "description",
    "long_description",
]

_df: pd.DataFrame | None = None
_options: FilterOptions | None = None


class CatalogError(RuntimeError):
    """The bundled catalog could not be read."""


class LocationNotFound(LookupError):
    def __init__(self, location_id: str) -> None:
        super().__init__(f"Unknown location: {location_id}")
        self.location_id = location_id


def _as_list(*values: Any) -> list[str]:
    """Merge singular/plural spellings of a field into one list of strings."""
    merged: list[str] = []
    for value in values:
        if value is None:
            continue
        items = value if isinstance(value, (list, tuple, set)) else [value]
        for item in items:
            text = str(item).strip()
            if text and text not in merged:
                merged.append(text)
    return merged


def _parse_coordinates(raw: Any) -> tuple[float, float]:
    """Return ``(lat, lon)``, or NaNs when the entry has no usable geocoding."""
    lat = lon = None
    if isinstance(raw, dict):
        lat = raw.get("lat", raw.get("latitude"))
        lon = raw.get("lng", raw.get("lon", raw.get("longitude")))
    elif isinstance(raw, (list, tuple)) and len(raw) == 2:
        lat, lon = raw
    try:
        coords = Coordinates(latitude=lat, longitude=lon)
    except (TypeError, ValueError):
        return math.nan, math.nan
    return coords.latitude, coords.longitude


def _text(value: Any, default: str | None = None) -> str | None:
    """Catalog text field as a string; missing or NaN values fall back to ``default``."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return default
    return str(value).strip()


def _normalize_record(record: dict[str, Any]) -> dict[str, Any]:
    lat, lon = _parse_coordinates(record.get("coordinates"))
    return {
        "id": str(record["id"]),
        "name": _text(record.get("name"), ""),
        "address": _text(record.get("address"), ""),
        "city": _text(record.get("city"), ""),
        "region": _text(record.get("region"), ""),
        "latitude": lat,
        "longitude": lon,
        "cost": _text(record.get("cost")),
        "duration": _text(record.get("duration")),
        "age_ranges": _as_list(record.get("ageRanges")),
        "interests": _as_list(record.get("interests")),
        "parent_quotes": _as_list(record.get("parentQuote"), record.get("parentQuotes")),
        "insider_tips": _as_list(record.get("insiderTips"), record.get("insiderTip")),
        "description": _text(record.get("description")),
        "long_description": _text(record.get("longDescription")),
    }


def build_frame(records: list[dict[str, Any]]) -> pd.DataFrame:
    """Normalise raw catalog records into the canonical catalog frame."""
    rows = [_normalize_record(r) for r in records]
    df = pd.DataFrame(rows, columns=CATALOG_COLUMNS)
    df["latitude"] = df["latitude"].astype(float)
    df["longitude"] = df["longitude"].astype(float)
    return df


def _build_options(raw: dict[str, Any]) -> FilterOptions:
    return FilterOptions(
        durations=raw.get("duration", {}),
        age_ranges=raw.get("ageRanges", {}),
        interests=raw.get("interests", {}),
        regions=raw.get("regions", {}),
    )


def load_catalog(config: CatalogConfig = DEFAULT_CATALOG_CONFIG) -> tuple[pd.DataFrame, FilterOptions]:
    """
    Read the static catalog file.

    Returns the normalised location frame and the filter option labels.
    """
    try:
        payload = json.loads(config.data_path.read_text(encoding=config.encoding))
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"Could not load catalog from {config.data_path}") from exc

    df = build_frame(payload.get("locations", []))
    if df["id"].duplicated().any():
        dupes = sorted(df.loc[df["id"].duplicated(), "id"].unique())
        raise CatalogError(f"Duplicate location ids in catalog: {dupes}")

    options = _build_options(payload.get("filterOptions", {}))
    logger.info("Loaded %d locations from %s", len(df), config.data_path)
    return df, options


def _ensure_loaded() -> tuple[pd.DataFrame, FilterOptions]:
    global _df, _options
    if _df is None or _options is None:
        _df, _options = load_catalog()
    return _df, _options


def get_dataframe() -> pd.DataFrame:
    """Return the in-memory catalog frame, loading it on first call."""
    return _ensure_loaded()[0]


def get_filter_options() -> FilterOptions:
    """Return the catalog's filter labels, loading the catalog on first call."""
    return _ensure_loaded()[1]


def find_location(catalog: pd.DataFrame, location_id: str) -> pd.Series:
    matches = catalog.loc[catalog["id"] == str(location_id)]
    if matches.empty:
        raise LocationNotFound(str(location_id))
    return matches.iloc[0]


def to_location_out(row: pd.Series, saved_ids: set[str] | None = None) -> LocationOut:
    coordinates = None
    if pd.notna(row["latitude"]) and pd.notna(row["longitude"]):
        coordinates = Coordinates(latitude=row["latitude"], longitude=row["longitude"])

    distance = row.get("distance_miles")
    distance = float(distance) if distance is not None and pd.notna(distance) else None

    return LocationOut(
        id=row["id"],
        name=row["name"],
        address=row["address"],
        city=row["city"],
        region=row["region"],
        coordinates=coordinates,
        cost=row["cost"] if pd.notna(row["cost"]) else None,
        duration=row["duration"] if pd.notna(row["duration"]) else None,
        age_ranges=list(row["age_ranges"]),
        interests=list(row["interests"]),
        parent_quotes=list(row["parent_quotes"]),
        insider_tips=list(row["insider_tips"]),
        description=row["description"] if pd.notna(row["description"]) else None,
        long_description=row["long_description"] if pd.notna(row["long_description"]) else None,
        distance_miles=round(distance, 2) if distance is not None else None,
        distance_label=format_distance(distance) if distance is not None else None,
        saved=bool(saved_ids) and row["id"] in saved_ids,
    )


def to_location_list(frame: pd.DataFrame, saved_ids: set[str] | None = None) -> list[LocationOut]:
    return [to_location_out(row, saved_ids) for _, row in frame.iterrows()]

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

FilterField = Literal["duration", "age_range", "interests", "region", "city"]

# Value the UI sends for its "All ..." choice
_UNCONSTRAINED = "all"


def _is_unconstrained(value: Any) -> bool:
    return value is None or str(value).strip() == "" or str(value).strip().lower() == _UNCONSTRAINED


class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class FilterSpec(BaseModel):
    """Current user-selected constraints. ``None`` / empty means no constraint."""

    duration: str | None = None
    age_range: str | None = None
    interests: list[str] = Field(default_factory=list)
    region: str | None = None
    city: str | None = None

    @field_validator("duration", "age_range", "region", "city", mode="before")
    @classmethod
    def _normalise_single(cls, value: Any) -> str | None:
        if _is_unconstrained(value):
            return None
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ValueError("expected a single string value")
        return str(value).strip()

    @field_validator("interests", mode="before")
    @classmethod
    def _normalise_interests(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ValueError("interests must be a list of strings")
        seen: list[str] = []
        for item in value:
            if _is_unconstrained(item):
                continue
            if isinstance(item, bool) or not isinstance(item, (str, int)):
                raise ValueError("interests must be a list of strings")
            item = str(item).strip()
            if item not in seen:
                seen.append(item)
        return seen

    def is_unconstrained(self) -> bool:
        return not (self.duration or self.age_range or self.interests or self.region or self.city)


class FilterOptions(BaseModel):
    durations: dict[str, str] = Field(default_factory=dict)
    age_ranges: dict[str, str] = Field(default_factory=dict)
    interests: dict[str, str] = Field(default_factory=dict)
    regions: dict[str, list[str]] = Field(default_factory=dict)

    def cities_for(self, region: str | None) -> list[str]:
        """Cities offered by the dependent city filter for ``region``."""
        if region:
            return list(self.regions.get(region, []))
        cities: list[str] = []
        for names in self.regions.values():
            cities.extend(c for c in names if c not in cities)
        return cities


class LocationOut(BaseModel):
    id: str
    name: str
    address: str
    city: str
    region: str
    coordinates: Coordinates | None = None
    cost: str | None = None
    duration: str | None = None
    age_ranges: list[str]
    interests: list[str]
    parent_quotes: list[str]
    insider_tips: list[str]
    description: str | None = None
    long_description: str | None = None
    distance_miles: float | None = None
    distance_label: str | None = None
    saved: bool = False


class SearchResponse(BaseModel):
    locations: list[LocationOut]
    total: int
    ranked_by_distance: bool
    message: str | None = None


class ViabilityRequest(BaseModel):
    filters: FilterSpec = Field(default_factory=FilterSpec)
    field: FilterField
    value: str = Field(..., min_length=1)


class ViabilityResponse(BaseModel):
    field: FilterField
    value: str
    viable: bool


class AvailabilityResponse(BaseModel):
    duration: dict[str, bool]
    age_range: dict[str, bool]
    interests: dict[str, bool]
    region: dict[str, bool]
    city: dict[str, bool]


class DirectionsResponse(BaseModel):
    location_id: str
    url: str


class SharePayload(BaseModel):
    title: str
    text: str
    url: str
    clipboard_text: str


class FavoritesResponse(BaseModel):
    ids: list[str]
    locations: list[LocationOut]
    saved: bool | None = None

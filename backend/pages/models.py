from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from ..catalog.models import FilterOptions, LocationOut, SharePayload


class PageKind(str, Enum):
    home = "home"
    saved = "saved"
    about = "about"
    detail = "detail"


class HomePage(BaseModel):
    page: Literal[PageKind.home] = PageKind.home


class SavedPage(BaseModel):
    page: Literal[PageKind.saved] = PageKind.saved


class AboutPage(BaseModel):
    page: Literal[PageKind.about] = PageKind.about


class DetailPage(BaseModel):
    page: Literal[PageKind.detail] = PageKind.detail
    location_id: str = Field(..., min_length=1)


Page = Annotated[Union[HomePage, SavedPage, AboutPage, DetailPage], Field(discriminator="page")]


class HomeView(BaseModel):
    page: Literal[PageKind.home] = PageKind.home
    title: str
    tagline: str
    total_locations: int
    saved_count: int
    filter_options: FilterOptions


class SavedView(BaseModel):
    page: Literal[PageKind.saved] = PageKind.saved
    locations: list[LocationOut]
    message: str | None = None


class AboutView(BaseModel):
    page: Literal[PageKind.about] = PageKind.about
    title: str
    body: str
    total_locations: int
    locations_per_region: dict[str, int]


class DetailView(BaseModel):
    page: Literal[PageKind.detail] = PageKind.detail
    location: LocationOut
    directions_url: str
    share: SharePayload

from __future__ import annotations

import pandas as pd

from ..catalog.data_store import find_location, to_location_list, to_location_out
from ..catalog.models import FilterOptions
from ..favorites.service import saved_locations
from ..sharing.links import directions_url, share_payload
from .models import (
    AboutPage,
    AboutView,
    DetailPage,
    DetailView,
    HomePage,
    HomeView,
    Page,
    SavedPage,
    SavedView,
)

APP_TITLE = "Tot Trot"
TAGLINE = "Parent-Approved Activities in the Bay Area"
ABOUT_BODY = (
    "Tot Trot is a hand-picked list of places around the Bay Area that parents "
    "actually take their kids. Every entry comes with a real parent quote and an "
    "insider tip. Built by parents, for parents."
)
NO_SAVED_MESSAGE = "No saved locations yet"


def resolve_page(
    page: Page,
    catalog: pd.DataFrame,
    options: FilterOptions,
    favorites: list[str],
    base_url: str,
) -> HomeView | SavedView | AboutView | DetailView:
    """Build the view model for ``page``. Raises ``LocationNotFound`` for an unknown detail id."""
    saved_ids = set(favorites)

    if isinstance(page, HomePage):
        return HomeView(
            title=APP_TITLE,
            tagline=TAGLINE,
            total_locations=len(catalog),
            saved_count=len(saved_locations(catalog, favorites)),
            filter_options=options,
        )

    if isinstance(page, SavedPage):
        locations = to_location_list(saved_locations(catalog, favorites), saved_ids)
        return SavedView(
            locations=locations,
            message=None if locations else NO_SAVED_MESSAGE,
        )

    if isinstance(page, AboutPage):
        counts = catalog["region"].value_counts()
        return AboutView(
            title=f"About {APP_TITLE}",
            body=ABOUT_BODY,
            total_locations=len(catalog),
            locations_per_region={region: int(counts.get(region, 0)) for region in options.regions},
        )

    if isinstance(page, DetailPage):
        location = to_location_out(find_location(catalog, page.location_id), saved_ids)
        return DetailView(
            location=location,
            directions_url=directions_url(location.address),
            share=share_payload(location, base_url),
        )

    raise TypeError(f"Unhandled page variant: {type(page).__name__}")

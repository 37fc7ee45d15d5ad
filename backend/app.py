from __future__ import annotations

import pandas as pd
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from starlette.middleware.sessions import SessionMiddleware

from .catalog.data_store import (
    LocationNotFound,
    find_location,
    get_dataframe,
    get_filter_options,
    to_location_list,
    to_location_out,
)
from .catalog.engine import (
    available_options,
    filter_catalog,
    is_option_viable,
    rank_by_distance,
)
from .catalog.models import (
    AvailabilityResponse,
    DirectionsResponse,
    FavoritesResponse,
    FilterOptions,
    FilterSpec,
    LocationOut,
    SearchResponse,
    SharePayload,
    ViabilityRequest,
    ViabilityResponse,
)
from .config import DEFAULT_APP_CONFIG
from .favorites.service import (
    add_favorite,
    load_favorites,
    remove_favorite,
    saved_locations,
    toggle_favorite,
)
from .favorites.store import KeyValueStore, SessionStore
from .geo.provider import GeolocationProvider, QueryGeolocation
from .pages.models import (
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
from .pages.views import resolve_page
from .sharing.links import directions_url, share_payload

NO_RESULTS_MESSAGE = "No locations found"

app = FastAPI(title="Tot Trot API", version="1.0.0")
app.add_middleware(SessionMiddleware, secret_key=DEFAULT_APP_CONFIG.session_secret)


# ── Injected collaborators ───────────────────────────────────────────────


def get_catalog() -> pd.DataFrame:
    return get_dataframe()


def get_options() -> FilterOptions:
    return get_filter_options()


def get_geolocation(
    lat: float | None = Query(default=None),
    lon: float | None = Query(default=None),
) -> GeolocationProvider:
    return QueryGeolocation(lat, lon)


def get_favorites_store(request: Request) -> KeyValueStore:
    return SessionStore(request.session)


def get_filter_spec(
    duration: str | None = None,
    age_range: str | None = None,
    interest: list[str] = Query(default=[]),
    region: str | None = None,
    city: str | None = None,
) -> FilterSpec:
    return FilterSpec(
        duration=duration,
        age_range=age_range,
        interests=interest,
        region=region,
        city=city,
    )


def _base_url(request: Request) -> str:
    return DEFAULT_APP_CONFIG.public_base_url or str(request.base_url)


def _lookup(catalog: pd.DataFrame, location_id: str) -> pd.Series:
    try:
        return find_location(catalog, location_id)
    except LocationNotFound:
        raise HTTPException(status_code=404, detail=f"Location {location_id} not found")


def _favorites_response(
    catalog: pd.DataFrame,
    ids: list[str],
    saved: bool | None = None,
) -> FavoritesResponse:
    return FavoritesResponse(
        ids=ids,
        locations=to_location_list(saved_locations(catalog, ids), set(ids)),
        saved=saved,
    )


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/filters", response_model=FilterOptions)
def filters(options: FilterOptions = Depends(get_options)) -> FilterOptions:
    return options


@app.post("/filters/availability", response_model=AvailabilityResponse)
def filter_availability(
    body: FilterSpec,
    catalog: pd.DataFrame = Depends(get_catalog),
    options: FilterOptions = Depends(get_options),
) -> AvailabilityResponse:
    return AvailabilityResponse(**available_options(catalog, body, options))


@app.post("/filters/viable", response_model=ViabilityResponse)
def filter_viable(
    body: ViabilityRequest,
    catalog: pd.DataFrame = Depends(get_catalog),
) -> ViabilityResponse:
    return ViabilityResponse(
        field=body.field,
        value=body.value,
        viable=is_option_viable(catalog, body.filters, body.field, body.value),
    )


# ── Locations ────────────────────────────────────────────────────────────


@app.get("/locations", response_model=SearchResponse)
def locations(
    spec: FilterSpec = Depends(get_filter_spec),
    geolocation: GeolocationProvider = Depends(get_geolocation),
    store: KeyValueStore = Depends(get_favorites_store),
    catalog: pd.DataFrame = Depends(get_catalog),
) -> SearchResponse:
    observer = geolocation.current_position()
    matches = rank_by_distance(filter_catalog(catalog, spec), observer)
    items = to_location_list(matches, set(load_favorites(store)))
    return SearchResponse(
        locations=items,
        total=len(items),
        ranked_by_distance=observer is not None,
        message=None if items else NO_RESULTS_MESSAGE,
    )


@app.get("/locations/{location_id}", response_model=LocationOut)
def location_detail(
    location_id: str,
    store: KeyValueStore = Depends(get_favorites_store),
    catalog: pd.DataFrame = Depends(get_catalog),
) -> LocationOut:
    return to_location_out(_lookup(catalog, location_id), set(load_favorites(store)))


@app.get("/locations/{location_id}/directions", response_model=DirectionsResponse)
def location_directions(
    location_id: str,
    catalog: pd.DataFrame = Depends(get_catalog),
) -> DirectionsResponse:
    row = _lookup(catalog, location_id)
    return DirectionsResponse(location_id=row["id"], url=directions_url(row["address"]))


@app.get("/locations/{location_id}/share", response_model=SharePayload)
def location_share(
    location_id: str,
    request: Request,
    catalog: pd.DataFrame = Depends(get_catalog),
) -> SharePayload:
    location = to_location_out(_lookup(catalog, location_id))
    return share_payload(location, _base_url(request))


# ── Favorites ────────────────────────────────────────────────────────────


@app.get("/favorites", response_model=FavoritesResponse)
def favorites(
    store: KeyValueStore = Depends(get_favorites_store),
    catalog: pd.DataFrame = Depends(get_catalog),
) -> FavoritesResponse:
    return _favorites_response(catalog, load_favorites(store))


@app.put("/favorites/{location_id}", response_model=FavoritesResponse)
def save_favorite(
    location_id: str,
    store: KeyValueStore = Depends(get_favorites_store),
    catalog: pd.DataFrame = Depends(get_catalog),
) -> FavoritesResponse:
    _lookup(catalog, location_id)
    return _favorites_response(catalog, add_favorite(store, location_id), saved=True)


@app.delete("/favorites/{location_id}", response_model=FavoritesResponse)
def unsave_favorite(
    location_id: str,
    store: KeyValueStore = Depends(get_favorites_store),
    catalog: pd.DataFrame = Depends(get_catalog),
) -> FavoritesResponse:
    return _favorites_response(catalog, remove_favorite(store, location_id), saved=False)


@app.post("/favorites/{location_id}/toggle", response_model=FavoritesResponse)
def toggle_saved(
    location_id: str,
    store: KeyValueStore = Depends(get_favorites_store),
    catalog: pd.DataFrame = Depends(get_catalog),
) -> FavoritesResponse:
    # Stale ids can still be unsaved, only new saves must exist
    if location_id not in load_favorites(store):
        _lookup(catalog, location_id)
    ids, saved = toggle_favorite(store, location_id)
    return _favorites_response(catalog, ids, saved=saved)


# ── Pages ────────────────────────────────────────────────────────────────


def _render(
    page: Page,
    request: Request,
    store: KeyValueStore,
    catalog: pd.DataFrame,
    options: FilterOptions,
):
    try:
        return resolve_page(
            page,
            catalog=catalog,
            options=options,
            favorites=load_favorites(store),
            base_url=_base_url(request),
        )
    except LocationNotFound as exc:
        raise HTTPException(status_code=404, detail=f"Location {exc.location_id} not found")


@app.get("/pages/home", response_model=HomeView)
def home_page(
    request: Request,
    store: KeyValueStore = Depends(get_favorites_store),
    catalog: pd.DataFrame = Depends(get_catalog),
    options: FilterOptions = Depends(get_options),
) -> HomeView:
    return _render(HomePage(), request, store, catalog, options)


@app.get("/pages/saved", response_model=SavedView)
def saved_page(
    request: Request,
    store: KeyValueStore = Depends(get_favorites_store),
    catalog: pd.DataFrame = Depends(get_catalog),
    options: FilterOptions = Depends(get_options),
) -> SavedView:
    return _render(SavedPage(), request, store, catalog, options)


@app.get("/pages/about", response_model=AboutView)
def about_page(
    request: Request,
    store: KeyValueStore = Depends(get_favorites_store),
    catalog: pd.DataFrame = Depends(get_catalog),
    options: FilterOptions = Depends(get_options),
) -> AboutView:
    return _render(AboutPage(), request, store, catalog, options)


@app.get("/pages/detail/{location_id}", response_model=DetailView)
def detail_page(
    location_id: str,
    request: Request,
    store: KeyValueStore = Depends(get_favorites_store),
    catalog: pd.DataFrame = Depends(get_catalog),
    options: FilterOptions = Depends(get_options),
) -> DetailView:
    return _render(DetailPage(location_id=location_id), request, store, catalog, options)

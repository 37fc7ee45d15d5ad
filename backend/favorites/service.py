from __future__ import annotations

import json
import logging

import pandas as pd

from ..config import DEFAULT_APP_CONFIG
from .store import KeyValueStore

logger = logging.getLogger(__name__)

FAVORITES_KEY = DEFAULT_APP_CONFIG.favorites_namespace


def load_favorites(store: KeyValueStore, namespace: str = FAVORITES_KEY) -> list[str]:
    """
    Read the saved location ids.

    Returns an empty list when nothing is stored or the stored value
    cannot be parsed.
    """
    raw = store.get(namespace)
    if raw is None:
        return []

    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Stored favorites are not valid JSON, ignoring them", exc_info=True)
        return []

    if not isinstance(parsed, list):
        logger.warning("Stored favorites are not a list (got %s), ignoring them", type(parsed).__name__)
        return []

    ids: list[str] = []
    for item in parsed:
        if isinstance(item, (str, int)) and not isinstance(item, bool) and str(item) not in ids:
            ids.append(str(item))
    return ids


def save_favorites(store: KeyValueStore, ids: list[str], namespace: str = FAVORITES_KEY) -> list[str]:
    unique = list(dict.fromkeys(str(i) for i in ids))
    store.set(namespace, json.dumps(unique))
    return unique


def add_favorite(store: KeyValueStore, location_id: str, namespace: str = FAVORITES_KEY) -> list[str]:
    ids = load_favorites(store, namespace)
    if str(location_id) not in ids:
        ids.append(str(location_id))
    return save_favorites(store, ids, namespace)


def remove_favorite(store: KeyValueStore, location_id: str, namespace: str = FAVORITES_KEY) -> list[str]:
    ids = [i for i in load_favorites(store, namespace) if i != str(location_id)]
    return save_favorites(store, ids, namespace)


def toggle_favorite(
    store: KeyValueStore,
    location_id: str,
    namespace: str = FAVORITES_KEY,
) -> tuple[list[str], bool]:
    """Flip the saved state of ``location_id``. Returns ``(ids, now_saved)``."""
    if str(location_id) in load_favorites(store, namespace):
        return remove_favorite(store, location_id, namespace), False
    return add_favorite(store, location_id, namespace), True


def saved_locations(catalog: pd.DataFrame, ids: list[str]) -> pd.DataFrame:
    """Saved entries in catalog order; ids missing from the catalog are skipped."""
    return catalog.loc[catalog["id"].isin(set(ids))]

from __future__ import annotations

from urllib.parse import quote_plus

from ..catalog.models import LocationOut, SharePayload

_DIRECTIONS_BASE = "https://www.google.com/maps/dir/?api=1&destination="


def directions_url(address: str) -> str:
    """Google Maps deep link with ``address`` as the destination."""
    return _DIRECTIONS_BASE + quote_plus(address.strip())


def location_url(base_url: str, location_id: str) -> str:
    return f"{base_url.rstrip('/')}/pages/detail/{location_id}"


def share_payload(location: LocationOut, base_url: str) -> SharePayload:
    """
    Build what a client hands to the platform share sheet.

    ``clipboard_text`` is the fallback block copied when no share
    capability is available.
    """
    url = location_url(base_url, location.id)
    text = f"Check out {location.name} in {location.city}!"

    lines = [location.name, location.address]
    if location.parent_quotes:
        lines.append(f'"{location.parent_quotes[0]}"')
    lines.append(url)

    return SharePayload(
        title=f"{location.name} - Tot Trot",
        text=text,
        url=url,
        clipboard_text="\n".join(lines),
    )

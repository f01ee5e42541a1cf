"""Internet Archive API helpers."""

from .wayback import AVAILABILITY_URL, fetch_archive_url, parse_availability

__all__ = [
    "AVAILABILITY_URL",
    "fetch_archive_url",
    "parse_availability",
]

"""Archive lookup core: cache, validation, resolution and rendering."""

from .cache import CacheEntry, LRACache
from .lookup import ArchiveLookupService, create_lookup_service
from .rendering import escape_for_html, render_error, render_success
from .resolver import ArchiveResolver, Resolution
from .validation import PlausibilityValidator, load_top_level_domains, normalize_target

__all__ = [
    "CacheEntry",
    "LRACache",
    "ArchiveLookupService",
    "create_lookup_service",
    "escape_for_html",
    "render_error",
    "render_success",
    "ArchiveResolver",
    "Resolution",
    "PlausibilityValidator",
    "load_top_level_domains",
    "normalize_target",
]

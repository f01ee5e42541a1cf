"""Cache-first archive lookups."""

from __future__ import annotations

from typing import Optional

import structlog

from config.settings import Settings
from core.cache import LRACache
from core.resolver import ArchiveResolver, Resolution
from core.validation import PlausibilityValidator, normalize_target
from monitoring.metrics import LookupMetrics

logger = structlog.get_logger(__name__)

INVALID_QUERY_MESSAGE = "Your query is bad and you should feel bad."


class ArchiveLookupService:
    """Answer lookups from the cache, falling back to the resolver.

    Only fresh, successful resolutions are written to the cache. A cache hit
    is returned as-is so that reading an entry never extends its lifetime.
    """

    def __init__(
        self,
        cache: LRACache,
        resolver: ArchiveResolver,
        validator: Optional[PlausibilityValidator] = None,
        *,
        metrics: Optional[LookupMetrics] = None,
    ) -> None:
        self.cache = cache
        self.resolver = resolver
        self.validator = validator or PlausibilityValidator()
        self.metrics = metrics or LookupMetrics()

    async def lookup(self, raw: str) -> Resolution:
        url = normalize_target(raw)
        logger.info("lookup_requested", url=url)

        if not self.validator.is_plausible(url):
            self.metrics.record("invalid", url=url)
            return Resolution(error=INVALID_QUERY_MESSAGE, kind="invalid")

        archive_url = self.cache.lookup(url)
        if archive_url is not None:
            logger.info("cache_hit", url=url)
            self.metrics.record("cache_hit", url=url)
            return Resolution(archive_url=archive_url, cached=True)

        resolution = await self.resolver.resolve(url)
        if resolution.ok and not resolution.cached:
            self.cache.set(url, resolution.archive_url)
            self.metrics.record("resolved", url=url)
        else:
            self.metrics.record(resolution.kind or "error", url=url)
        return resolution

    async def close(self) -> None:
        await self.resolver.close()


def create_lookup_service(settings: Settings) -> ArchiveLookupService:
    """Build a lookup service from application settings."""

    cache = LRACache(settings.cache_capacity, settings.cache_ttl)
    resolver = ArchiveResolver(
        settings.availability_url,
        timeout=settings.request_timeout,
    )
    validator = PlausibilityValidator.from_file(settings.tld_file)
    logger.info(
        "lookup_service_created",
        capacity=settings.cache_capacity,
        ttl=settings.cache_ttl,
        tld_allow_list=validator.top_level_domains is not None,
    )
    return ArchiveLookupService(cache, resolver, validator)

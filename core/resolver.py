from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import aiohttp
import structlog

from api import wayback
from exceptions import ArchiveError

logger = structlog.get_logger(__name__)


@dataclass
class Resolution:
    """Outcome of resolving a URL: an archive URL or an error message."""

    archive_url: Optional[str] = None
    error: Optional[str] = None
    kind: Optional[str] = None
    cached: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


class ArchiveResolver:
    """Resolve URLs to their closest wayback snapshot."""

    def __init__(
        self,
        endpoint: str = wayback.AVAILABILITY_URL,
        *,
        timeout: Optional[float] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.session: aiohttp.ClientSession | None = None

    async def close(self) -> None:
        if self.session is not None:
            await self.session.close()
            self.session = None

    async def resolve(self, url: str) -> Resolution:
        if self.session is None:
            # Reused across requests so connections to archive.org stay alive.
            self.session = aiohttp.ClientSession()
        try:
            archive_url = await wayback.fetch_archive_url(
                self.session,
                url,
                endpoint=self.endpoint,
                timeout=self.timeout,
            )
        except ArchiveError as exc:
            logger.warning("archive_lookup_failed", url=url, kind=exc.kind, error=str(exc))
            return Resolution(error=str(exc), kind=exc.kind)
        return Resolution(archive_url=archive_url)

import asyncio
import json

import aiohttp
import structlog

from exceptions import (
    ArchiveResponseError,
    ArchiveStatusError,
    ArchiveTransportError,
    ArchiveUnavailableError,
)

AVAILABILITY_URL = "https://archive.org/wayback/available"

logger = structlog.get_logger(__name__)


def parse_availability(body: str) -> str:
    """Return the closest snapshot URL from an availability response body."""
    try:
        data = json.loads(body)
        snapshots = data["archived_snapshots"]
        snapshot = snapshots.get("closest")
    except (ValueError, TypeError, KeyError, AttributeError) as exc:
        logger.error("archive_response_unparseable", error=str(exc))
        raise ArchiveResponseError(body) from exc

    if not isinstance(snapshot, dict) or not snapshot.get("available"):
        raise ArchiveUnavailableError()
    url = snapshot.get("url")
    if not isinstance(url, str) or not url:
        raise ArchiveUnavailableError()
    return url


async def fetch_archive_url(session, url, *, endpoint=AVAILABILITY_URL, timeout=None):
    """Ask the wayback availability API for the closest snapshot of ``url``."""
    kwargs = {"params": {"url": url}}
    if timeout is not None:
        kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)
    try:
        async with session.get(endpoint, **kwargs) as resp:
            if resp.status >= 300:
                raise ArchiveStatusError(resp.status, resp.reason)
            raw = await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        raise ArchiveTransportError(str(exc) or type(exc).__name__) from exc

    # Undecodable bytes become U+FFFD.
    body = raw.decode("utf-8", errors="replace")
    logger.debug("archive_response_body", url=url, body=body)
    return parse_availability(body)

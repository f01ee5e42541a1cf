"""Plausibility checks for requested URLs."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Optional, Set, Union

import structlog

logger = structlog.get_logger(__name__)

# Approximates an optional HTTP scheme followed by a dotted authority. The
# last dotted label before the path is captured as the top-level domain.
_PLAUSIBLE_URL = re.compile(r"^(https?://)?[^./]+(\.(?P<tld>[^./]+))+\.?(/|\Z)")


def load_top_level_domains(path: Union[str, Path]) -> Set[str]:
    """Read a top-level domain list, one per line, ignoring ``#`` comments."""
    domains: Set[str] = set()
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            domains.add(line.lower())
    logger.info("top_level_domains_loaded", path=str(path), count=len(domains))
    return domains


def normalize_target(raw: str) -> str:
    """Strip the leading path separator and an empty trailing query marker."""
    if raw.startswith("/"):
        raw = raw[1:]
    if raw.endswith("?"):
        # Empty HTML form might leave a trailing empty query.
        raw = raw[:-1]
    return raw


class PlausibilityValidator:
    """Reject requests that do not look like a web resource.

    Bots request all kinds of garbage, much of which, like
    ``debug/default/view?panel=config``, has no dotted authority at all. When
    ``top_level_domains`` is given, the rightmost label of the authority must
    also be one of them.
    """

    def __init__(self, top_level_domains: Optional[Iterable[str]] = None) -> None:
        self.top_level_domains = (
            {domain.lower() for domain in top_level_domains}
            if top_level_domains is not None
            else None
        )

    @classmethod
    def from_file(cls, path: Union[str, Path, None]) -> "PlausibilityValidator":
        if path is None:
            return cls()
        return cls(load_top_level_domains(path))

    def is_plausible(self, url: str) -> bool:
        match = _PLAUSIBLE_URL.match(url)
        if match is None:
            return False
        if self.top_level_domains is None:
            return True
        return match.group("tld").lower() in self.top_level_domains

    __call__ = is_plausible

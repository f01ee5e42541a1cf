from __future__ import annotations

from collections import Counter
from typing import Dict

import structlog


class LookupMetrics:
    """Count lookups by outcome."""

    def __init__(self) -> None:
        self.outcomes: Counter[str] = Counter()
        self.logger = structlog.get_logger(__name__)

    def record(self, outcome: str, **context) -> None:
        self.outcomes[outcome] += 1
        self.logger.info("lookup_outcome", outcome=outcome, **context)

    @property
    def total(self) -> int:
        return sum(self.outcomes.values())

    def summary(self) -> Dict[str, float | int]:
        total = self.total
        hits = self.outcomes.get("cache_hit", 0)
        data: Dict[str, float | int] = {"lookups": total}
        data.update(self.outcomes)
        data["cache_hit_rate"] = hits / total if total else 0.0
        return data


def summarize_lookups(metrics: LookupMetrics) -> str:
    data = metrics.summary()
    if not data["lookups"]:
        return "No lookups recorded."
    outcomes = ", ".join(
        f"{name}: {count}" for name, count in sorted(metrics.outcomes.items())
    )
    return (
        f"{data['lookups']} lookups - Cache hit rate: {data['cache_hit_rate']:.0%}, "
        f"{outcomes}"
    )

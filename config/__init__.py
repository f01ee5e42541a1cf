"""Environment-aware settings for waybackinator."""

from __future__ import annotations

from .settings import Settings


def get_settings() -> Settings:
    """Return settings read from the environment."""

    return Settings()


settings = get_settings()


__all__ = [
    "Settings",
    "settings",
    "get_settings",
]

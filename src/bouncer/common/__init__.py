"""Common utilities for Bucket Bouncer."""

from bouncer.common.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]

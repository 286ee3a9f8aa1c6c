"""Utility helpers for reference resolution and logging."""

from pwa_precache.utils.url import (
    Resolution,
    canonical_url,
    resolve_reference,
    strip_app_param,
    with_app_param,
)
from pwa_precache.utils.log import setup_logging, log

__all__ = [
    "Resolution",
    "canonical_url",
    "resolve_reference",
    "strip_app_param",
    "with_app_param",
    "setup_logging",
    "log",
]

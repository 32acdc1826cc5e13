"""Utility modules for the research engine."""

from .config import Settings, get_settings
from .concurrency import gather_successes
from .domain_filter import (
    is_excluded_domain,
    filter_competitor_domains,
    get_exclusion_reason,
    extract_domain,
)

__all__ = [
    "Settings",
    "get_settings",
    "gather_successes",
    # Domain filtering
    "is_excluded_domain",
    "filter_competitor_domains",
    "get_exclusion_reason",
    "extract_domain",
]

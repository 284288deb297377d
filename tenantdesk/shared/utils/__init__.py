"""Shared utilities: datetime and generators."""

from tenantdesk.shared.utils.datetime import (
    ensure_utc,
    start_of_month_utc,
    utc_now,
)
from tenantdesk.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "start_of_month_utc",
]

import math
from datetime import datetime, timezone
from typing import Tuple

def iso_utc(dt: datetime) -> str:
    """ Convert datetime to ISO 8601 UTC string with 'Z' suffix. """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")

def page_bounds(page: int, page_size: int) -> Tuple[int, int]:
    """ Convert a 1-based page number into (offset, limit). """
    page = max(page, 1)
    page_size = max(page_size, 1)
    return (page - 1) * page_size, page_size

def total_pages(total: int, page_size: int) -> int:
    """ Number of pages needed for total rows; an empty result still has one page. """
    if total <= 0 or page_size <= 0:
        return 1
    return math.ceil(total / page_size)

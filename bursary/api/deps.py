"""API Dependencies"""

from datetime import date
from typing import Optional

from fastapi import Query

from bursary.database import get_db

__all__ = ["get_db", "paginate", "pagination", "reference_date"]


def pagination(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
) -> dict:
    """Page / limit query parameters shared by list endpoints."""
    return {"page": page, "limit": limit}


def reference_date(
    reference_date: Optional[date] = Query(
        None, description="Day the daily and monthly windows are measured from; defaults to today (UTC)"
    ),
) -> Optional[date]:
    return reference_date


def paginate(items: list, page: int, limit: int) -> dict:
    """Slice an already-loaded list and build the matching PaginationMeta fields."""
    total = len(items)
    start = (page - 1) * limit
    return {
        "data": items[start:start + limit],
        "meta": {
            "page": page,
            "page_size": limit,
            "total": total,
            "total_pages": (total + limit - 1) // limit,
        },
    }

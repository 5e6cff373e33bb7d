"""Page and sort handling for listings (page/size/sort query parameters)."""

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 15
MAX_PAGE_SIZE = 100
DEFAULT_SORT = ["id,desc"]
FALLBACK_ORDER = ("id", "asc")


@dataclass(frozen=True)
class PageRequest:
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    orders: list[tuple[str, str]] = field(default_factory=lambda: [FALLBACK_ORDER])


def _direction(value: str) -> str:
    return "asc" if value.strip().lower() in ("asc", "ascending") else "desc"


def parse_sort(sort: list[str] | None, allowed_fields: set[str]) -> list[tuple[str, str]]:
    """
    Turn sort parameters into (field, direction) pairs.

    Accepts either items of the form "field,direction" (one per parameter) or a
    single field and a direction as two items (sort=name&sort=asc). Anything
    malformed or naming an unknown field falls back to ascending id.
    """
    if not sort:
        return [FALLBACK_ORDER]
    orders: list[tuple[str, str]] = []
    if "," in sort[0]:
        for item in sort:
            name, _, direction = item.partition(",")
            if not direction:
                return [FALLBACK_ORDER]
            orders.append((name.strip(), _direction(direction)))
    elif len(sort) == 2:
        orders.append((sort[0].strip(), _direction(sort[1])))
    else:
        return [FALLBACK_ORDER]
    if any(name not in allowed_fields for name, _ in orders):
        logger.debug("Unknown sort field in %s; using default order", sort)
        return [FALLBACK_ORDER]
    return orders


def page_request(
    page: int, size: int, sort: list[str] | None, allowed_fields: set[str]
) -> PageRequest:
    return PageRequest(
        page=max(page, 0),
        size=min(max(size, 1), MAX_PAGE_SIZE),
        orders=parse_sort(sort, allowed_fields),
    )


def paginate(
    db: Session, stmt: Select, model: Any, request: PageRequest
) -> tuple[list[Any], int, int]:
    """Run stmt for one page; returns (rows, total_elements, total_pages)."""
    total = db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
    ordering = []
    for name, direction in request.orders:
        column = getattr(model, name)
        ordering.append(column.asc() if direction == "asc" else column.desc())
    rows = (
        db.execute(
            stmt.order_by(*ordering).offset(request.page * request.size).limit(request.size)
        )
        .scalars()
        .all()
    )
    return list(rows), total, math.ceil(total / request.size) if total else 0

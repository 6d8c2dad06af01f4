"""Pagination shared by the repositories."""
import math
from dataclasses import dataclass
from typing import Any, Literal

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PageParams:
    """Requested page. ``limit="all"`` disables paging."""

    page: int = 1
    limit: int | Literal["all"] = DEFAULT_PAGE_SIZE

    @classmethod
    def parse(cls, page: int | str | None = None, limit: int | str | None = None) -> "PageParams":
        """Normalize raw query values: page >= 1, 1 <= limit <= 100 or "all"."""
        try:
            page_number = max(int(page), 1) if page is not None else 1
        except (TypeError, ValueError):
            page_number = 1
        if isinstance(limit, str) and limit.strip().lower() == "all":
            return cls(page=1, limit="all")
        try:
            size = int(limit) if limit is not None else DEFAULT_PAGE_SIZE
        except (TypeError, ValueError):
            size = DEFAULT_PAGE_SIZE
        return cls(page=page_number, limit=min(max(size, 1), MAX_PAGE_SIZE))

    @property
    def is_all(self) -> bool:
        return self.limit == "all"


@dataclass
class Page:
    items: list[Any]
    params: PageParams
    total: int | None = None

    @property
    def pagination(self) -> dict | None:
        """Envelope pagination block; ``None`` when every row was returned."""
        if self.params.is_all or self.total is None:
            return None
        return {
            "page": self.params.page,
            "limit": self.params.limit,
            "total": self.total,
            "pages": math.ceil(self.total / self.params.limit) if self.total else 0,
        }


def paginate(db: Session, stmt: Select, params: PageParams) -> Page:
    """Run ``stmt`` (already filtered and ordered) for one page."""
    if params.is_all:
        return Page(items=list(db.scalars(stmt).all()), params=params)

    total = db.scalar(select(func.count()).select_from(stmt.order_by(None).subquery()))
    offset = (params.page - 1) * params.limit
    items = list(db.scalars(stmt.limit(params.limit).offset(offset)).all())
    return Page(items=items, params=params, total=total)


def search_pattern(term: str) -> str:
    return f"%{term.strip()}%"

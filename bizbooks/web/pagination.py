"""Shared helpers for paginated listings."""
from __future__ import annotations

from dataclasses import dataclass
from math import ceil


@dataclass(frozen=True)
class PageInfo:
    """Navigation metadata for paginated listings."""

    page: int
    limit: int
    total_records: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return ceil(self.total_records / self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def as_dict(self) -> dict[str, int | bool]:
        """Return the camelCase pagination block clients expect."""

        return {
            "currentPage": self.page,
            "totalPages": self.total_pages,
            "totalRecords": self.total_records,
            "limit": self.limit,
            "hasNext": self.has_next,
            "hasPrev": self.has_previous,
        }


__all__ = ["PageInfo"]

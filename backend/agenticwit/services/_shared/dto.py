"""DTOs shared by more than one service."""

from __future__ import annotations

from dataclasses import dataclass
from math import ceil


@dataclass(frozen=True, slots=True)
class PageMeta:
    """
    Position of one page inside a result set.

    :param page: 1-based page number.
    :param limit: Page size.
    :param total: Matching rows across all pages.
    :param total_pages: Number of pages, ``0`` for an empty result.
    """

    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> PageMeta:
        pages = ceil(total / limit) if limit > 0 else 0
        return cls(page=page, limit=limit, total=total, total_pages=pages)

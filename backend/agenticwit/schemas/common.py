"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, post_load, validate


class PaginationQuerySchema(Schema):
    """Validate ``page``/``limit`` query parameters with configurable defaults."""

    def __init__(self, *, default_limit: int = 20, max_limit: int = 100, **kwargs: Any) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(validate=validate.Range(min=1))

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        limit = data.get("limit", self._default_limit)
        if limit > self._max_limit:
            raise ValidationError(f"Must be at most {self._max_limit}.", field_name="limit")
        data["limit"] = limit
        data.setdefault("page", 1)
        return data


def build_meta(*, total: int, page: int, limit: int, total_pages: int) -> dict[str, int]:
    """Return a ``meta`` mapping for paginated responses."""

    return {
        "total": int(total),
        "page": int(page),
        "limit": int(limit),
        "total_pages": int(total_pages),
    }

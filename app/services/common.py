"""Common helper functions for service layer.

This module provides reusable utilities for:
- UUID handling
- Query ordering and pagination
- Entity retrieval with 404 handling
- Content hashing
"""

from __future__ import annotations

import hashlib
import uuid
from typing import TYPE_CHECKING, TypeVar

from fastapi import HTTPException

if TYPE_CHECKING:
    from sqlalchemy.orm import Session

T = TypeVar("T")


def coerce_uuid(value):
    """Convert value to UUID, returning None if value is None."""
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return value
    return uuid.UUID(str(value))


def sha256_hex(text: str) -> str:
    """Hex SHA-256 digest of the UTF-8 bytes of ``text``."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def apply_ordering(query, order_by: str, order_dir: str, allowed_columns: dict):
    """Apply ordering to a query with validation.

    Args:
        query: SQLAlchemy query object
        order_by: Column name to order by
        order_dir: Direction ('asc' or 'desc')
        allowed_columns: Dict mapping column names to SQLAlchemy columns

    Returns:
        Query with ordering applied

    Raises:
        HTTPException: 400 if order_by is not in allowed_columns
    """
    if order_by not in allowed_columns:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid order_by. Allowed: {', '.join(sorted(allowed_columns))}",
        )
    column = allowed_columns[order_by]
    if order_dir == "desc":
        return query.order_by(column.desc())
    return query.order_by(column.asc())


def apply_pagination(query, limit: int, offset: int):
    """Apply pagination to a query."""
    return query.limit(limit).offset(offset)


def get_or_404(db: Session, model: type[T], id: str, detail: str | None = None, **options) -> T:
    """Get entity by ID or raise 404.

    A malformed id cannot name an existing row, so it is reported as not found.
    """
    message = detail or f"{model.__name__} not found"
    try:
        entity_id = coerce_uuid(id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=message) from exc
    entity = db.get(model, entity_id, **options)
    if not entity:
        raise HTTPException(status_code=404, detail=message)
    return entity

"""Client-side identifier helpers."""

from __future__ import annotations

from uuid import uuid4

from order_cart.core.config import settings


def generate_item_id() -> str:
    """Return an id for a cart row that exists only on the client."""
    return uuid4().hex


def generate_temporary_item_id() -> str:
    """Return an id marking a row added while editing an existing order."""
    return f"{settings.temp_item_prefix}{uuid4().hex}"


def generate_temporary_adjustment_id() -> str:
    return f"{settings.temp_adjustment_prefix}{uuid4().hex}"


def is_temporary_id(value: str | None) -> bool:
    """Return whether value was generated on the client for an unsaved row."""
    return bool(value) and value.startswith(settings.temp_item_prefix)

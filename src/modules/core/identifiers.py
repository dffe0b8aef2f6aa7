"""Identifier parsing at the HTTP boundary."""

from __future__ import annotations

from uuid import UUID

from modules.core.exceptions import InvalidInput


def parse_uuid(value, label: str = "ID") -> UUID:
    """Parse a path/body identifier, raising ``InvalidInput`` when malformed."""
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError) as exc:
        raise InvalidInput(f"Invalid {label}", value=str(value)) from exc

from __future__ import annotations

from uuid import uuid4


def generate_id() -> str:
    """Opaque record id for callers that do not bring their own."""
    return uuid4().hex


__all__ = ["generate_id"]

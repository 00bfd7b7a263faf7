"""Helpers for masking personal data before it reaches the logs."""
from __future__ import annotations

MASKED_PLACEHOLDER = "***"


def mask_email(value: str | None) -> str:
    """Keep only the domain of an address."""

    if not value or "@" not in value:
        return MASKED_PLACEHOLDER
    _, domain = value.split("@", 1)
    return f"{MASKED_PLACEHOLDER}@{domain}"


__all__ = ["MASKED_PLACEHOLDER", "mask_email"]

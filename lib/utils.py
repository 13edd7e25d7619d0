# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application.
# =============================================================================

from datetime import datetime, timezone


def normalize_email(value: str | None) -> str:
    """
    Normalize an email for storage and comparison.

    Emails are the identity key across users, tokens, applications and
    reviews, so every layer compares the same canonical form.

    Example:
        normalize_email("  Ada@Example.COM ")  # "ada@example.com"
    """
    return (value or "").strip().lower()


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def to_cents(amount: float) -> int:
    """Convert a currency amount to integer minor units (cents)."""
    return int(round(amount * 100))

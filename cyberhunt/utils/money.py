"""Money helpers. Amounts are stored and computed as integer cents."""

from decimal import Decimal

from cyberhunt.core.config import settings


def to_major_units(cents: int | None) -> Decimal | None:
    """Convert cents to a 2-place Decimal (presentation only)."""
    if cents is None:
        return None
    return (Decimal(cents) / 100).quantize(Decimal("0.01"))


def format_cents(cents: int | None, currency: str | None = None) -> str | None:
    """Format cents for display, e.g. 5000 -> '50.00 USD'."""
    amount = to_major_units(cents)
    if amount is None:
        return None
    return f"{amount:,} {currency or settings.REWARD_CURRENCY}"

"""Display formatting helpers for records."""

DEFAULT_CURRENCY = "TSh"


def format_currency(value: float, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format an amount with the currency code prefix and no decimals.

    Args:
        value: Numeric amount to format.
        currency: Currency code (e.g., 'TSh', 'TZS').

    Returns:
        Formatted string like 'TSh 150,000'.
    """
    return f"{currency} {value:,.0f}"


def format_compact(value: float, currency: str) -> str:
    """Format large amounts as ``TZS 1.5M`` / ``TZS 2.3K``."""
    if value >= 1_000_000:
        return f"{currency} {value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{currency} {value / 1_000:.1f}K"
    return f"{currency} {value:.0f}"


def format_deadline(days: int) -> str:
    """Describe a deadline relative to today."""
    if days < 0:
        return "Expired"
    if days == 0:
        return "Due today"
    if days == 1:
        return "Due tomorrow"
    return f"Due in {days} days"

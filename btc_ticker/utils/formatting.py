"""Number formatting for the status line."""


def format_dollars(value: float) -> str:
    """
    Format a dollar amount with thousands separators and no decimals.

    The sign goes in front of the currency symbol: ``-1234567.0`` -> ``-$1,234,567``.
    """
    amount = f"{abs(value):,.0f}"
    if value < 0:
        return "-$" + amount
    return "$" + amount


def format_integer(value: int) -> str:
    """Format an integer with thousands separators."""
    return f"{value:,d}"


def format_age(value: float) -> str:
    """Format a minute or second count with zero decimals."""
    return f"{value:.0f}"

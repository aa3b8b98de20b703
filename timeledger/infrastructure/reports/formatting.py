"""Text formatting for report documents — en-US conventions throughout."""

from datetime import date

from timeledger.domain.entities import ReportFilters

DEFAULT_CURRENCY = "USD"

_CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "CA$",
    "AUD": "A$",
    "NZD": "NZ$",
    "HKD": "HK$",
    "MXN": "MX$",
    "BRL": "R$",
    "TWD": "NT$",
    "CNY": "CN¥",
    "INR": "₹",
    "KRW": "₩",
    "ILS": "₪",
    "VND": "₫",
    "PHP": "₱",
}


def format_currency(amount: float, currency: str | None = DEFAULT_CURRENCY) -> str:
    """Format an amount with two decimals and the currency's symbol.

    ``1560`` in USD gives ``$1,560.00``; codes without a known symbol are
    prefixed with the code itself, e.g. ``CHF 1,560.00``.
    """
    code = (currency or DEFAULT_CURRENCY).upper()
    number = f"{abs(amount):,.2f}"
    sign = "-" if round(amount, 2) < 0 else ""
    symbol = _CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code} {number}"
    return f"{sign}{symbol}{number}"


def format_hours(hours: float) -> str:
    """Render hours without trailing zeros: 18 → '18', 7.50 → '7.5'."""
    text = f"{hours:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def format_date(value: date) -> str:
    """Abbreviated month, day, 4-digit year: ``Jan 15, 2024``."""
    return f"{value:%b} {value.day}, {value.year:04d}"


def format_long_date(value: date) -> str:
    """Full month, day, year: ``January 15, 2024``."""
    return f"{value:%B} {value.day}, {value.year:04d}"


def month_label(month: int) -> str:
    return date(2000, month, 1).strftime("%B")


def period_label(filters: ReportFilters) -> str:
    if filters.month is None:
        return str(filters.year)
    return f"{month_label(filters.month)} {filters.year}"


def report_filename(filters: ReportFilters) -> str:
    """``time-report-2024.pdf`` for a year, ``time-report-2024-06.pdf`` for a month."""
    if filters.month is None:
        return f"time-report-{filters.year}.pdf"
    return f"time-report-{filters.year}-{filters.month:02d}.pdf"

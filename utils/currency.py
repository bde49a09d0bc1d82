from utils.constants import CURRENCY_SYMBOLS, DEFAULT_CURRENCY


def currency_symbol(code: str | None) -> str:
    """Return the display symbol for a currency code.

    Codes outside the symbol table come back as the raw code plus a space,
    e.g. 'CHF ' so that 'CHF 12.00' still reads naturally.
    """
    code = (code or DEFAULT_CURRENCY).upper()
    if code in CURRENCY_SYMBOLS:
        return CURRENCY_SYMBOLS[code]
    return f"{code} "


def format_currency(amount: float, code: str | None = DEFAULT_CURRENCY) -> str:
    """Format a float as currency string, e.g. '$1,234.56'."""
    return f"{currency_symbol(code)}{amount:,.2f}"


def format_signed(amount: float, code: str | None = DEFAULT_CURRENCY) -> str:
    """Format with an explicit sign, e.g. '+$12.50' or '-£4.00'."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{currency_symbol(code)}{abs(amount):,.2f}"


def format_percent(value: float) -> str:
    """Format a trend percentage with sign and one decimal, e.g. '+12.5%'."""
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.1f}%"

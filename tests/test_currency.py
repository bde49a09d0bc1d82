from utils.currency import currency_symbol, format_currency, format_percent, format_signed


def test_known_and_unknown_symbols():
    assert currency_symbol("eur") == "€"
    assert currency_symbol(None) == "$"
    assert currency_symbol("CHF") == "CHF "


def test_format_currency():
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(3, "INR") == "₹3.00"
    assert format_currency(7.25, "CHF") == "CHF 7.25"


def test_format_percent():
    assert format_percent(12.345) == "+12.3%"
    assert format_percent(0) == "0.0%"
    assert format_percent(-25) == "-25.0%"


def test_format_signed():
    assert format_signed(12.5) == "+$12.50"
    assert format_signed(-4, "GBP") == "-£4.00"

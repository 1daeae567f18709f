"""Currency formatting for balances and summaries."""

from roomsettle.settlement.money import Number, round_money


CURRENCY_SYMBOLS = {
    "BDT": "৳",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
}


def format_currency(amount: Number, currency: str) -> str:
    """
    Format an amount for display.

    Known currencies use their symbol and drop a trailing ".00"
    ("৳232", "$12.50"). Unknown codes fall back to "CHF 1,234.50".
    """
    rounded = round_money(amount)
    sign = "-" if rounded < 0 else ""
    magnitude = abs(rounded)
    code = currency.upper()

    symbol = CURRENCY_SYMBOLS.get(code)
    if symbol is None:
        return f"{sign}{code} {magnitude:,.2f}"

    if magnitude == magnitude.to_integral_value():
        return f"{sign}{symbol}{int(magnitude):,}"
    return f"{sign}{symbol}{magnitude:,.2f}"


import math
import re
from decimal import ROUND_HALF_UP, Decimal

# en-US display symbols; any other ISO 4217 code is shown as "CODE 123"
_CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'JPY': '¥',
    'INR': '₹',
    'KRW': '₩',
    'ILS': '₪',
    'VND': '₫',
    'PHP': '₱',
    'CAD': 'CA$',
    'AUD': 'A$',
    'NZD': 'NZ$',
    'HKD': 'HK$',
    'MXN': 'MX$',
    'BRL': 'R$',
    'TWD': 'NT$',
    'CNY': 'CN¥',
}

# Leading numeric prefix, the way browsers read "123.45" or "99 USD"
_NUMERIC_PREFIX = re.compile(r'\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')


def parse_price(total: str | int | float) -> float:
    """Read a provider price as a float. Anything without a numeric prefix becomes NaN."""
    if isinstance(total, bool):
        return math.nan
    if isinstance(total, (int, float)):
        return float(total)
    if not isinstance(total, str):
        return math.nan
    match = _NUMERIC_PREFIX.match(total)
    return float(match.group(1)) if match else math.nan


def format_price(amount: str | int | float, currency: str = 'USD') -> str:
    """Currency string with zero fraction digits, e.g. format_price("449.60", "USD") -> "$450"."""
    value = parse_price(amount)
    code = (currency or 'USD').upper()
    symbol = _CURRENCY_SYMBOLS.get(code, f'{code}\xa0')
    if math.isnan(value):
        return f'{symbol}NaN'
    sign = '-' if value < 0 else ''
    if math.isinf(value):
        return f'{sign}{symbol}∞'
    whole = Decimal(repr(abs(value))).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    if whole == 0:
        sign = ''
    return f'{sign}{symbol}{int(whole):,}'

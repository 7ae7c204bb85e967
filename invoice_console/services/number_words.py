from decimal import ROUND_HALF_UP, Decimal

from .formatting import format_inr

MAX_AMOUNT = 999_999_999

ONES = [
    "",
    "One ",
    "Two ",
    "Three ",
    "Four ",
    "Five ",
    "Six ",
    "Seven ",
    "Eight ",
    "Nine ",
    "Ten ",
    "Eleven ",
    "Twelve ",
    "Thirteen ",
    "Fourteen ",
    "Fifteen ",
    "Sixteen ",
    "Seventeen ",
    "Eighteen ",
    "Nineteen ",
]
TENS = [
    "",
    "",
    "Twenty",
    "Thirty",
    "Forty",
    "Fifty",
    "Sixty",
    "Seventy",
    "Eighty",
    "Ninety",
]

# (label, start, end) over the nine-digit zero-padded amount.
GROUPS = (
    ("Crore", 0, 2),
    ("Lakh", 2, 4),
    ("Thousand", 4, 6),
    ("Hundred", 6, 7),
)


class OutOfRangeError(ValueError):
    pass


def number_to_words(amount: int) -> str:
    """Spell out ``amount`` using Indian digit grouping.

    Every word keeps a trailing space, e.g. ``236`` gives
    ``"Two Hundred and Thirty Six "``. Zero gives an empty string.
    """
    if amount < 0 or amount > MAX_AMOUNT:
        raise OutOfRangeError(f"{amount} is outside 0..{MAX_AMOUNT}")

    digits = f"{int(amount):09d}"
    words = ""
    for label, start, end in GROUPS:
        chunk = int(digits[start:end])
        if chunk:
            words += f"{_below_hundred(chunk)}{label} "

    rest = int(digits[7:])
    if rest:
        if words:
            words += "and "
        words += _below_hundred(rest)
    return words


def amount_in_words(total) -> str:
    """Spell out an invoice total, or give it in figures when out of range."""
    rounded = int(Decimal(str(total)).to_integral_value(rounding=ROUND_HALF_UP))
    try:
        words = number_to_words(rounded).strip() or "Zero"
    except OutOfRangeError:
        words = format_inr(rounded)
    return f"{words} Rupees Only"


def _below_hundred(value: int) -> str:
    if value < 20:
        return ONES[value]
    return f"{TENS[value // 10]} {ONES[value % 10]}"

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

CENT = Decimal("0.01")
ZERO = Decimal("0")


def money(value) -> Decimal:
    number = _display_decimal(value)
    with localcontext() as ctx:
        # Room for every integer digit plus the two decimals.
        ctx.prec = max(ctx.prec, number.adjusted() + 3)
        return number.quantize(CENT, rounding=ROUND_HALF_UP)


def format_inr(value) -> str:
    """Group digits the Indian way: 1234567.5 -> "12,34,567.50"."""
    amount = money(value)
    sign = "-" if amount < 0 else ""
    whole, fraction = f"{amount.copy_abs():f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        whole = ",".join(pairs + [tail])
    return f"{sign}{whole}.{fraction}"


def format_quantity(value) -> str:
    number = _display_decimal(value)
    if number == number.to_integral_value():
        return f"{number:.0f}"
    return f"{number.normalize():f}"


def _display_decimal(value) -> Decimal:
    """Parse a value for display, keeping its sign. Unusable values show as 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        number = value
    else:
        raw = str(value).replace(",", "").strip()
        try:
            number = Decimal(raw)
        except (InvalidOperation, ValueError):
            return ZERO
    return number if number.is_finite() else ZERO

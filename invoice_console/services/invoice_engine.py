"""Invoice totals: per-line discounts, subtotal, invoice discount, tax.

Everything here is pure. Inputs may come straight from a form, so every
numeric input is coerced with :func:`to_amount` and a bad value counts as 0.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from ..schemas.invoice import DiscountType

ZERO = Decimal("0")
HUNDRED = Decimal("100")
# Largest usable input. Anything above counts as 0.
AMOUNT_LIMIT = Decimal("1e15")


@dataclass(frozen=True)
class LineTotals:
    discount_amount: Decimal
    amount: Decimal


@dataclass(frozen=True)
class InvoiceTotals:
    items: tuple[LineTotals, ...]
    sub_total: Decimal
    discount_amount: Decimal
    taxable_value: Decimal
    tax_amount: Decimal
    total_amount: Decimal


def to_amount(value) -> Decimal:
    """Coerce a raw input to a non-negative Decimal, 0 when unusable.

    Non-numeric, negative and non-finite values are unusable, and so is
    anything above :data:`AMOUNT_LIMIT`.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        number = value
    else:
        raw = str(value).replace(",", "").strip()
        if not raw:
            return ZERO
        try:
            number = Decimal(raw)
        except (InvalidOperation, ValueError):
            return ZERO
    if not number.is_finite() or number < 0 or number > AMOUNT_LIMIT:
        return ZERO
    return number


def discount_for(base: Decimal, discount_type, discount_value) -> Decimal:
    value = to_amount(discount_value)
    if discount_type == DiscountType.PERCENTAGE:
        discount = base * value / HUNDRED
    else:
        discount = value
    return min(discount, base)


def recompute_line(quantity, rate, discount_type, discount_value) -> LineTotals:
    base = to_amount(quantity) * to_amount(rate)
    discount = discount_for(base, discount_type, discount_value)
    return LineTotals(discount_amount=discount, amount=base - discount)


def recompute(
    items: Iterable,
    tax_rate,
    discount_type,
    discount_value,
) -> InvoiceTotals:
    lines = tuple(
        recompute_line(
            item.quantity, item.rate, item.discount_type, item.discount_value
        )
        for item in items
    )
    sub_total = sum((line.amount for line in lines), ZERO)
    invoice_discount = discount_for(sub_total, discount_type, discount_value)
    taxable_value = sub_total - invoice_discount
    tax_amount = taxable_value * to_amount(tax_rate) / HUNDRED
    return InvoiceTotals(
        items=lines,
        sub_total=sub_total,
        discount_amount=invoice_discount,
        taxable_value=taxable_value,
        tax_amount=tax_amount,
        total_amount=taxable_value + tax_amount,
    )

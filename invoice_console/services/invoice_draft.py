"""Mutable state of an invoice while it is being composed.

Inputs are stored exactly as typed so a re-rendered form shows what the user
entered. Changing a watched input re-runs :func:`recompute` and writes back
only the derived fields whose value actually changed; writing a derived
field never triggers another pass.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation

from ..schemas.invoice import (
    DiscountType,
    InvoiceItemPayload,
    InvoicePayload,
    InvoiceType,
)
from .invoice_engine import AMOUNT_LIMIT, ZERO, recompute

DEFAULT_TAX_RATE = Decimal("18")

WATCHED_FIELDS = frozenset({"tax_rate", "discount_type", "discount_value"})
WATCHED_ITEM_FIELDS = frozenset(
    {"quantity", "rate", "discount_type", "discount_value"}
)
DERIVED_FIELDS = (
    "sub_total",
    "discount_amount",
    "taxable_value",
    "tax_amount",
    "total_amount",
)
DERIVED_ITEM_FIELDS = ("discount_amount", "amount")
DETAIL_FIELDS = (
    "type",
    "due_date",
    "customer_name",
    "customer_gstin",
    "customer_address",
    "place_of_supply",
)
ITEM_INPUT_FIELDS = (
    "description",
    "hsn_code",
    "quantity",
    "rate",
    "discount_type",
    "discount_value",
)


@dataclass
class DraftLine:
    description: str = ""
    hsn_code: str = ""
    quantity: object = "1"
    rate: object = "0"
    discount_type: str = DiscountType.FLAT.value
    discount_value: object = "0"
    discount_amount: Decimal = ZERO
    amount: Decimal = ZERO


@dataclass
class InvoiceDraft:
    type: str = InvoiceType.TAX_INVOICE.value
    due_date: str = ""
    customer_name: str = ""
    customer_gstin: str = ""
    customer_address: str = ""
    place_of_supply: str = ""
    items: list[DraftLine] = field(default_factory=lambda: [DraftLine()])
    tax_rate: object = str(DEFAULT_TAX_RATE)
    discount_type: str = DiscountType.FLAT.value
    discount_value: object = "0"
    sub_total: Decimal = ZERO
    discount_amount: Decimal = ZERO
    taxable_value: Decimal = ZERO
    tax_amount: Decimal = ZERO
    total_amount: Decimal = ZERO

    @classmethod
    def new(cls, tax_rate: Decimal | None = None) -> "InvoiceDraft":
        draft = cls()
        if tax_rate is not None:
            draft.tax_rate = str(tax_rate)
        draft.recalculate()
        return draft

    def set_field(self, name: str, value) -> list[str]:
        if name in DERIVED_FIELDS:
            setattr(self, name, value)
            return []
        if name not in WATCHED_FIELDS and name not in DETAIL_FIELDS:
            raise ValueError(f"Unknown invoice field: {name}")
        setattr(self, name, value)
        if name in WATCHED_FIELDS:
            return self.recalculate()
        return []

    def set_item_field(self, index: int, name: str, value) -> list[str]:
        line = self.items[index]
        if name in DERIVED_ITEM_FIELDS:
            setattr(line, name, value)
            return []
        if name not in ITEM_INPUT_FIELDS:
            raise ValueError(f"Unknown item field: {name}")
        setattr(line, name, value)
        if name in WATCHED_ITEM_FIELDS:
            return self.recalculate()
        return []

    def add_item(self) -> list[str]:
        self.items.append(DraftLine())
        return self.recalculate()

    def remove_item(self, index: int) -> list[str]:
        # The form always keeps at least one line.
        if len(self.items) <= 1 or not 0 <= index < len(self.items):
            return []
        del self.items[index]
        return self.recalculate()

    def recalculate(self) -> list[str]:
        """Recompute derived fields; return the paths that were written."""
        totals = recompute(
            self.items, self.tax_rate, self.discount_type, self.discount_value
        )
        changed: list[str] = []
        for index, (line, result) in enumerate(zip(self.items, totals.items)):
            changed += _apply(
                line,
                {"discount_amount": result.discount_amount, "amount": result.amount},
                prefix=f"items.{index}.",
            )
        changed += _apply(
            self,
            {
                "sub_total": totals.sub_total,
                "discount_amount": totals.discount_amount,
                "taxable_value": totals.taxable_value,
                "tax_amount": totals.tax_amount,
                "total_amount": totals.total_amount,
            },
        )
        return changed

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.customer_name.strip():
            errors.append("Customer name is required.")
        if not self.customer_address.strip():
            errors.append("Billing address is required.")
        if not self.items:
            errors.append("At least one item is required.")

        for number, line in enumerate(self.items, start=1):
            if not str(line.description).strip():
                errors.append(f"Item {number}: description is required.")
            quantity = _parse_decimal(line.quantity)
            if quantity is None or quantity <= 0:
                errors.append(f"Item {number}: quantity must be greater than 0.")
            elif quantity > AMOUNT_LIMIT:
                errors.append(f"Item {number}: quantity is too large.")
            rate = _parse_decimal(line.rate)
            if rate is None or rate < 0:
                errors.append(f"Item {number}: rate must be 0 or greater.")
            elif rate > AMOUNT_LIMIT:
                errors.append(f"Item {number}: rate is too large.")
            if not _optional_non_negative(line.discount_value):
                errors.append(f"Item {number}: discount must be 0 or greater.")
            elif _too_large(line.discount_value):
                errors.append(f"Item {number}: discount is too large.")
            if not _is_discount_type(line.discount_type):
                errors.append(f"Item {number}: discount type is invalid.")

        tax_rate = _parse_decimal(self.tax_rate)
        if tax_rate is None or tax_rate < 0:
            errors.append("Tax rate must be 0 or greater.")
        elif tax_rate > AMOUNT_LIMIT:
            errors.append("Tax rate is too large.")
        if not _optional_non_negative(self.discount_value):
            errors.append("Discount must be 0 or greater.")
        elif _too_large(self.discount_value):
            errors.append("Discount is too large.")
        if not _is_discount_type(self.discount_type):
            errors.append("Discount type is invalid.")
        if self.type not in {value.value for value in InvoiceType}:
            errors.append("Invoice type is invalid.")
        if self.due_date and _parse_date(self.due_date) is None:
            errors.append("Due date must be valid.")
        return errors

    def to_payload(self) -> InvoicePayload:
        """Snapshot the draft for submission. Call :meth:`validate` first."""
        self.recalculate()
        items = [
            InvoiceItemPayload(
                description=line.description.strip(),
                hsn_code=line.hsn_code.strip() or None,
                quantity=_parse_decimal(line.quantity),
                rate=_parse_decimal(line.rate),
                discount_type=DiscountType(line.discount_type),
                discount_value=_parse_decimal(line.discount_value) or ZERO,
                discount_amount=line.discount_amount,
                amount=line.amount,
            )
            for line in self.items
        ]
        return InvoicePayload(
            customer_name=self.customer_name.strip(),
            customer_address=self.customer_address.strip(),
            customer_gstin=self.customer_gstin.strip() or None,
            place_of_supply=self.place_of_supply.strip() or None,
            items=items,
            sub_total=self.sub_total,
            discount_type=DiscountType(self.discount_type),
            discount_value=_parse_decimal(self.discount_value) or ZERO,
            discount_amount=self.discount_amount,
            tax_rate=_parse_decimal(self.tax_rate),
            tax_amount=self.tax_amount,
            total_amount=self.total_amount,
            due_date=_parse_date(self.due_date),
            type=InvoiceType(self.type),
        )


def _apply(target, values: dict, prefix: str = "") -> list[str]:
    changed: list[str] = []
    for name, value in values.items():
        if getattr(target, name) != value:
            setattr(target, name, value)
            changed.append(f"{prefix}{name}")
    return changed


def _parse_decimal(value) -> Decimal | None:
    if value is None:
        return None
    normalized = str(value).replace(",", "").strip()
    if not normalized:
        return None
    try:
        number = Decimal(normalized)
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def _optional_non_negative(value) -> bool:
    if value is None or not str(value).strip():
        return True
    number = _parse_decimal(value)
    return number is not None and number >= 0


def _too_large(value) -> bool:
    number = _parse_decimal(value)
    return number is not None and number > AMOUNT_LIMIT


def _is_discount_type(value) -> bool:
    return value in {choice.value for choice in DiscountType}


def _parse_date(value: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None

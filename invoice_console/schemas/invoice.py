from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Amounts stay Decimal in Python and go over the wire as JSON numbers.
Money = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json")
]


class DiscountType(str, Enum):
    FLAT = "FLAT"
    PERCENTAGE = "PERCENTAGE"


class InvoiceType(str, Enum):
    TAX_INVOICE = "TAX_INVOICE"
    PROFORMA = "PROFORMA"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InvoiceItemPayload(CamelModel):
    description: str = Field(min_length=1)
    hsn_code: str | None = None
    quantity: Money = Field(gt=0)
    rate: Money = Field(ge=0)
    discount_type: DiscountType = DiscountType.FLAT
    discount_value: Money = Field(default=Decimal("0"), ge=0)
    discount_amount: Money = Field(ge=0)
    amount: Money = Field(ge=0)


class InvoicePayload(CamelModel):
    """Body of ``POST /invoices``."""

    customer_name: str = Field(min_length=1)
    customer_address: str = Field(min_length=1)
    customer_gstin: str | None = None
    place_of_supply: str | None = None
    items: list[InvoiceItemPayload] = Field(min_length=1)
    sub_total: Money = Field(ge=0)
    discount_type: DiscountType = DiscountType.FLAT
    discount_value: Money = Field(default=Decimal("0"), ge=0)
    discount_amount: Money = Field(ge=0)
    tax_rate: Money = Field(ge=0)
    tax_amount: Money = Field(ge=0)
    total_amount: Money = Field(ge=0)
    due_date: date | None = None
    type: InvoiceType | None = InvoiceType.TAX_INVOICE

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class InvoiceSummary(CamelModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    invoice_no: str = ""
    invoice_date: datetime | None = Field(default=None, alias="date")
    customer_name: str = ""
    total_amount: Decimal = Decimal("0")
    status: str = ""


class InvoiceLineRecord(CamelModel):
    description: str = ""
    hsn_code: str | None = None
    quantity: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")


class CompanySnapshot(CamelModel):
    company_name: str | None = None
    address: str | None = None
    gstin: str | None = None
    company_id: str | None = None
    logo_url: str | None = None
    signature_url: str | None = None
    signatory_name: str | None = None
    bank_name: str | None = None
    account_holder_name: str | None = None
    account_number: str | None = None
    ifsc_code: str | None = None
    swift_code: str | None = None
    branch: str | None = None
    terms_url: str | None = None


class InvoiceRecord(InvoiceSummary):
    customer_address: str = ""
    customer_gstin: str | None = None
    place_of_supply: str | None = None
    due_date: datetime | None = None
    type: InvoiceType | None = None
    items: list[InvoiceLineRecord] = Field(default_factory=list)
    sub_total: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    tax_rate: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    company: CompanySnapshot | None = Field(
        default=None, alias="companyProfileSnapshot"
    )

from .invoice import (
    CompanySnapshot,
    DiscountType,
    InvoiceItemPayload,
    InvoiceLineRecord,
    InvoicePayload,
    InvoiceRecord,
    InvoiceSummary,
    InvoiceType,
)

__all__ = [
    "CompanySnapshot",
    "DiscountType",
    "InvoiceItemPayload",
    "InvoiceLineRecord",
    "InvoicePayload",
    "InvoiceRecord",
    "InvoiceSummary",
    "InvoiceType",
]

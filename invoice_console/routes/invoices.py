import logging
import re

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from ..config import settings
from ..schemas import CompanySnapshot, DiscountType, InvoiceSummary, InvoiceType
from ..services.invoice_api import InvoiceApi, InvoiceApiError, get_invoice_api
from ..services.invoice_draft import ITEM_INPUT_FIELDS, DraftLine, InvoiceDraft
from ..templating import templates

router = APIRouter()
logger = logging.getLogger(__name__)

ITEM_KEY = re.compile(r"^items-(\d+)-(\w+)$")


@router.get("/invoices", response_class=HTMLResponse)
async def invoices_list(
    request: Request,
    q: str | None = None,
    created: int | None = Query(None),
    api: InvoiceApi = Depends(get_invoice_api),
) -> HTMLResponse:
    errors: list[str] = []
    try:
        invoices = await api.list_invoices()
    except InvoiceApiError:
        invoices = []
        errors.append("Something went wrong loading invoices.")
    return templates.TemplateResponse(
        request,
        "invoices/list.html",
        {
            "request": request,
            "rows": _filter_invoices(invoices, q),
            "q": q or "",
            "errors": errors,
            "created": created == 1,
        },
        status_code=502 if errors else 200,
    )


@router.get("/invoices/create", response_class=HTMLResponse)
def invoices_create_form(request: Request) -> HTMLResponse:
    draft = InvoiceDraft.new(tax_rate=settings.default_tax_rate)
    return _render_form(request, draft, errors=[], status_code=200)


@router.post("/invoices/create/recalculate", response_class=HTMLResponse)
async def invoices_recalculate(request: Request) -> HTMLResponse:
    form = await request.form()
    draft = _draft_from_form(form)
    _apply_action(draft, _form_value(form, "action"))
    return _render_lines_partial(request, draft)


@router.post("/invoices/create", response_class=HTMLResponse)
async def invoices_create(
    request: Request, api: InvoiceApi = Depends(get_invoice_api)
) -> HTMLResponse:
    form = await request.form()
    draft = _draft_from_form(form)
    action = _form_value(form, "action") or "submit"

    if action != "submit":
        _apply_action(draft, action)
        if request.headers.get("HX-Request") == "true":
            return _render_lines_partial(request, draft)
        return _render_form(request, draft, errors=[], status_code=200)

    errors = draft.validate()
    if errors:
        return _render_form(request, draft, errors=errors, status_code=400)

    try:
        await api.create_invoice(draft.to_payload())
    except InvoiceApiError as exc:
        logger.warning(
            "Invoice submission for %s failed (status %s)",
            draft.customer_name,
            exc.status_code,
        )
        return _render_form(
            request,
            draft,
            errors=["Failed to create invoice."],
            status_code=502,
        )

    return RedirectResponse(url="/invoices?created=1", status_code=303)


@router.get("/invoices/{invoice_id}", response_class=HTMLResponse)
async def invoices_detail(
    invoice_id: str,
    request: Request,
    api: InvoiceApi = Depends(get_invoice_api),
) -> HTMLResponse:
    try:
        invoice = await api.get_invoice(invoice_id)
    except InvoiceApiError:
        return templates.TemplateResponse(
            request,
            "invoices/not_found.html",
            {
                "request": request,
                "invoice_id": invoice_id,
                "message": "Something went wrong loading the invoice.",
            },
            status_code=502,
        )
    if invoice is None:
        return templates.TemplateResponse(
            request,
            "invoices/not_found.html",
            {"request": request, "invoice_id": invoice_id, "message": ""},
            status_code=404,
        )
    return templates.TemplateResponse(
        request,
        "invoices/detail.html",
        {
            "request": request,
            "invoice": invoice,
            "company": invoice.company or CompanySnapshot(),
        },
    )


def _render_form(
    request: Request, draft: InvoiceDraft, *, errors: list[str], status_code: int
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "invoices/create.html",
        {
            "request": request,
            "errors": errors,
            "draft": draft,
            "enums": _invoice_enums(),
        },
        status_code=status_code,
    )


def _render_lines_partial(request: Request, draft: InvoiceDraft) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "invoices/_lines_block.html",
        {"request": request, "draft": draft, "enums": _invoice_enums()},
    )


def _apply_action(draft: InvoiceDraft, action: str) -> None:
    if action == "add_item":
        draft.add_item()
    elif action.startswith("remove_item:"):
        index = _parse_int(action.split(":", 1)[1])
        if index is not None:
            draft.remove_item(index)


def _draft_from_form(form) -> InvoiceDraft:
    draft = InvoiceDraft(
        type=_form_value(form, "type") or InvoiceType.TAX_INVOICE.value,
        due_date=_form_value(form, "due_date"),
        customer_name=_form_value(form, "customer_name"),
        customer_gstin=_form_value(form, "customer_gstin"),
        customer_address=_form_value(form, "customer_address"),
        place_of_supply=_form_value(form, "place_of_supply"),
        items=_items_from_form(form),
        tax_rate=_form_value(form, "tax_rate"),
        discount_type=_form_value(form, "discount_type") or DiscountType.FLAT.value,
        discount_value=_form_value(form, "discount_value"),
    )
    draft.recalculate()
    return draft


def _items_from_form(form) -> list[DraftLine]:
    rows: dict[int, dict[str, str]] = {}
    for key in form.keys():
        match = ITEM_KEY.match(key)
        if not match or match.group(2) not in ITEM_INPUT_FIELDS:
            continue
        rows.setdefault(int(match.group(1)), {})[match.group(2)] = _form_value(
            form, key
        )
    return [
        DraftLine(
            description=row.get("description", ""),
            hsn_code=row.get("hsn_code", ""),
            quantity=row.get("quantity", ""),
            rate=row.get("rate", ""),
            discount_type=row.get("discount_type") or DiscountType.FLAT.value,
            discount_value=row.get("discount_value", ""),
        )
        for _, row in sorted(rows.items())
    ]


def _filter_invoices(
    invoices: list[InvoiceSummary], q: str | None
) -> list[InvoiceSummary]:
    needle = (q or "").strip().lower()
    if not needle:
        return invoices
    return [
        invoice
        for invoice in invoices
        if needle in invoice.customer_name.lower()
        or needle in invoice.invoice_no.lower()
    ]


def _invoice_enums() -> dict[str, list[str]]:
    return {
        "discount_types": [value.value for value in DiscountType],
        "invoice_types": [value.value for value in InvoiceType],
    }


def _form_value(form, key: str) -> str:
    return str(form.get(key, "")).strip()


def _parse_int(value: str) -> int | None:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None

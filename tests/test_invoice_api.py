import asyncio
import json
from decimal import Decimal

import httpx
import pytest

from invoice_console.services.invoice_api import InvoiceApi, InvoiceApiError
from invoice_console.services.invoice_draft import InvoiceDraft


def _api(handler) -> InvoiceApi:
    return InvoiceApi(
        "http://backend.test/api/",
        token="secret",
        transport=httpx.MockTransport(handler),
    )


def _payload():
    draft = InvoiceDraft.new()
    draft.set_field("customer_name", "Acme Traders")
    draft.set_field("customer_address", "12 MG Road")
    draft.set_item_field(0, "description", "Consulting")
    draft.set_item_field(0, "rate", "100")
    return draft.to_payload()


def test_create_posts_payload_with_token():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json={"_id": "inv-1"})

    result = asyncio.run(_api(handler).create_invoice(_payload()))

    assert result == {"_id": "inv-1"}
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "http://backend.test/api/invoices"
    assert request.headers["Authorization"] == "Bearer secret"
    body = json.loads(request.content)
    assert body["customerName"] == "Acme Traders"
    assert body["totalAmount"] == 118.0


def test_create_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503)

    with pytest.raises(InvoiceApiError) as excinfo:
        asyncio.run(_api(handler).create_invoice(_payload()))

    assert excinfo.value.status_code == 503
    assert len(calls) == 1


def test_transport_error_becomes_api_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(InvoiceApiError) as excinfo:
        asyncio.run(_api(handler).list_invoices())

    assert excinfo.value.status_code is None


def test_list_invoices_parses_rows():
    def handler(request):
        return httpx.Response(
            200,
            json=[
                {
                    "_id": "a1",
                    "invoiceNo": "INV-1",
                    "date": "2026-01-05T00:00:00Z",
                    "customerName": "Acme",
                    "totalAmount": 236.5,
                    "status": "Unpaid",
                },
                {"id": 7, "invoiceNo": "INV-2"},
            ],
        )

    rows = asyncio.run(_api(handler).list_invoices())

    assert [row.id for row in rows] == ["a1", "7"]
    assert rows[0].total_amount == Decimal("236.5")
    assert rows[0].invoice_date.year == 2026


def test_get_invoice_missing_returns_none():
    def handler(request):
        return httpx.Response(404, json={"message": "Not found"})

    assert asyncio.run(_api(handler).get_invoice("nope")) is None


def test_get_invoice_parses_company_snapshot(sample_invoice):
    def handler(request):
        assert request.url.path == "/api/invoices/inv-42"
        return httpx.Response(200, json=sample_invoice)

    invoice = asyncio.run(_api(handler).get_invoice("inv-42"))

    assert invoice.customer_gstin == "29ABCDE1234F1Z5"
    assert invoice.items[0].hsn_code == "9983"
    assert invoice.company.company_name == "Northwind Pvt Ltd"
    assert invoice.total_amount == Decimal("236")


def test_unexpected_shape_becomes_api_error():
    def handler(request):
        return httpx.Response(200, json=[{"invoiceNo": "missing id"}])

    with pytest.raises(InvoiceApiError):
        asyncio.run(_api(handler).list_invoices())

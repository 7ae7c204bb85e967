import json

import httpx
import pytest
from fastapi.testclient import TestClient

from invoice_console.main import app
from invoice_console.services.invoice_api import InvoiceApi, get_invoice_api

BACKEND_URL = "http://backend.test/api"


class FakeBackend:
    """In-memory stand-in for the invoice backend, served over MockTransport."""

    def __init__(self) -> None:
        self.invoices: list[dict] = []
        self.requests: list[httpx.Request] = []
        self.fail_status: int | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_status:
            return httpx.Response(self.fail_status, json={"message": "failed"})

        path = request.url.path
        if path == "/api/invoices" and request.method == "GET":
            return httpx.Response(200, json=self.invoices)
        if path == "/api/invoices" and request.method == "POST":
            body = json.loads(request.content)
            number = len(self.invoices) + 1
            record = {
                "_id": f"inv-{number}",
                "invoiceNo": f"INV-{number:04d}",
                "date": "2026-01-05T00:00:00Z",
                "status": "Unpaid",
                **body,
            }
            self.invoices.append(record)
            return httpx.Response(201, json=record)
        if path.startswith("/api/invoices/") and request.method == "GET":
            invoice_id = path.rsplit("/", 1)[1]
            for record in self.invoices:
                if record["_id"] == invoice_id:
                    return httpx.Response(200, json=record)
        return httpx.Response(404, json={"message": "Not found"})

    def posted(self) -> list[dict]:
        return [
            json.loads(request.content)
            for request in self.requests
            if request.method == "POST"
        ]


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def invoice_api(backend):
    return InvoiceApi(
        BACKEND_URL, token="test-token", transport=httpx.MockTransport(backend)
    )


@pytest.fixture()
def client(invoice_api):
    app.dependency_overrides[get_invoice_api] = lambda: invoice_api
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def sample_invoice():
    return {
        "_id": "inv-42",
        "invoiceNo": "INV-0042",
        "date": "2026-02-01T00:00:00Z",
        "dueDate": "2026-03-01T00:00:00Z",
        "status": "Paid",
        "type": "TAX_INVOICE",
        "customerName": "Acme Traders",
        "customerAddress": "12 MG Road\nBengaluru",
        "customerGstin": "29ABCDE1234F1Z5",
        "placeOfSupply": "Karnataka",
        "items": [
            {
                "description": "Consulting",
                "hsnCode": "9983",
                "quantity": 2,
                "rate": 100,
                "discountType": "FLAT",
                "discountValue": 0,
                "discountAmount": 0,
                "amount": 200,
            }
        ],
        "subTotal": 200,
        "discountAmount": 0,
        "taxRate": 18,
        "taxAmount": 36,
        "totalAmount": 236,
        "companyProfileSnapshot": {
            "companyName": "Northwind Pvt Ltd",
            "gstin": "29NWIND1234A1Z1",
            "bankName": "State Bank",
            "ifscCode": "SBIN0000001",
            "signatoryName": "R. Iyer",
        },
    }

import logging

import httpx
from pydantic import ValidationError

from ..config import settings
from ..schemas import InvoicePayload, InvoiceRecord, InvoiceSummary

logger = logging.getLogger(__name__)


class InvoiceApiError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class InvoiceApi:
    """Thin client for the invoice backend. No retries."""

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def list_invoices(self) -> list[InvoiceSummary]:
        data = await self._request("GET", "/invoices")
        try:
            return [InvoiceSummary.model_validate(row) for row in data or []]
        except ValidationError as exc:
            logger.exception("Unexpected invoice list shape")
            raise InvoiceApiError("Backend returned an unexpected shape") from exc

    async def get_invoice(self, invoice_id: str) -> InvoiceRecord | None:
        try:
            data = await self._request("GET", f"/invoices/{invoice_id}")
        except InvoiceApiError as exc:
            if exc.status_code == 404:
                return None
            raise
        try:
            return InvoiceRecord.model_validate(data)
        except ValidationError as exc:
            logger.exception("Unexpected invoice shape for %s", invoice_id)
            raise InvoiceApiError("Backend returned an unexpected shape") from exc

    async def create_invoice(self, payload: InvoicePayload) -> dict:
        data = await self._request("POST", "/invoices", json=payload.to_json())
        logger.info(
            "Invoice created for %s (total %s)",
            payload.customer_name,
            payload.total_amount,
        )
        return data or {}

    async def _request(self, method: str, path: str, **kwargs):
        async with self._client() as client:
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
            except httpx.HTTPStatusError as exc:
                status_code = exc.response.status_code
                if status_code != 404:
                    logger.warning(
                        "Invoice backend returned %s for %s %s",
                        status_code,
                        method,
                        path,
                    )
                raise InvoiceApiError(
                    f"Backend returned {status_code}", status_code=status_code
                ) from exc
            except httpx.RequestError as exc:
                logger.exception("Invoice backend unreachable: %s %s", method, path)
                raise InvoiceApiError("Backend unreachable") from exc
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise InvoiceApiError(
                "Backend returned invalid JSON", status_code=response.status_code
            ) from exc


def get_invoice_api() -> InvoiceApi:
    return InvoiceApi(
        settings.api_base_url,
        token=settings.api_token,
        timeout=settings.api_timeout_seconds,
    )

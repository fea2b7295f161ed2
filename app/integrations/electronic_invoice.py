"""
Electronic Invoice API Client
Gateway in front of the tax authority (facturacion v3.0)
"""
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.errors import CustomerRequired, ProviderHTTPError, ProviderRejected
from app.services.amount_words import number_to_words
from app.services.billing import format_amount
from .base import InvoiceProvider, InvoiceSubmission, InvoiceConfirmation, DocumentStatus
from .payment_codes import payment_code_to_provider, tax_code_to_provider

logger = logging.getLogger(__name__)

NOT_REPORTED = "No reporta"
PAYMENT_TYPE_CASH = "1"  # 1 = contado, 2 = credito. Sales are never on credit
ADDITIONAL_ACCOUNT_ID = "1"


def _to_int(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ElectronicInvoiceClient(InvoiceProvider):
    """
    Electronic invoice gateway client

    Both issuing and status verification are POSTs to the same endpoint with
    HTTP basic auth; the kind of operation is given by the top-level key of
    the JSON body ("invoice" or "verifyStatus").
    """
    PROVIDER_NAME = "electronic_invoice"
    INVOICE_PATH = "/facturacion.v30/invoice/"

    def __init__(
        self,
        base_url: str,
        user: str,
        password: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.user = user
        self.password = password
        self.timeout = timeout
        self.transport = transport

    # ========== Payloads ==========

    def build_invoice_payload(self, submission: InvoiceSubmission) -> Dict[str, Any]:
        """Map a submission to the gateway's invoice document"""
        customer = submission.customer
        if customer is None:
            raise CustomerRequired()

        pay_amount = format_amount(submission.pay_amount)

        items = []
        for item in submission.items:
            items.append({
                "quantity": str(item.quantity),
                "unitPrice": format_amount(item.unit_price),
                "total": format_amount(item.unit_price * item.quantity),
                "description": item.description or "",
                "brand": item.brand or "",
                "model": item.model or "",
                "code": item.code or "",
                "allowance": [
                    {
                        "charge": allowance.charge,
                        "reasonCode": allowance.reason_code,
                        "description": allowance.description,
                        "baseAmount": allowance.base_amount,
                        "amount": allowance.amount,
                    }
                    for allowance in item.allowance
                ],
                "taxes": [
                    {
                        "ID": tax_code_to_provider(tax.tax_code),
                        "taxAmount": tax.tax_amount,
                        "percent": tax.percent,
                    }
                    for tax in item.taxes
                ],
            })

        return {
            "invoice": {
                "prefix": submission.prefix,
                "intID": str(submission.consecutive),
                "issueDate": submission.issued_at.strftime("%Y%m%d"),
                "issueTime": submission.issued_at.strftime("%H%M%S"),
                "paymentType": PAYMENT_TYPE_CASH,
                "paymentCode": payment_code_to_provider(submission.payment_code),
                "note1": number_to_words(pay_amount),
                "customer": {
                    "additionalAccountID": ADDITIONAL_ACCOUNT_ID,
                    "name": customer.name,
                    "city": NOT_REPORTED,
                    "countrySubentity": NOT_REPORTED,
                    "addressLine": NOT_REPORTED,
                    "documentNumber": customer.document_number,
                    "documentType": customer.document_type.value,
                    "telephone": NOT_REPORTED,
                    "email": customer.email,
                },
                "amounts": {
                    "totalAmount": format_amount(submission.total_amount),
                    "discountAmount": format_amount(submission.discount_amount),
                    "taxAmount": format_amount(submission.tax_amount),
                    "payAmount": pay_amount,
                },
                "items": items,
            }
        }

    # ========== Transport ==========

    async def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST to the invoice endpoint and return `invoiceResult` of an accepted response"""
        url = f"{self.base_url}{self.INVOICE_PATH}"

        try:
            async with httpx.AsyncClient(
                auth=(self.user, self.password),
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"[{self.PROVIDER_NAME}] POST {self.INVOICE_PATH} failed: {e}")
            raise ProviderHTTPError.wrap(e, f"failed to send request: {e}") from e

        self._log_api_call("POST", self.INVOICE_PATH, response.status_code)

        if response.status_code != 200:
            logger.error(f"[{self.PROVIDER_NAME}] HTTP {response.status_code}: {response.text}")
            raise ProviderHTTPError(
                f"invoice API returned status {response.status_code}",
                field_value=response.text,
                http_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderHTTPError.wrap(e, "failed to decode invoice API response", response.text) from e

        result = (data.get("invoiceResult") if isinstance(data, dict) else None) or {}
        status = result.get("status") or {}
        status_text = status.get("text", "")
        try:
            status_code = int(status.get("code"))
        except (TypeError, ValueError):
            status_code = None

        if status_code != 200:
            logger.error(f"[{self.PROVIDER_NAME}] rejected ({status.get('code')}): {status_text}")
            raise ProviderRejected(
                f"invoice API error: {status_text}",
                field_value=status_text,
                provider_status=status_code,
            )

        return result

    # ========== Operations ==========

    async def submit(self, submission: InvoiceSubmission) -> InvoiceConfirmation:
        payload = self.build_invoice_payload(submission)
        result = await self._post(payload)

        document = result.get("documento") or {}
        confirmation = InvoiceConfirmation(
            tascode=document.get("tascode", ""),
            cufe=document.get("CUFE", ""),
            int_id=document.get("intID", ""),
            raw=result,
        )
        logger.info(
            f"[{self.PROVIDER_NAME}] Invoice {submission.prefix}{submission.consecutive} accepted, "
            f"tascode={confirmation.tascode}"
        )
        return confirmation

    async def get_status(self, tascode: str) -> DocumentStatus:
        result = await self._post({"verifyStatus": {"tascode": tascode}})

        document = result.get("document") or {}
        return DocumentStatus(
            tascode=document.get("tascode") or tascode,
            cufe=document.get("CUFE") or None,
            document=document.get("document") or None,
            process=_to_int(document.get("process")),
            retries=_to_int(document.get("retries")),
            pdf_url=document.get("PDF") or None,
            url=document.get("URL") or None,
            attached=document.get("ATTACHED") or None,
            raw=result,
        )

"""
KRA eTIMS submission service.

Coordinates one invoice submission end to end:
1. Validation
2. Serialization
3. Request artifact
4. HTTP submission (Basic auth when configured)
5. Response artifact
6. QR proof for accepted invoices

Every public method returns a ServiceResult; no exception escapes.
Artifact writes and QR generation are best-effort and never change the
outcome, which depends only on what KRA answered.
"""

import asyncio
import json
import logging

import httpx

from etims_worker.config import Settings
from etims_worker.domain.codec import deserialize_response, serialize_invoice
from etims_worker.domain.models import InvoiceRequest, InvoiceResponse, ServiceResult
from etims_worker.domain.validation import validate_invoice
from etims_worker.infrastructure.storage import ArtifactStore

from .qr import render_qr_png, resolve_qr_payload

logger = logging.getLogger(__name__)


INVOICE_NUMBER_PLACEHOLDER = "{invoiceNumber}"

UNKNOWN_KRA_ERROR = "Unknown error from KRA API"


def create_http_client(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """
    Build the shared HTTP client for KRA calls.

    A base URL ending in ``/api`` is the old sandbox format; the suffix is
    dropped because endpoint paths are configured separately.

    Args:
        settings: KRA settings
        transport: Override transport (for testing)
    """
    if settings.has_legacy_base_url:
        logger.warning(
            "Base URL contains '/api' suffix. This is deprecated. "
            "Use base URL without '/api' and configure endpoints separately."
        )

    return httpx.AsyncClient(
        base_url=settings.normalized_base_url,
        headers={"Accept": "application/json"},
        timeout=settings.request_timeout_seconds,
        transport=transport,
    )


def is_html_document(body: str) -> bool:
    return body.lstrip().lower().startswith("<!doctype")


def wrap_html_error(body: str) -> str:
    """Wrap an HTML error page in JSON so the response artifact stays valid JSON."""
    return json.dumps(
        {
            "error": True,
            "statusCode": "Error",
            "message": "KRA API returned an error response",
            "rawResponse": body,
        },
        indent=2,
    )


class EtimsService:
    """
    Client for the KRA eTIMS invoice API.

    One instance is created at startup and shared; it holds no
    per-invoice state.

    Example:
        settings = get_settings()
        async with create_http_client(settings) as client:
            service = EtimsService(
                client=client,
                settings=settings,
                store=ArtifactStore(settings.output_directory),
            )
            result = await service.submit_invoice(invoice)

            if result.success:
                print(result.data.kra_invoice_number)
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        store: ArtifactStore,
    ) -> None:
        """
        Initialize the service.

        Args:
            client: HTTP client with the KRA base URL already set
            settings: KRA credentials and endpoint paths
            store: Where request/response/QR artifacts are written
        """
        self.client = client
        self.settings = settings
        self.store = store

    def _auth(self) -> httpx.Auth | None:
        """Basic auth when both username and password are configured."""
        if self.settings.has_credentials:
            return httpx.BasicAuth(self.settings.api_username, self.settings.api_password)
        return None

    def status_endpoint(self, invoice_number: str) -> str:
        """Fill in the status path template for one invoice."""
        endpoint = self.settings.status_path.replace(
            INVOICE_NUMBER_PLACEHOLDER, invoice_number
        )
        if invoice_number not in endpoint:
            endpoint = f"{endpoint.rstrip('/')}/{invoice_number}"
        return endpoint

    async def submit_invoice(
        self,
        invoice: InvoiceRequest,
    ) -> ServiceResult[InvoiceResponse]:
        """
        Validate an invoice and submit it to KRA.

        Args:
            invoice: The invoice to submit

        Returns:
            ServiceResult with the KRA response on success; on failure the
            error message explains which stage failed
        """
        invoice_number = invoice.invoice_number if invoice is not None else None
        try:
            logger.info(f"Submitting invoice {invoice_number} to KRA eTIMS")

            validation = validate_invoice(invoice)
            if not validation.is_valid:
                logger.warning(
                    f"Invoice {invoice_number} failed validation: {validation.errors}"
                )
                return ServiceResult.fail(
                    f"Invoice validation failed: {', '.join(validation.errors)}"
                )

            json_content = serialize_invoice(invoice)
            await self.store.save_request_json(invoice.invoice_number, json_content)

            endpoint = self.settings.submit_path
            logger.info(f"Submitting to KRA endpoint: {endpoint}")
            response = await self.client.post(
                endpoint,
                content=json_content.encode("utf-8"),
                headers={"Content-Type": "application/json; charset=utf-8"},
                auth=self._auth(),
            )

            response_content = response.text
            await self._save_response(
                invoice.invoice_number, response_content, response.is_success
            )

            if not response.is_success:
                logger.error(
                    f"KRA API returned error: {response.status_code} - {response_content}"
                )
                return ServiceResult.fail(
                    f"KRA API error: {response.status_code} - {response_content}"
                )

            invoice_response = deserialize_response(response_content)

            if invoice_response is None or not invoice_response.success:
                message = invoice_response.message if invoice_response else None
                logger.warning(f"KRA rejected invoice {invoice_number}: {message}")
                return ServiceResult.fail(
                    message or UNKNOWN_KRA_ERROR,
                    data=invoice_response,
                )

            await self._save_qr_code(invoice_response, invoice.invoice_number)

            logger.info(
                f"Invoice {invoice_number} submitted successfully. "
                f"KRA Invoice: {invoice_response.kra_invoice_number}"
            )
            return ServiceResult.ok(invoice_response)

        except httpx.TransportError as e:
            logger.exception(f"HTTP error while submitting invoice {invoice_number}")
            return ServiceResult.fail(f"Network error: {e}", exception=e)

        except Exception as e:
            logger.exception(f"Error submitting invoice {invoice_number}")
            return ServiceResult.fail(f"Unexpected error: {e}", exception=e)

    async def get_invoice_status(
        self,
        invoice_number: str,
    ) -> ServiceResult[InvoiceResponse]:
        """
        Look up an invoice on KRA.

        No artifacts are written for status queries.

        Args:
            invoice_number: Invoice number used at submission

        Returns:
            ServiceResult with the KRA response (data may be None if KRA
            returned a null body)
        """
        try:
            endpoint = self.status_endpoint(invoice_number)
            logger.info(f"Getting invoice status from KRA endpoint: {endpoint}")
            response = await self.client.get(endpoint, auth=self._auth())

            if not response.is_success:
                return ServiceResult.fail(
                    f"Failed to get invoice status: {response.status_code}"
                )

            return ServiceResult.ok(deserialize_response(response.text))

        except Exception as e:
            logger.exception(f"Error getting status for invoice {invoice_number}")
            return ServiceResult.fail(
                f"Error getting invoice status: {e}", exception=e
            )

    def list_generated_files(self) -> list[str]:
        return self.store.list_files()

    @property
    def output_directory(self) -> str:
        return str(self.store.output_root)

    async def _save_response(
        self,
        invoice_number: str,
        body: str,
        is_success: bool,
    ) -> None:
        """Store the raw response; HTML error pages are wrapped in JSON first."""
        content = body
        if not is_success and is_html_document(body):
            content = wrap_html_error(body)
        await self.store.save_response_json(invoice_number, content, is_success)

    async def _save_qr_code(
        self,
        invoice_response: InvoiceResponse,
        invoice_number: str,
    ) -> None:
        """Render and store the QR proof. Failures are logged only."""
        try:
            qr_data = resolve_qr_payload(invoice_response)
            if not qr_data:
                logger.warning(f"No QR code data available for invoice {invoice_number}")
                return

            png_bytes = await asyncio.to_thread(render_qr_png, qr_data)
            await self.store.save_qr_png(invoice_number, png_bytes)

        except Exception:
            logger.exception(f"Error generating QR code for invoice {invoice_number}")

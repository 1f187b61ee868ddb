"""
Invoice endpoints.

Thin HTTP layer over EtimsService: maps ServiceResult outcomes to
status codes and response bodies.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from etims_worker.api.dependencies import get_etims_service
from etims_worker.api.schemas import (
    FailureResponse,
    GeneratedFilesResponse,
    InvoiceResponseSchema,
    InvoiceStatusResponse,
    InvoiceSubmitRequest,
    SubmitInvoiceResponse,
)
from etims_worker.services.etims import EtimsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoice", tags=["invoice"])

EtimsServiceDep = Annotated[EtimsService, Depends(get_etims_service)]


def _failure(
    status_code: int,
    message: str,
    errors: str | None = None,
    include_errors: bool = True,
) -> JSONResponse:
    body = FailureResponse(message=message, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(
            by_alias=True,
            mode="json",
            exclude=None if include_errors else {"errors"},
        ),
    )


@router.post(
    "/submit",
    response_model=SubmitInvoiceResponse,
    responses={
        400: {"model": FailureResponse, "description": "Validation failed or KRA rejected the invoice"},
    },
)
async def submit_invoice(
    payload: InvoiceSubmitRequest,
    service: EtimsServiceDep,
) -> SubmitInvoiceResponse | JSONResponse:
    """
    Submit an invoice to KRA eTIMS.

    The request, the response and (on success) a QR proof are written
    to the output directory.
    """
    result = await service.submit_invoice(payload.to_domain())

    if result.success and result.data is not None:
        return SubmitInvoiceResponse(
            data=InvoiceResponseSchema.from_domain(result.data),
        )

    return _failure(
        status.HTTP_400_BAD_REQUEST,
        result.error_message or "Failed to submit invoice",
        str(result.exception) if result.exception else None,
    )


@router.get(
    "/status/{invoice_number}",
    response_model=InvoiceStatusResponse,
    responses={
        404: {"model": FailureResponse, "description": "Invoice not found or status unavailable"},
    },
)
async def get_invoice_status(
    invoice_number: str,
    service: EtimsServiceDep,
) -> InvoiceStatusResponse | JSONResponse:
    """Query KRA for the status of a previously submitted invoice."""
    result = await service.get_invoice_status(invoice_number)

    if result.success and result.data is not None:
        return InvoiceStatusResponse(
            data=InvoiceResponseSchema.from_domain(result.data),
        )

    return _failure(
        status.HTTP_404_NOT_FOUND,
        result.error_message or "Invoice not found",
        include_errors=False,
    )


@router.get("/files", response_model=GeneratedFilesResponse)
async def list_generated_files(service: EtimsServiceDep) -> GeneratedFilesResponse:
    """List request/response/QR files, newest invoice numbers first."""
    files = service.list_generated_files()
    return GeneratedFilesResponse(
        output_directory=service.output_directory,
        file_count=len(files),
        files=files,
    )

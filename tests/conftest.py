"""Shared fixtures for the invoice worker tests."""

import asyncio
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import httpx
import pytest

from etims_worker.config import Settings
from etims_worker.domain.models import (
    Customer,
    InvoiceRequest,
    LineItem,
    PaymentInfo,
)
from etims_worker.domain.tax import calculate_tax
from etims_worker.infrastructure.storage import ArtifactStore
from etims_worker.services.etims import EtimsService, create_http_client


BASE_URL = "https://etims-api-sbx.kra.go.ke"

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "generated-invoices"


@pytest.fixture
def settings(output_dir: Path) -> Settings:
    return Settings(
        _env_file=None,
        base_url=BASE_URL,
        api_username="sandbox-user",
        api_password="sandbox-pass",
        pin="P051234567X",
        output_directory=output_dir,
    )


@pytest.fixture
def invoice() -> InvoiceRequest:
    """One line: 2 x 100 at 16% -> 200 + 32 = 232."""
    line_items = [
        LineItem(
            item_name="Widget",
            item_code="W-001",
            quantity=Decimal("2"),
            unit_price=Decimal("100"),
        )
    ]
    return InvoiceRequest(
        invoice_number="INV-2024-001",
        invoice_date=datetime(2024, 1, 15, 10, 30),
        customer=Customer(customer_name="Acme Ltd", customer_pin="P000111222Z"),
        line_items=line_items,
        tax_info=calculate_tax(line_items),
        payment_info=PaymentInfo(payment_mode="MOBILE", payment_amount=Decimal("232")),
    )


class RecordingHandler:
    """MockTransport handler that remembers every request it served."""

    def __init__(self, respond: Handler) -> None:
        self.respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)


@pytest.fixture
def make_service(settings: Settings):
    """Build an EtimsService whose HTTP calls are answered by ``respond``."""
    clients: list[httpx.AsyncClient] = []

    def factory(
        respond: Handler,
        service_settings: Settings | None = None,
    ) -> tuple[EtimsService, RecordingHandler]:
        active = service_settings or settings
        handler = RecordingHandler(respond)
        client = create_http_client(active, transport=httpx.MockTransport(handler))
        clients.append(client)
        service = EtimsService(
            client=client,
            settings=active,
            store=ArtifactStore(active.output_directory),
        )
        return service, handler

    yield factory

    for client in clients:
        asyncio.run(client.aclose())

"""
FastAPI application entry point.

Ties together:
- Invoice submission, status and file listing routes
- The shared KRA HTTP client and artifact store
- Error handling and logging
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from etims_worker import __version__
from etims_worker.api.routes import health, invoice
from etims_worker.api.schemas import ErrorResponse
from etims_worker.config import get_settings
from etims_worker.infrastructure.storage import ArtifactStore
from etims_worker.services.etims import EtimsService, create_http_client

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Builds the KRA client, artifact store and EtimsService on startup and
    closes the HTTP client on shutdown.
    """
    settings = get_settings()

    logger.info(f"Starting KRA eTIMS Invoice Worker v{__version__}")
    logger.info(f"KRA base URL: {settings.normalized_base_url or '(not configured)'}")
    logger.info(f"Debug mode: {settings.debug}")

    client = create_http_client(settings)
    store = ArtifactStore(settings.output_directory)
    app.state.etims_service = EtimsService(client=client, settings=settings, store=store)
    logger.info(f"Output directory: {store.output_root}")

    yield  # Application runs here

    logger.info("Shutting down KRA eTIMS Invoice Worker")
    await client.aclose()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance ready to serve requests.
    """
    settings = get_settings()

    app = FastAPI(
        title="KRA eTIMS Invoice Worker",
        description=(
            "Validates invoices and submits them to the KRA eTIMS API.\n\n"
            "Request/response JSON and QR proofs are kept on local disk."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.include_router(health.router)
    app.include_router(invoice.router, prefix="/api")

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all exception handler for unhandled errors."""
        logger.exception(f"Unhandled error: {exc}")

        # Don't expose internal errors in production
        if settings.debug:
            detail = str(exc)
        else:
            detail = "An internal error occurred"

        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal Server Error",
                detail=detail,
            ).model_dump(),
        )

    return app


# Create the application instance
app = create_app()


# Development server entry point
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "etims_worker.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )

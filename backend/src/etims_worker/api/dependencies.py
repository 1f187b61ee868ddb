"""
FastAPI dependencies.

The EtimsService is built once in the application lifespan and kept on
``app.state``; routes receive it through get_etims_service().
"""

from fastapi import Request

from etims_worker.services.etims import EtimsService


def get_etims_service(request: Request) -> EtimsService:
    """Return the service created at startup."""
    return request.app.state.etims_service

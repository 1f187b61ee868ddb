"""
Services package - KRA eTIMS integration and QR proof generation.
"""

from .etims import EtimsService, create_http_client

__all__ = ["EtimsService", "create_http_client"]

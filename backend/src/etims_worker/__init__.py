"""
KRA eTIMS invoice worker.

Validates invoices, submits them to the KRA eTIMS API and keeps the
request, response and QR proof on local disk.
"""

__version__ = "1.0.0"

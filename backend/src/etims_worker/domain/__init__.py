"""
Domain package - Core business logic with no external dependencies.

This package contains pure Python invoice models, validation and tax
rules, and the JSON codec for the KRA eTIMS wire format.
"""

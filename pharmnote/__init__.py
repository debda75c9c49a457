"""Pharmacist SOAP note generation service."""

__version__ = "0.1.0"

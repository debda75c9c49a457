"""SOAP note pipeline stages."""

from pharmnote.pipeline.composer import compose_prompt
from pharmnote.pipeline.extractor import extract_result
from pharmnote.pipeline.guard import validate_request
from pharmnote.pipeline.service import generate_soap_note

__all__ = [
    "compose_prompt",
    "extract_result",
    "generate_soap_note",
    "validate_request",
]

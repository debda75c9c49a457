"""Tests for caller and payload validation."""

import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from pharmnote.core.errors import ErrorKind
from pharmnote.core.models import CallerIdentity
from pharmnote.pipeline.guard import validate_request

CALLER = CallerIdentity(uid="user-123")


@pytest.mark.parametrize(
    "payload",
    [
        {"patientInfo": "65F, HTN, eGFR 42"},
        {"patientInfo": ""},
        {},
        None,
        ["not", "a", "mapping"],
    ],
)
def test_missing_caller_is_unauthenticated_regardless_of_payload(payload) -> None:
    outcome = validate_request(payload, None)
    assert not outcome.ok
    assert outcome.error.kind is ErrorKind.UNAUTHENTICATED


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"patientInfo": ""},
        {"patientInfo": "   \n\t"},
        {"patientInfo": None},
        {"patientInfo": 42},
        {"specialtyFocus": "Cardiology"},
    ],
)
def test_missing_patient_info_is_invalid_argument(payload) -> None:
    outcome = validate_request(payload, CALLER)
    assert not outcome.ok
    assert outcome.error.kind is ErrorKind.INVALID_ARGUMENT
    assert "patientInfo" in outcome.error.message


def test_non_text_optional_field_is_invalid_argument() -> None:
    outcome = validate_request({"patientInfo": "data", "micromedexInfo": {"x": 1}}, CALLER)
    assert not outcome.ok
    assert outcome.error.kind is ErrorKind.INVALID_ARGUMENT
    assert outcome.error.field == "micromedexInfo"


def test_valid_request_keeps_text_verbatim() -> None:
    outcome = validate_request(
        {
            "patientInfo": "  65F, HTN, eGFR 42\n",
            "specialtyFocus": "Nephrology",
            "uptodateInfo": "",
            "micromedexInfo": "   ",
            "openevidenceInfo": None,
        },
        CALLER,
    )
    assert outcome.ok
    validated = outcome.unwrap()
    assert validated.caller_uid == "user-123"
    assert validated.patient_info == "  65F, HTN, eGFR 42\n"
    assert validated.specialty_focus == "Nephrology"
    assert validated.uptodate_info is None
    assert validated.micromedex_info is None
    assert validated.openevidence_info is None


def test_accept_log_has_uid_but_no_clinical_text(caplog: pytest.LogCaptureFixture) -> None:
    base_logger = logging.getLogger("uvicorn.error")
    base_logger.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.INFO, logger="uvicorn.error"):
            validate_request({"patientInfo": "secret-lab-value 7.9"}, CALLER)
    finally:
        base_logger.removeHandler(caplog.handler)

    text = caplog.text
    assert "user-123" in text
    assert "secret-lab-value" not in text


def test_unauthenticated_rejection_is_logged_without_payload(caplog: pytest.LogCaptureFixture) -> None:
    base_logger = logging.getLogger("uvicorn.error")
    base_logger.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.INFO, logger="uvicorn.error"):
            validate_request({"patientInfo": "secret-lab-value 7.9"}, None)
    finally:
        base_logger.removeHandler(caplog.handler)

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert {r.getMessage() for r in warnings} == {"[guard] unauthenticated request rejected uid=None"}
    assert "secret-lab-value" not in caplog.text


def test_invalid_patient_info_log_names_field_only(caplog: pytest.LogCaptureFixture) -> None:
    base_logger = logging.getLogger("uvicorn.error")
    base_logger.addHandler(caplog.handler)
    try:
        with caplog.at_level(logging.INFO, logger="uvicorn.error"):
            validate_request({"patientInfo": "   ", "uptodateInfo": "excerpt-text"}, CALLER)
    finally:
        base_logger.removeHandler(caplog.handler)

    messages = [r.getMessage() for r in caplog.records]
    assert "[guard] invalid argument uid=user-123 field=patientInfo" in messages
    assert "excerpt-text" not in caplog.text

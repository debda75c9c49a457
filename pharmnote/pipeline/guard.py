from __future__ import annotations

import logging
from typing import Any, Mapping

from pharmnote.config.logger import get_logger, log_stage
from pharmnote.core.envelope import StageResult
from pharmnote.core.errors import InvalidArgumentError, UnauthenticatedError
from pharmnote.core.models import CallerIdentity, ValidatedInput

logger = get_logger(__name__)

PATIENT_INFO_FIELD = "patientInfo"

# wire name -> ValidatedInput attribute
OPTIONAL_FIELDS: tuple[tuple[str, str], ...] = (
    ("specialtyFocus", "specialty_focus"),
    ("uptodateInfo", "uptodate_info"),
    ("micromedexInfo", "micromedex_info"),
    ("openevidenceInfo", "openevidence_info"),
)


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def validate_request(
    payload: Mapping[str, Any] | None,
    caller: CallerIdentity | None,
) -> StageResult[ValidatedInput]:
    """Check caller identity first, then the required patient data.

    Blank optional fields are treated as absent; non-string values are rejected.
    """
    if caller is None:
        log_stage(
            logger,
            "guard",
            "unauthenticated request rejected",
            level=logging.WARNING,
            uid=None,
        )
        return StageResult.failure(UnauthenticatedError())

    data: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}

    if not _has_text(data.get(PATIENT_INFO_FIELD)):
        log_stage(
            logger,
            "guard",
            "invalid argument",
            level=logging.WARNING,
            uid=caller.uid,
            field=PATIENT_INFO_FIELD,
        )
        return StageResult.failure(InvalidArgumentError(field=PATIENT_INFO_FIELD))

    optional: dict[str, str] = {}
    for wire_name, attr in OPTIONAL_FIELDS:
        value = data.get(wire_name)
        if value is None:
            continue
        if not isinstance(value, str):
            log_stage(
                logger,
                "guard",
                "invalid argument",
                level=logging.WARNING,
                uid=caller.uid,
                field=wire_name,
            )
            return StageResult.failure(
                InvalidArgumentError(f"Field '{wire_name}' must be text.", field=wire_name)
            )
        if value.strip():
            optional[attr] = value

    log_stage(logger, "guard", "accepted", uid=caller.uid, optional=sorted(optional))
    return StageResult.success(
        ValidatedInput(
            caller_uid=caller.uid,
            patient_info=data[PATIENT_INFO_FIELD],
            **optional,
        )
    )

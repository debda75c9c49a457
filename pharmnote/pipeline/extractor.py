from __future__ import annotations

import logging

from pharmnote.config.logger import get_logger, log_stage
from pharmnote.core.envelope import StageResult
from pharmnote.core.models import (
    GroundingAttribution,
    GroundingSource,
    ModelResponse,
    SoapNoteResult,
)
from pharmnote.prompts.soap import GUIDELINES_DELIMITER

logger = get_logger(__name__)


def filter_sources(
    attributions: list[GroundingAttribution] | None,
) -> list[GroundingSource]:
    """Keep attributions that carry both a uri and a title, in their original order."""
    sources: list[GroundingSource] = []
    for attr in attributions or []:
        uri = (attr.uri or "").strip()
        title = (attr.title or "").strip()
        if not uri or not title:
            continue
        sources.append(GroundingSource(uri=attr.uri, title=attr.title))
    return sources


def has_guidelines_section(text: str) -> bool:
    return any(line.strip() == GUIDELINES_DELIMITER for line in (text or "").splitlines())


def extract_result(response: ModelResponse) -> StageResult[SoapNoteResult]:
    sources = filter_sources(response.grounding_attributions)
    total = len(response.grounding_attributions or [])

    # Format compliance is only reported; the note is returned as-is either way.
    if not has_guidelines_section(response.text):
        log_stage(
            logger,
            "extractor",
            "guidelines line missing",
            level=logging.WARNING,
            delimiter=GUIDELINES_DELIMITER,
        )

    log_stage(
        logger,
        "extractor",
        "extracted",
        note_len=len(response.text),
        sources=len(sources),
        dropped=total - len(sources),
    )
    return StageResult.success(SoapNoteResult(soap_note=response.text, sources=sources))

from __future__ import annotations

from pharmnote.core.models import ComposedPrompt, ValidatedInput
from pharmnote.prompts.soap import (
    MICROMEDEX_SECTION_FOOTER,
    MICROMEDEX_SECTION_HEADER,
    OPENEVIDENCE_SECTION_FOOTER,
    OPENEVIDENCE_SECTION_HEADER,
    PATIENT_SECTION_FOOTER,
    PATIENT_SECTION_HEADER,
    SOAP_CLOSING_INSTRUCTION,
    SOAP_SYSTEM_PROMPT,
    SPECIALTY_SECTION_HEADER,
    UPTODATE_SECTION_FOOTER,
    UPTODATE_SECTION_HEADER,
)

# (ValidatedInput attribute, header, footer); order here is the order in the message.
OPTIONAL_SECTIONS: tuple[tuple[str, str, str | None], ...] = (
    ("specialty_focus", SPECIALTY_SECTION_HEADER, None),
    ("uptodate_info", UPTODATE_SECTION_HEADER, UPTODATE_SECTION_FOOTER),
    ("micromedex_info", MICROMEDEX_SECTION_HEADER, MICROMEDEX_SECTION_FOOTER),
    ("openevidence_info", OPENEVIDENCE_SECTION_HEADER, OPENEVIDENCE_SECTION_FOOTER),
)


def _section(header: str, body: str, footer: str | None) -> str:
    lines = [header, body]
    if footer:
        lines.append(footer)
    return "\n".join(lines) + "\n"


def build_user_message(validated: ValidatedInput) -> str:
    parts = [_section(PATIENT_SECTION_HEADER, validated.patient_info, PATIENT_SECTION_FOOTER)]
    for attr, header, footer in OPTIONAL_SECTIONS:
        body = getattr(validated, attr)
        if body:
            parts.append("\n" + _section(header, body, footer))
    parts.append("\n" + SOAP_CLOSING_INSTRUCTION)
    return "".join(parts)


def compose_prompt(validated: ValidatedInput) -> ComposedPrompt:
    return ComposedPrompt(
        system_instruction=SOAP_SYSTEM_PROMPT,
        user_message=build_user_message(validated),
    )

"""Data shapes passed between the SOAP note pipeline stages."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CallerIdentity(BaseModel):
    """Verified principal attached to an inbound call."""
    uid: str = Field(min_length=1)


class ValidatedInput(BaseModel):
    """Payload that passed the request guard."""
    model_config = ConfigDict(frozen=True)

    caller_uid: str
    patient_info: str
    specialty_focus: str | None = None
    uptodate_info: str | None = None
    micromedex_info: str | None = None
    openevidence_info: str | None = None


class ComposedPrompt(BaseModel):
    model_config = ConfigDict(frozen=True)

    system_instruction: str
    user_message: str


class GroundingAttribution(BaseModel):
    """One web citation candidate from the model's grounding metadata."""
    model_config = ConfigDict(frozen=True)

    uri: str | None = None
    title: str | None = None


class ModelResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    grounding_attributions: list[GroundingAttribution] | None = None


class GroundingSource(BaseModel):
    uri: str = Field(min_length=1)
    title: str = Field(min_length=1)


class SoapNoteResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    soap_note: str = Field(alias="soapNote")
    sources: list[GroundingSource] = Field(default_factory=list)

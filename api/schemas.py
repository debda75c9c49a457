from pydantic import BaseModel, Field

from pharmnote.core.errors import ErrorPayload


class SoapNoteRequest(BaseModel):
    """Documented request body; the endpoint itself reads the raw JSON."""
    patientInfo: str
    specialtyFocus: str | None = None
    uptodateInfo: str | None = None
    micromedexInfo: str | None = None
    openevidenceInfo: str | None = None


class SourceItem(BaseModel):
    uri: str
    title: str


class SoapNoteResponse(BaseModel):
    soapNote: str
    sources: list[SourceItem] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: ErrorPayload


class HealthResponse(BaseModel):
    ok: bool
    provider: str
    model: str
    credential_configured: bool

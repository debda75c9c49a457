import json
import time
from typing import Any

from dotenv import load_dotenv

load_dotenv()

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.schemas import ErrorResponse, HealthResponse, SoapNoteRequest, SoapNoteResponse
from pharmnote.auth.firebase import FirebaseIdentityVerifier
from pharmnote.config.logger import configure_logging, get_logger
from pharmnote.config.settings import settings
from pharmnote.core.errors import NoteServiceError
from pharmnote.core.models import CallerIdentity
from pharmnote.llm.invoker import GroundedNoteInvoker
from pharmnote.llm.model_factory import GeminiProvider
from pharmnote.pipeline.service import NoteInvoker, generate_soap_note

app = FastAPI(title="Pharmacist SOAP Note Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

configure_logging()
logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _error_response(error: NoteServiceError) -> JSONResponse:
    body = ErrorResponse(error=error.to_payload())
    return JSONResponse(
        status_code=error.http_status,
        content=body.model_dump(mode="json", exclude_none=True),
    )


@app.exception_handler(NoteServiceError)
async def note_service_error_handler(_request: Request, exc: NoteServiceError) -> JSONResponse:
    return _error_response(exc)


@app.middleware("http")
async def log_requests(request, call_next):
    start = time.perf_counter()
    logger.info("[request.start] %s %s", request.method, request.url.path)
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "[request.end] %s %s status=%s elapsed=%.1fms",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


@app.on_event("startup")
async def startup():
    app.state.note_invoker = GroundedNoteInvoker(
        api_key=settings.GEMINI_API_KEY,
        model_name=settings.GEMINI_MODEL,
        temperature=settings.GEMINI_TEMPERATURE,
    )
    app.state.identity_verifier = FirebaseIdentityVerifier(
        project_id=settings.FIREBASE_PROJECT_ID,
        check_revoked=settings.AUTH_CHECK_REVOKED,
    )
    if not settings.has_gemini_creds():
        logger.warning("[startup] GEMINI_API_KEY is not set; note generation will fail")
    logger.info("[startup] model=%s", settings.GEMINI_MODEL)


def get_note_invoker(request: Request) -> NoteInvoker:
    return request.app.state.note_invoker


def get_identity_verifier(request: Request) -> FirebaseIdentityVerifier:
    return request.app.state.identity_verifier


def resolve_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    verifier: FirebaseIdentityVerifier = Depends(get_identity_verifier),
) -> CallerIdentity | None:
    if credentials is None:
        return None
    return verifier.verify(credentials.credentials)


async def _read_payload(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except (UnicodeDecodeError, ValueError):
        logger.warning("[soap_note] request body is not valid JSON")
        return {}
    return payload if isinstance(payload, dict) else {}


@app.get("/api/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        ok=True,
        provider=GeminiProvider.name,
        model=settings.GEMINI_MODEL,
        credential_configured=settings.has_gemini_creds(),
    )


@app.post(
    "/api/soap-note",
    response_model=SoapNoteResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": SoapNoteRequest.model_json_schema()}},
        }
    },
)
async def create_soap_note(
    request: Request,
    caller: CallerIdentity | None = Depends(resolve_caller),
    invoker: NoteInvoker = Depends(get_note_invoker),
):
    payload = await _read_payload(request)
    outcome = await generate_soap_note(payload, caller, invoker)
    if not outcome.ok:
        return _error_response(outcome.error)
    return outcome.unwrap().model_dump(by_alias=True)

from __future__ import annotations

from typing import Any, Mapping, Protocol

from pharmnote.config.logger import get_logger, log_stage
from pharmnote.core.envelope import StageResult
from pharmnote.core.errors import InternalError
from pharmnote.core.models import CallerIdentity, ComposedPrompt, ModelResponse, SoapNoteResult
from pharmnote.pipeline.composer import compose_prompt
from pharmnote.pipeline.extractor import extract_result
from pharmnote.pipeline.guard import validate_request

logger = get_logger(__name__)


class NoteInvoker(Protocol):
    async def invoke(self, prompt: ComposedPrompt) -> StageResult[ModelResponse]:
        ...


def _failed(stage: str, outcome: StageResult[Any], uid: str | None) -> StageResult[SoapNoteResult]:
    error = outcome.unwrap_error()
    log_stage(logger, "soap_note", "stopped", at=stage, kind=error.kind.value, uid=uid)
    return StageResult.failure(error)


async def generate_soap_note(
    payload: Mapping[str, Any] | None,
    caller: CallerIdentity | None,
    invoker: NoteInvoker,
) -> StageResult[SoapNoteResult]:
    """Run guard, composer, invoker and extractor once, in that order.

    Always returns a complete result or exactly one typed error.
    """
    uid = caller.uid if caller else None
    try:
        guarded = validate_request(payload, caller)
        if not guarded.ok:
            return _failed("guard", guarded, uid)

        prompt = compose_prompt(guarded.unwrap())
        log_stage(logger, "soap_note", "composed", user_message_len=len(prompt.user_message), uid=uid)

        invoked = await invoker.invoke(prompt)
        if not invoked.ok:
            return _failed("invoker", invoked, uid)

        extracted = extract_result(invoked.unwrap())
        if not extracted.ok:
            return _failed("extractor", extracted, uid)
    except Exception as exc:
        logger.exception("[soap_note] unexpected failure uid=%s", uid)
        return StageResult.failure(InternalError.from_exception(exc))

    result = extracted.unwrap()
    log_stage(logger, "soap_note", "done", uid=uid, sources=[s.uri for s in result.sources])
    return extracted

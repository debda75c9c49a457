"""Single grounded call to the generative model."""

from __future__ import annotations

from typing import Any, Mapping

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from pharmnote.config.logger import get_logger, log_stage
from pharmnote.core.envelope import StageResult
from pharmnote.core.errors import InternalError
from pharmnote.core.models import ComposedPrompt, GroundingAttribution, ModelResponse
from pharmnote.llm.model_factory import GeminiProvider, ModelFactory, get_model_factory

logger = get_logger(__name__)

# snake_case from langchain-google-genai; camelCase kept for raw REST dicts.
_METADATA_KEYS = ("grounding_metadata", "groundingMetadata")
_CHUNK_KEYS = (
    "grounding_chunks",
    "groundingChunks",
    "grounding_attributions",
    "groundingAttributions",
)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, Mapping):
        return value
    dump = getattr(value, "model_dump", None)
    if callable(dump):
        return dump()
    return {}


def _text_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, Mapping) and part.get("type") == "text":
                parts.append(str(part.get("text") or ""))
        return "".join(parts)
    raise TypeError(f"Unexpected message content type: {type(content).__name__}")


def grounding_attributions(response_metadata: Mapping[str, Any] | None) -> list[GroundingAttribution] | None:
    """Read web citations from a chat message's response metadata.

    Returns None when the response carried no grounding metadata at all.
    """
    metadata = response_metadata or {}
    grounding = next((metadata[k] for k in _METADATA_KEYS if metadata.get(k)), None)
    if grounding is None:
        return None

    grounding = _as_mapping(grounding)
    chunks = next((grounding[k] for k in _CHUNK_KEYS if grounding.get(k)), None) or []

    attributions: list[GroundingAttribution] = []
    for chunk in chunks:
        web = _as_mapping(_as_mapping(chunk).get("web"))
        attributions.append(
            GroundingAttribution(
                uri=_text_or_none(web.get("uri")),
                title=_text_or_none(web.get("title")),
            )
        )
    return attributions


def to_model_response(message: BaseMessage) -> ModelResponse:
    text = message_text(message.content)
    metadata = getattr(message, "response_metadata", None) or {}
    if not text.strip():
        reason = metadata.get("finish_reason") or "unknown"
        raise ValueError(f"Model returned an empty response (finish_reason={reason})")
    return ModelResponse(text=text, grounding_attributions=grounding_attributions(metadata))


class GroundedNoteInvoker:
    """Sends a composed prompt to the model with search grounding enabled.

    The credential and model id are fixed at construction; the underlying chat
    model is built on first use and reused for every later call.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str,
        temperature: float | None = None,
        factory: ModelFactory | None = None,
    ):
        self.model_name = model_name
        self.temperature = temperature
        self._api_key = api_key
        self._factory = factory or get_model_factory()
        self._chat_model: Any = None

    def _get_chat_model(self) -> Any:
        if self._chat_model is None:
            self._chat_model = self._factory.create_grounded_chat_model(
                provider_name=GeminiProvider.name,
                model=self.model_name,
                api_key=self._api_key,
                temperature=self.temperature,
            )
        return self._chat_model

    async def invoke(self, prompt: ComposedPrompt) -> StageResult[ModelResponse]:
        messages = [
            SystemMessage(content=prompt.system_instruction),
            HumanMessage(content=prompt.user_message),
        ]
        try:
            chat_model = self._get_chat_model()
            log_stage(logger, "invoker", "call begin", model=self.model_name)
            message = await chat_model.ainvoke(messages)
            response = to_model_response(message)
        except Exception as exc:
            logger.exception("[invoker] model call failed model=%s", self.model_name)
            return StageResult.failure(InternalError.from_exception(exc))

        log_stage(
            logger,
            "invoker",
            "call end",
            model=self.model_name,
            text_len=len(response.text),
            attributions=len(response.grounding_attributions or []),
        )
        return StageResult.success(response)

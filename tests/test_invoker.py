"""Tests for the grounded model invoker and model factory."""

import asyncio
import sys
from pathlib import Path

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

sys.path.insert(0, str(Path(__file__).parent.parent))

from pharmnote.core.errors import ErrorKind
from pharmnote.core.models import ComposedPrompt
from pharmnote.llm.invoker import GroundedNoteInvoker, grounding_attributions, message_text
from pharmnote.llm.model_factory import GOOGLE_SEARCH_TOOL, ModelFactory

PROMPT = ComposedPrompt(system_instruction="SYSTEM", user_message="USER")


class FakeChatModel:
    def __init__(self, reply=None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[list] = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeFactory:
    def __init__(self, chat_model: FakeChatModel):
        self.chat_model = chat_model
        self.created: list[dict] = []

    def create_grounded_chat_model(self, **kwargs):
        self.created.append(kwargs)
        return self.chat_model


def _invoker(chat_model: FakeChatModel) -> tuple[GroundedNoteInvoker, FakeFactory]:
    factory = FakeFactory(chat_model)
    invoker = GroundedNoteInvoker(
        api_key="test-key",
        model_name="gemini-test",
        factory=factory,
    )
    return invoker, factory


def test_sends_system_then_user_message() -> None:
    chat_model = FakeChatModel(reply=AIMessage(content="S: note"))
    invoker, factory = _invoker(chat_model)

    outcome = asyncio.run(invoker.invoke(PROMPT))

    assert outcome.ok
    assert outcome.unwrap().text == "S: note"
    messages = chat_model.calls[0]
    assert len(messages) == 2
    assert isinstance(messages[0], SystemMessage)
    assert messages[0].content == "SYSTEM"
    assert isinstance(messages[1], HumanMessage)
    assert messages[1].content == "USER"
    assert factory.created == [
        {
            "provider_name": "gemini",
            "model": "gemini-test",
            "api_key": "test-key",
            "temperature": None,
        }
    ]


def test_chat_model_is_built_once() -> None:
    chat_model = FakeChatModel(reply=AIMessage(content="S: note"))
    invoker, factory = _invoker(chat_model)

    asyncio.run(invoker.invoke(PROMPT))
    asyncio.run(invoker.invoke(PROMPT))

    assert len(factory.created) == 1
    assert len(chat_model.calls) == 2


def test_grounding_chunks_become_attributions() -> None:
    reply = AIMessage(
        content="S: note",
        response_metadata={
            "grounding_metadata": {
                "web_search_queries": ["latest ADA standards of care"],
                "grounding_chunks": [
                    {"web": {"uri": "https://ada.example", "title": "diabetesjournals.org"}},
                    {"web": {"uri": "https://no-title.example"}},
                    {"retrieved_context": {"uri": "gs://bucket/doc"}},
                ],
            }
        },
    )
    invoker, _ = _invoker(FakeChatModel(reply=reply))

    response = asyncio.run(invoker.invoke(PROMPT)).unwrap()

    assert [(a.uri, a.title) for a in response.grounding_attributions] == [
        ("https://ada.example", "diabetesjournals.org"),
        ("https://no-title.example", None),
        (None, None),
    ]


def test_legacy_attribution_shape_is_read() -> None:
    attributions = grounding_attributions(
        {"groundingMetadata": {"groundingAttributions": [{"web": {"uri": "u", "title": "t"}}]}}
    )
    assert [(a.uri, a.title) for a in attributions] == [("u", "t")]


def test_no_grounding_metadata_gives_none() -> None:
    assert grounding_attributions({}) is None
    assert grounding_attributions(None) is None
    assert grounding_attributions({"grounding_metadata": {"web_search_queries": ["q"]}}) == []


def test_list_content_is_joined() -> None:
    content = [
        {"type": "text", "text": "S: part one. "},
        {"type": "image_url", "image_url": "ignored"},
        "P: part two.",
    ]
    assert message_text(content) == "S: part one. P: part two."


def test_remote_failure_becomes_internal_with_detail() -> None:
    invoker, _ = _invoker(FakeChatModel(error=RuntimeError("429 quota exceeded")))

    outcome = asyncio.run(invoker.invoke(PROMPT))

    assert not outcome.ok
    assert outcome.error.kind is ErrorKind.INTERNAL
    assert "429 quota exceeded" in outcome.error.message
    assert isinstance(outcome.error.cause, RuntimeError)


def test_empty_reply_becomes_internal() -> None:
    reply = AIMessage(content="", response_metadata={"finish_reason": "SAFETY"})
    invoker, _ = _invoker(FakeChatModel(reply=reply))

    outcome = asyncio.run(invoker.invoke(PROMPT))

    assert not outcome.ok
    assert outcome.error.kind is ErrorKind.INTERNAL
    assert "SAFETY" in outcome.error.message


def test_missing_credential_becomes_internal() -> None:
    invoker = GroundedNoteInvoker(api_key="", model_name="gemini-test", factory=ModelFactory())

    outcome = asyncio.run(invoker.invoke(PROMPT))

    assert not outcome.ok
    assert outcome.error.kind is ErrorKind.INTERNAL
    assert "No credential configured" in outcome.error.message


class TestModelFactory:
    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown provider"):
            ModelFactory().create_chat_model("openai", "gpt", "key")

    def test_gemini_model_is_bound_to_search(self, monkeypatch: pytest.MonkeyPatch) -> None:
        genai = pytest.importorskip("langchain_google_genai")
        created: dict = {}

        class FakeGemini:
            def __init__(self, **kwargs):
                created.update(kwargs)
                self.bound = None

            def bind_tools(self, tools):
                self.bound = tools
                return self

        monkeypatch.setattr(genai, "ChatGoogleGenerativeAI", FakeGemini)

        model = ModelFactory().create_grounded_chat_model("gemini", "gemini-test", "key", 0.2)

        assert created == {
            "model": "gemini-test",
            "google_api_key": "key",
            "max_retries": 1,
            "temperature": 0.2,
        }
        assert model.bound == [GOOGLE_SEARCH_TOOL]

from abc import ABC, abstractmethod
from typing import Any

from pharmnote.config.logger import get_logger

_logger = get_logger(__name__)

# Server-side Google Search grounding; the model decides when to search.
GOOGLE_SEARCH_TOOL: dict[str, Any] = {"google_search": {}}


class BaseModelProvider(ABC):
    """Abstract provider contract for chat model creation."""

    name: str = "base"

    @abstractmethod
    def is_available(self, api_key: str) -> bool:
        """Whether this provider can serve a model with the given credential."""

    @abstractmethod
    def create(self, model: str, api_key: str, temperature: float | None) -> Any:
        """Create provider-specific langchain chat model instance."""


class GeminiProvider(BaseModelProvider):
    name = "gemini"

    def is_available(self, api_key: str) -> bool:
        return bool((api_key or "").strip())

    def create(self, model: str, api_key: str, temperature: float | None) -> Any:
        from langchain_google_genai import ChatGoogleGenerativeAI

        kwargs: dict[str, Any] = {
            "model": model,
            "google_api_key": api_key,
            "max_retries": 1,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        return ChatGoogleGenerativeAI(**kwargs)


class ModelFactory:
    """Provider registry."""

    def __init__(self) -> None:
        self.providers: dict[str, BaseModelProvider] = {
            GeminiProvider.name: GeminiProvider(),
        }

    def _resolve_provider(self, provider_name: str) -> BaseModelProvider:
        name = (provider_name or "").strip().lower()
        provider = self.providers.get(name)
        if provider is None:
            raise ValueError(f"Unknown provider: {name}")
        return provider

    def create_chat_model(
        self,
        provider_name: str,
        model: str,
        api_key: str,
        temperature: float | None = None,
    ) -> Any:
        provider = self._resolve_provider(provider_name)
        if not provider.is_available(api_key):
            raise RuntimeError(f"No credential configured for provider '{provider.name}'")
        _logger.info("[model_factory] create provider=%s model=%s", provider.name, model)
        return provider.create(model=model, api_key=api_key, temperature=temperature)

    def create_grounded_chat_model(
        self,
        provider_name: str,
        model: str,
        api_key: str,
        temperature: float | None = None,
    ) -> Any:
        """Chat model with web-search grounding bound to every call."""
        chat_model = self.create_chat_model(provider_name, model, api_key, temperature)
        return chat_model.bind_tools([GOOGLE_SEARCH_TOOL])


_FACTORY = ModelFactory()


def get_model_factory() -> ModelFactory:
    return _FACTORY

"""LLM module."""

from pharmnote.llm.invoker import GroundedNoteInvoker
from pharmnote.llm.model_factory import GOOGLE_SEARCH_TOOL, ModelFactory, get_model_factory

__all__ = ["GroundedNoteInvoker", "GOOGLE_SEARCH_TOOL", "ModelFactory", "get_model_factory"]

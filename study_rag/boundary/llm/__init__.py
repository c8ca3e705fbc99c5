"""Generative model boundary."""

from study_rag.boundary.llm.generative_model import (
    GenerativeModel,
    LangChainGenerativeModel,
    classify_provider_error,
)

__all__ = ["GenerativeModel", "LangChainGenerativeModel", "classify_provider_error"]

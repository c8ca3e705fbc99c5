"""
Answer generation: routing, prompt budgeting and the review quality gate.
"""

from study_rag.core.agentic_system.answer.answer_generator import AnswerGenerator
from study_rag.core.agentic_system.answer.answer_schema import AnswerState, GeneratedAnswer
from study_rag.core.agentic_system.answer.model_router import ModelRouter
from study_rag.core.agentic_system.answer.token_budget import TokenBudget, estimate_tokens

__all__ = [
    "AnswerGenerator",
    "AnswerState",
    "GeneratedAnswer",
    "ModelRouter",
    "TokenBudget",
    "estimate_tokens",
]

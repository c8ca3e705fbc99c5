"""
Answer generation schemas.

Quality-gate states and the structured result returned by the answer
generator, including the trail of state transitions it went through.

Dependencies: pydantic
System role: Answer generator response schema definitions
"""

from enum import Enum

from pydantic import BaseModel, Field

from study_rag.evaluation.models.review_models import ReviewVerdict
from study_rag.models.generation import ModelProfile


class AnswerState(str, Enum):
    """Quality-gate states."""

    DRAFTING = "drafting"
    REVIEWING = "reviewing"
    ACCEPTED = "accepted"
    EXHAUSTED = "exhausted"
    EMPTY = "empty"
    NO_CONTEXT = "no_context"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({
    AnswerState.ACCEPTED,
    AnswerState.EXHAUSTED,
    AnswerState.EMPTY,
    AnswerState.NO_CONTEXT,
})


class GeneratedAnswer(BaseModel):
    """Structured result of one answer generation."""

    answer: str = Field(description="Final answer text, never empty")
    state: AnswerState = Field(description="Terminal quality-gate state")
    attempts: int = Field(default=0, ge=0, description="Drafts requested from the model")
    review: ReviewVerdict | None = Field(default=None, description="Last review verdict")
    profile: ModelProfile | None = Field(default=None, description="Profile of the last draft")
    has_context: bool = Field(default=False, description="Whether retrieved context was used")
    sources: list[str] = Field(default_factory=list, description="Titles of the sources used")
    transitions: list[AnswerState] = Field(
        default_factory=list,
        description="States visited, in order",
    )

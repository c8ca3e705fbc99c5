"""
Generation configuration settings.

Model profiles used by the router, quality-gate limits and the auxiliary
profiles for review and re-ranking calls.

Dependencies: pydantic, pydantic_settings
System role: Generative model configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from study_rag.configs.base import BaseSettings
from study_rag.models.generation import ModelProfile


def _default_profiles() -> dict[str, ModelProfile]:
    return {
        "default": ModelProfile(
            name="default",
            model="gemini-2.5-flash-lite",
            temperature=0.7,
            max_tokens=1000,
            top_p=0.9,
            token_limit=15000,
        ),
        "technical": ModelProfile(
            name="technical",
            model="gemini-2.5-flash",
            temperature=0.3,
            max_tokens=1200,
            top_p=0.8,
            token_limit=6000,
        ),
        "detailed": ModelProfile(
            name="detailed",
            model="gemini-2.5-pro",
            temperature=0.4,
            max_tokens=1500,
            top_p=0.85,
            token_limit=8000,
        ),
        "complex": ModelProfile(
            name="complex",
            model="gemini-2.5-pro",
            temperature=0.5,
            max_tokens=1200,
            top_p=0.9,
            token_limit=8000,
        ),
    }


class GenerationSettings(BaseSettings):
    """Answer generation and quality gate configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GENERATION_",
        case_sensitive=False,
        extra="ignore",
    )

    profiles: dict[str, ModelProfile] = Field(
        default_factory=_default_profiles,
        description="Routing label -> model profile",
    )
    review_profile: ModelProfile = Field(
        default_factory=lambda: ModelProfile(
            name="review",
            model="gemini-2.5-flash",
            temperature=0.0,
            max_tokens=800,
            top_p=1.0,
        ),
        description="Profile used to grade draft answers",
    )
    rerank_profile: ModelProfile = Field(
        default_factory=lambda: ModelProfile(
            name="rerank",
            model="gemini-2.5-flash-lite",
            temperature=0.0,
            max_tokens=200,
            top_p=1.0,
        ),
        description="Profile used to reorder retrieved candidates",
    )

    max_attempts: int = Field(default=3, ge=1, description="Drafts before the gate gives up")
    max_context_length: int = Field(
        default=4000,
        description="Characters of retrieved context placed in the prompt",
    )
    temperature_step: float = Field(
        default=0.2,
        ge=0.0,
        description="Temperature reduction applied on every retry",
    )
    token_growth: float = Field(
        default=1.5,
        gt=1.0,
        description="Multiplier applied to max_tokens on every retry",
    )
    review_fail_open: bool = Field(
        default=True,
        description="Treat unparseable reviews as a pass",
    )
    long_question_chars: int = Field(
        default=200,
        description="Questions longer than this route to the detailed profile",
    )
    rerank_preview_chars: int = Field(default=300, description="Candidate preview length")

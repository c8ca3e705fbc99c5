"""
Structured extraction configuration settings.

Per-field sub-queries, retrieval thresholds and model parameters for the
exam-notice extractor.

Dependencies: pydantic, pydantic_settings
System role: Structured extraction configuration
"""

from pydantic import BaseModel, Field
from pydantic_settings import SettingsConfigDict

from study_rag.configs.base import BaseSettings


class FieldQueryPlan(BaseModel):
    """Retrieval and generation plan for one extracted field."""

    sub_queries: list[str]
    top_k: int = Field(default=15, ge=1)
    min_similarity: float = Field(default=0.2, ge=-1.0, le=1.0)
    temperature: float = Field(default=0.05, ge=0.0)
    max_tokens: int = Field(default=2000, ge=1)


def _roles_plan() -> FieldQueryPlan:
    return FieldQueryPlan(
        sub_queries=[
            "cargo vaga requisitos formação",
            "atribuições função descrição cargo",
            "salário remuneração benefícios",
            "carga horária trabalho",
            "número vagas disponíveis",
        ],
        top_k=15,
        min_similarity=0.2,
        temperature=0.05,
        max_tokens=2000,
    )


def _syllabus_plan() -> FieldQueryPlan:
    return FieldQueryPlan(
        sub_queries=[
            "conteúdo programático disciplinas",
            "matérias assuntos programa",
            "conhecimentos específicos gerais",
            "bibliografia livros referências",
            "temas tópicos estudar",
        ],
        top_k=12,
        min_similarity=0.25,
        temperature=0.1,
        max_tokens=3000,
    )


class ExtractionSettings(BaseSettings):
    """Exam-notice extraction configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EXTRACTION_",
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(default="gemini-2.5-flash", description="Model used for JSON extraction")
    provider: str = Field(default="google_genai", description="LangChain provider key")
    max_context_length: int = Field(
        default=8000,
        description="Characters of merged context sent per field",
    )
    final_top_k: int = Field(
        default=10,
        description="Candidates kept per field after merging sub-queries",
    )
    max_heuristic_roles: int = Field(
        default=5,
        description="Cap on roles recovered by regex analysis of raw text",
    )

    roles: FieldQueryPlan = Field(default_factory=_roles_plan)
    syllabus: FieldQueryPlan = Field(default_factory=_syllabus_plan)

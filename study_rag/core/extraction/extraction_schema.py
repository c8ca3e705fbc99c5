"""
Structured extraction schemas.

Records extracted from exam notices (roles and syllabus subjects) and the
combined result persisted as a document's structured payload. Field names
follow the payload contract consumed by the study planner (Portuguese keys,
camelCase aliases where the payload uses them).

Dependencies: pydantic
System role: Extraction result schema definitions
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

NOT_INFORMED = "Não informado"

ROLES_FIELD = "cargos"
SYLLABUS_FIELD = "conteudoProgramatico"


def _informed(value: Any) -> str:
    """Coerce a model-provided scalar to text, marking absent values."""
    if value is None:
        return NOT_INFORMED
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(item).strip() for item in value if str(item).strip())
    text = str(value).strip()
    return text or NOT_INFORMED


class RoleRecord(BaseModel):
    """One role (cargo) offered by an exam notice."""

    model_config = ConfigDict(populate_by_name=True)

    nome: str = Field(min_length=1, description="Role name as written in the notice")
    requisitos: str = Field(default=NOT_INFORMED, description="Education and experience requirements")
    atribuicoes: str = Field(default=NOT_INFORMED, description="Main duties")
    salario: str = Field(default=NOT_INFORMED, description="Salary or remuneration")
    carga_horaria: str = Field(
        default=NOT_INFORMED,
        alias="cargaHoraria",
        description="Working hours",
    )
    vagas: str = Field(default=NOT_INFORMED, description="Number of openings")

    @field_validator("requisitos", "atribuicoes", "salario", "carga_horaria", "vagas", mode="before")
    @classmethod
    def _fill_missing(cls, value: Any) -> str:
        return _informed(value)


class SyllabusRecord(BaseModel):
    """One syllabus subject with its topics."""

    disciplina: str = Field(min_length=1, description="Subject name")
    topicos: list[str] = Field(default_factory=list, description="Topics in document order")
    detalhamento: str = Field(default=NOT_INFORMED, description="Extra detail when present")

    @field_validator("topicos", mode="before")
    @classmethod
    def _topics_as_list(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        return [str(item).strip() for item in value if str(item).strip()]

    @field_validator("detalhamento", mode="before")
    @classmethod
    def _fill_missing(cls, value: Any) -> str:
        return _informed(value)


class ExtractionResult(BaseModel):
    """Roles and syllabus extracted from one document."""

    roles: list[RoleRecord] = Field(default_factory=list)
    syllabus: list[SyllabusRecord] = Field(default_factory=list)
    raw_model_responses: dict[str, str] = Field(
        default_factory=dict,
        description="Model reply per field, kept for auditing",
    )
    flags: list[str] = Field(
        default_factory=list,
        description="Conditions met during extraction (no_context:<field>, unparsed:<field>, ...)",
    )

    @property
    def has_single_role(self) -> bool:
        return len(self.roles) == 1

    @property
    def has_multiple_roles(self) -> bool:
        return len(self.roles) > 1

    def to_payload(self) -> dict[str, Any]:
        """Structured payload stored on the document record."""
        return {
            ROLES_FIELD: [role.model_dump(by_alias=True) for role in self.roles],
            SYLLABUS_FIELD: [subject.model_dump() for subject in self.syllabus],
            "hasMultipleCargos": self.has_multiple_roles,
            "rawResponses": dict(self.raw_model_responses),
            "flags": list(self.flags),
        }

"""
Context assembly for answer prompts.

Greedy, rank-ordered fill of retrieved candidates into a character budget.
Each candidate becomes one labelled section; filling stops before the
budget would be exceeded. A first candidate that alone exceeds the budget is
truncated rather than dropped, so candidates never yield an empty context.

Dependencies: pydantic
System role: Length-bounded prompt context builder
"""

from pydantic import BaseModel, Field

from study_rag.models.retrieval import RetrievalCandidate

SECTION_SEPARATOR = "\n\n---\n\n"
UNTITLED = "Documento"


class AssembledContext(BaseModel):
    """Context text plus the candidates that made it in."""

    sections: list[str] = Field(default_factory=list, description="Rendered sections, best first")
    used: list[RetrievalCandidate] = Field(default_factory=list)
    dropped: int = Field(default=0, description="Candidates left out by the budget")

    @property
    def text(self) -> str:
        return SECTION_SEPARATOR.join(self.sections)

    @property
    def sources(self) -> list[str]:
        """Distinct titles of the used candidates, in rank order."""
        titles: list[str] = []
        for candidate in self.used:
            title = candidate.title or UNTITLED
            if title not in titles:
                titles.append(title)
        return titles

    @property
    def is_empty(self) -> bool:
        return not self.sections


def render_section(candidate: RetrievalCandidate) -> str:
    return f"[Fonte: {candidate.title or UNTITLED}]\n{candidate.content}"


class ContextAssembler:
    """Build bounded context from ranked candidates."""

    def __init__(self, max_context_length: int = 4000) -> None:
        self.max_context_length = max_context_length

    def assemble(self, candidates: list[RetrievalCandidate]) -> AssembledContext:
        """
        Fill the budget with the highest-ranked candidates.

        Args:
            candidates: Candidates, best first

        Returns:
            AssembledContext: Sections that fit within max_context_length
        """
        sections: list[str] = []
        used: list[RetrievalCandidate] = []
        length = 0

        for candidate in candidates:
            section = render_section(candidate)
            added = len(section) + (len(SECTION_SEPARATOR) if sections else 0)

            if length + added > self.max_context_length:
                if not sections:
                    sections.append(section[: self.max_context_length])
                    used.append(candidate)
                break

            sections.append(section)
            used.append(candidate)
            length += added

        return AssembledContext(
            sections=sections,
            used=used,
            dropped=len(candidates) - len(used),
        )

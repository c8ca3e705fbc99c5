"""
Answer review verdict model.

Data class for the five-dimension pass/fail rubric applied to draft answers.
"""

from dataclasses import dataclass, field

RUBRIC_DIMENSIONS = (
    "completeness",
    "coherence",
    "didactic_clarity",
    "structure",
    "depth",
)


@dataclass
class ReviewVerdict:
    """Review rubric result.

    Attributes:
        completeness: Answer covers what the question asks
        coherence: Answer is consistent and grounded in the context
        didactic_clarity: Answer explains in a way a student can follow
        structure: Answer is organized (headings, lists, ordering)
        depth: Answer goes beyond a superficial restatement
        issues: Concrete problems to fix on the next draft
        parsed: False when the verdict is an automatic pass
    """

    completeness: bool = True
    coherence: bool = True
    didactic_clarity: bool = True
    structure: bool = True
    depth: bool = True
    issues: list[str] = field(default_factory=list)
    parsed: bool = True

    @property
    def passed(self) -> bool:
        """All rubric dimensions satisfied."""
        return all(getattr(self, name) for name in RUBRIC_DIMENSIONS)

    @property
    def failed_dimensions(self) -> list[str]:
        return [name for name in RUBRIC_DIMENSIONS if not getattr(self, name)]

    @classmethod
    def automatic_pass(cls) -> "ReviewVerdict":
        """Verdict used when the review could not be obtained or parsed."""
        return cls(parsed=False)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            **{name: getattr(self, name) for name in RUBRIC_DIMENSIONS},
            "issues": list(self.issues),
            "passed": self.passed,
            "parsed": self.parsed,
        }

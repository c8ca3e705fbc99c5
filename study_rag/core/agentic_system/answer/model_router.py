"""
Model routing.

Chooses a ModelProfile for a question: table and comparison questions (or
long ones) go to the detailed profile, programming questions to the
technical profile, in-depth requests or large contexts to the complex
profile, everything else to the default profile. The token valve asks the
router for the most token-generous profile when trimming is not enough.

Dependencies: study_rag.models.generation
System role: Per-question model selection
"""

import logging

from study_rag.models.generation import ModelProfile

logger = logging.getLogger(__name__)

TABLE_KEYWORDS = (
    "tabela", "table", "comparar", "compare", "análise", "analysis",
    "classificar", "classify", "organizar", "organize", "estruturar",
    "listar detalhadamente", "diferenças entre", "semelhanças",
    "quadro", "matriz", "planilha", "dados organizados",
)
TECHNICAL_KEYWORDS = (
    "código", "code", "programar", "programming", "algoritmo", "algorithm",
    "função", "function", "javascript", "python", "sql", "html", "css",
    "api", "debug", "erro técnico", "implementar", "desenvolvimento",
)
COMPLEX_KEYWORDS = (
    "explique detalhadamente", "análise profunda", "compare detalhadamente",
    "dissertação", "ensaio", "redação", "argumentação", "fundamentação teórica",
)


class ModelRouter:
    """Keyword and size based profile selection."""

    def __init__(
        self,
        profiles: dict[str, ModelProfile],
        long_question_chars: int = 200,
        complex_context_chars: int = 500,
    ) -> None:
        """
        Initialize router.

        Args:
            profiles: Routing label -> profile; must contain "default"
            long_question_chars: Questions longer than this use "detailed"
            complex_context_chars: Context longer than this uses "complex"

        Raises:
            ValueError: When no default profile is configured
        """
        if "default" not in profiles:
            raise ValueError("profiles must include a 'default' entry")
        self._profiles = profiles
        self._long_question_chars = long_question_chars
        self._complex_context_chars = complex_context_chars

    def _get(self, name: str) -> ModelProfile:
        return self._profiles.get(name, self._profiles["default"])

    def select(self, question: str, context_chars: int = 0) -> ModelProfile:
        """
        Pick the profile for a question.

        Args:
            question: User question
            context_chars: Size of the knowledge context that will be sent

        Returns:
            ModelProfile: Selected profile
        """
        lowered = question.lower()

        if any(k in lowered for k in TABLE_KEYWORDS) or len(question) > self._long_question_chars:
            profile = self._get("detailed")
        elif any(k in lowered for k in TECHNICAL_KEYWORDS):
            profile = self._get("technical")
        elif any(k in lowered for k in COMPLEX_KEYWORDS) or context_chars > self._complex_context_chars:
            profile = self._get("complex")
        else:
            profile = self._get("default")

        logger.info(f"{__name__}:select - Routed to '{profile.name}' ({profile.model})")
        return profile

    def most_generous(self) -> ModelProfile:
        """Profile with the largest prompt token limit."""
        return max(self._profiles.values(), key=lambda profile: profile.token_limit)

"""
LLM reviewer for draft study answers.

Uses a generative model to grade a draft on five pass/fail dimensions:
- Completeness: Does the answer cover what was asked?
- Coherence: Is it consistent and grounded in the context?
- Didactic clarity: Can a student follow the explanation?
- Structure: Is it organized?
- Depth: Does it go beyond restating the context?

The review fails open: a model error or an unparseable reply counts as a
pass so a broken reviewer never blocks an answer.
"""

import json
import logging

from langchain_core.messages import HumanMessage

from study_rag.boundary.llm.generative_model import GenerativeModel
from study_rag.core.exceptions import GenerationError
from study_rag.evaluation.models.review_models import RUBRIC_DIMENSIONS, ReviewVerdict
from study_rag.models.generation import ModelProfile
from study_rag.observability.log_utils import preview

logger = logging.getLogger(__name__)


class AnswerReviewer:
    """LLM reviewer for the answer quality gate.

    Usage:
        reviewer = AnswerReviewer(model, settings.generation.review_profile)
        verdict = await reviewer.review(
            question="O que é controle de constitucionalidade?",
            answer="Controle de constitucionalidade é...",
            context="[Fonte: Apostila]...",
        )
    """

    def __init__(
        self,
        model: GenerativeModel,
        profile: ModelProfile,
        fail_open: bool = True,
    ):
        """Initialize reviewer."""
        self._model = model
        self._profile = profile
        self._fail_open = fail_open
        logger.info(f"Initialized answer reviewer with {profile.model}")

    async def review(self, question: str, answer: str, context: str) -> ReviewVerdict:
        """Grade a draft answer.

        Args:
            question: Original user question
            answer: Draft answer
            context: Context the draft was grounded on

        Returns:
            ReviewVerdict with the rubric flags and issues
        """
        prompt = self._build_review_prompt(question=question, answer=answer, context=context)
        try:
            reply = await self._model.complete([HumanMessage(content=prompt)], self._profile)
        except GenerationError as e:
            logger.warning(f"Answer review failed ({e.kind}): {e}")
            return self._unusable_review()

        verdict = self._parse_response(reply)
        if verdict is None:
            return self._unusable_review()

        logger.info(f"Answer review: {verdict.to_dict()}")
        return verdict

    def _unusable_review(self) -> ReviewVerdict:
        if self._fail_open:
            return ReviewVerdict.automatic_pass()
        return ReviewVerdict(
            **{name: False for name in RUBRIC_DIMENSIONS},
            issues=["Revisão indisponível"],
            parsed=False,
        )

    def _build_review_prompt(self, question: str, answer: str, context: str) -> str:
        """Build review prompt for the reviewer model."""
        return f"""Você é um revisor pedagógico avaliando a resposta de um assistente de estudos.

PERGUNTA:
{question}

CONTEXTO DISPONÍVEL:
{context}

RESPOSTA A AVALIAR:
{answer}

---

Avalie a resposta nestes critérios (true ou false):

1. COMPLETENESS: A resposta cobre tudo o que a pergunta pede?
2. COHERENCE: A resposta é consistente e fiel ao contexto?
3. DIDACTIC_CLARITY: Um estudante consegue acompanhar a explicação?
4. STRUCTURE: A resposta é organizada (títulos, listas, ordem lógica)?
5. DEPTH: A resposta vai além de repetir o contexto superficialmente?

Liste em "issues" cada problema concreto a corrigir (lista vazia se não houver).

---

Responda APENAS em JSON (sem markdown, sem texto extra):
{{
    "completeness": <true|false>,
    "coherence": <true|false>,
    "didactic_clarity": <true|false>,
    "structure": <true|false>,
    "depth": <true|false>,
    "issues": ["<problema>"]
}}"""

    def _parse_response(self, response_text: str) -> ReviewVerdict | None:
        """Parse reviewer JSON.

        Handles markdown code blocks around the JSON. Returns None when the
        reply is not a usable verdict.
        """
        try:
            text = response_text
            if "```json" in text:
                text = text.split("```json")[1].split("```")[0]
            elif "```" in text:
                text = text.split("```")[1].split("```")[0]

            data = json.loads(text.strip())
            if not isinstance(data, dict):
                raise ValueError("review is not a JSON object")

            flags = {}
            for name in RUBRIC_DIMENSIONS:
                value = data[name]
                if not isinstance(value, bool):
                    raise ValueError(f"{name} is not a boolean")
                flags[name] = value

            issues = data.get("issues") or []
            if not isinstance(issues, list):
                issues = [str(issues)]

            return ReviewVerdict(
                **flags,
                issues=[str(issue).strip() for issue in issues if str(issue).strip()],
            )

        except (json.JSONDecodeError, ValueError, KeyError, IndexError) as e:
            logger.warning(f"Failed to parse answer review: {e}")
            logger.debug(f"Raw response: {preview(response_text, 300)}")
            return None

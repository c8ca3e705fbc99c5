"""
Answer generator with a review quality gate.

Drafts a grounded answer from ranked candidates, has it reviewed against a
five-dimension rubric and redrafts with the reviewer's issues until the
draft is accepted or the attempt budget runs out.

States: DRAFTING -> REVIEWING -> ACCEPTED | DRAFTING (retry) | EXHAUSTED,
plus the short-circuits NO_CONTEXT (no candidates, no model call) and EMPTY
(the first draft came back empty).

Dependencies: study_rag.boundary.llm, study_rag.evaluation
System role: Answer generation and quality gate
"""

import logging

from study_rag.boundary.llm.generative_model import GenerativeModel
from study_rag.core.agentic_system.answer.answer_prompt import (
    EMPTY_REPLY_APOLOGY,
    NO_CONTEXT_ANSWER,
)
from study_rag.core.agentic_system.answer.answer_schema import AnswerState, GeneratedAnswer
from study_rag.core.agentic_system.answer.model_router import ModelRouter
from study_rag.core.agentic_system.answer.token_budget import TokenBudget
from study_rag.core.context_assembler import ContextAssembler
from study_rag.evaluation.evaluators.answer_reviewer import AnswerReviewer
from study_rag.evaluation.models.review_models import ReviewVerdict
from study_rag.models.retrieval import RetrievalCandidate
from study_rag.observability.log_utils import preview

logger = logging.getLogger(__name__)


class AnswerGenerator:
    """
    Grounded answer generation with review-driven retries.

    Each retry lowers the temperature, grows the completion budget and puts
    the reviewer's issues in the prompt. The generator never drafts more
    than max_attempts times and always returns a non-empty answer.
    """

    def __init__(
        self,
        model: GenerativeModel,
        router: ModelRouter,
        reviewer: AnswerReviewer,
        max_attempts: int = 3,
        max_context_length: int = 4000,
        temperature_step: float = 0.2,
        token_growth: float = 1.5,
    ) -> None:
        """
        Initialize answer generator.

        Args:
            model: Generative model for drafting
            router: Picks the profile for each question
            reviewer: Grades drafts
            max_attempts: Maximum number of drafts
            max_context_length: Character budget for retrieved context
            temperature_step: Temperature reduction per retry
            token_growth: max_tokens multiplier per retry
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._model = model
        self._router = router
        self._reviewer = reviewer
        self._assembler = ContextAssembler(max_context_length=max_context_length)
        self._budget = TokenBudget(router)
        self._max_attempts = max_attempts
        self._temperature_step = temperature_step
        self._token_growth = token_growth

    async def generate(
        self,
        question: str,
        candidates: list[RetrievalCandidate],
        supplementary_context: str | None = None,
    ) -> GeneratedAnswer:
        """
        Answer a question from ranked candidates.

        Args:
            question: User question
            candidates: Retrieved candidates, best first
            supplementary_context: Optional extra context (lowest priority)

        Returns:
            GeneratedAnswer: Final answer, terminal state and review trail

        Raises:
            GenerationError: If the drafting model call fails
        """
        transitions: list[AnswerState] = []

        if not candidates:
            logger.info(f"{__name__}:generate - No candidates, answering without model call")
            transitions.append(AnswerState.NO_CONTEXT)
            return GeneratedAnswer(
                answer=NO_CONTEXT_ANSWER,
                state=AnswerState.NO_CONTEXT,
                has_context=False,
                transitions=transitions,
            )

        context = self._assembler.assemble(candidates)
        profile = self._router.select(question, context_chars=len(context.text))
        logger.info(
            f"{__name__}:generate - Step 1: Routed to {profile.name}",
            extra={"sections": len(context.sections), "dropped": context.dropped},
        )

        issues: list[str] = []
        last_draft: str | None = None
        review: ReviewVerdict | None = None
        attempts = 0
        used_profile = profile

        while attempts < self._max_attempts:
            attempts += 1
            transitions.append(AnswerState.DRAFTING)

            prompt = self._budget.fit(
                question=question,
                sections=context.sections,
                profile=profile,
                supplementary=supplementary_context,
                issues=issues,
            )
            used_profile = prompt.profile
            draft = (await self._model.complete(prompt.messages, prompt.profile)).strip()
            logger.info(
                f"{__name__}:generate - Step 2: Draft {attempts}/{self._max_attempts} "
                f"on {prompt.profile.name} ({len(draft)} chars)"
            )

            if not draft:
                if last_draft is None:
                    transitions.append(AnswerState.EMPTY)
                    return GeneratedAnswer(
                        answer=EMPTY_REPLY_APOLOGY,
                        state=AnswerState.EMPTY,
                        attempts=attempts,
                        profile=used_profile,
                        has_context=True,
                        sources=context.sources,
                        transitions=transitions,
                    )
                logger.warning(f"{__name__}:generate - Empty redraft, keeping previous draft")
                break

            last_draft = draft
            transitions.append(AnswerState.REVIEWING)
            review = await self._reviewer.review(question, draft, context.text)

            if review.passed:
                transitions.append(AnswerState.ACCEPTED)
                logger.info(f"{__name__}:generate - Step 3: Accepted on attempt {attempts}")
                return GeneratedAnswer(
                    answer=draft,
                    state=AnswerState.ACCEPTED,
                    attempts=attempts,
                    review=review,
                    profile=used_profile,
                    has_context=True,
                    sources=context.sources,
                    transitions=transitions,
                )

            issues = review.issues or [
                f"Melhore o critério: {name}" for name in review.failed_dimensions
            ]
            logger.info(
                f"{__name__}:generate - Step 3: Review failed {review.failed_dimensions}",
                extra={"issues": [preview(issue, 80) for issue in issues]},
            )
            # Escalate the profile that drafted, which may be the budget switch target
            profile = prompt.profile.escalate(self._temperature_step, self._token_growth)

        transitions.append(AnswerState.EXHAUSTED)
        logger.warning(f"{__name__}:generate - Quality gate exhausted after {attempts} drafts")
        return GeneratedAnswer(
            answer=last_draft,
            state=AnswerState.EXHAUSTED,
            attempts=attempts,
            review=review,
            profile=used_profile,
            has_context=True,
            sources=context.sources,
            transitions=transitions,
        )

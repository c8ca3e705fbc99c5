"""
Prompt token budget valve.

Estimates prompt tokens from character length (about four characters per
token) and trims the prompt until it fits the routed profile's limit, in
this order: lowest-ranked context sections (the best one is kept), the
supplementary context, then the question itself. If the prompt still does
not fit, the most token-generous profile is used instead of failing.

Dependencies: study_rag.core.agentic_system.answer
System role: Prompt-size safety valve before every drafting call
"""

import logging
import math
from dataclasses import dataclass, field

from langchain_core.messages import BaseMessage

from study_rag.core.agentic_system.answer.answer_prompt import build_answer_messages
from study_rag.core.agentic_system.answer.model_router import ModelRouter
from study_rag.core.context_assembler import SECTION_SEPARATOR
from study_rag.models.generation import ModelProfile

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4
MIN_QUESTION_CHARS = 200
TRUNCATION_MARK = " [...]"


def estimate_tokens(text: str) -> int:
    """Approximate token count of text."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def estimate_message_tokens(messages: list[BaseMessage]) -> int:
    return sum(estimate_tokens(str(message.content)) for message in messages)


@dataclass
class BudgetedPrompt:
    """Prompt that fits (or was pushed to fit) a profile's token limit."""

    messages: list[BaseMessage]
    profile: ModelProfile
    estimated_tokens: int
    sections_used: int
    supplementary_dropped: bool = False
    question_truncated: bool = False
    switched_profile: bool = False
    actions: list[str] = field(default_factory=list)


class TokenBudget:
    """Trim prompt parts in priority order until they fit."""

    def __init__(self, router: ModelRouter) -> None:
        self._router = router

    def fit(
        self,
        question: str,
        sections: list[str],
        profile: ModelProfile,
        supplementary: str | None = None,
        issues: list[str] | None = None,
    ) -> BudgetedPrompt:
        """
        Build the drafting prompt within profile.token_limit.

        Args:
            question: User question
            sections: Context sections, best first
            profile: Routed profile
            supplementary: Optional supplementary context
            issues: Review issues appended on retries

        Returns:
            BudgetedPrompt: Messages, final profile and what was trimmed
        """
        sections = list(sections)
        actions: list[str] = []
        supplementary_dropped = False
        question_truncated = False

        def build() -> list[BaseMessage]:
            return build_answer_messages(
                question=question,
                context=SECTION_SEPARATOR.join(sections),
                supplementary=supplementary,
                issues=issues,
            )

        messages = build()
        tokens = estimate_message_tokens(messages)

        while tokens > profile.token_limit and len(sections) > 1:
            sections.pop()
            messages = build()
            tokens = estimate_message_tokens(messages)
            actions.append("drop_section")

        if tokens > profile.token_limit and supplementary:
            supplementary = None
            supplementary_dropped = True
            messages = build()
            tokens = estimate_message_tokens(messages)
            actions.append("drop_supplementary")

        if tokens > profile.token_limit and len(question) > MIN_QUESTION_CHARS:
            overshoot_chars = (tokens - profile.token_limit) * CHARS_PER_TOKEN
            keep = max(MIN_QUESTION_CHARS, len(question) - overshoot_chars - len(TRUNCATION_MARK))
            question = question[:keep] + TRUNCATION_MARK
            question_truncated = True
            messages = build()
            tokens = estimate_message_tokens(messages)
            actions.append("truncate_question")

        switched = False
        if tokens > profile.token_limit:
            generous = self._router.most_generous()
            if generous.token_limit > profile.token_limit:
                logger.warning(
                    f"{__name__}:fit - {tokens} tokens exceed {profile.name} limit "
                    f"{profile.token_limit}, switching to {generous.name}"
                )
                profile = generous
                switched = True
                actions.append("switch_profile")

        if tokens > profile.token_limit and sections:
            # Last resort: cut the remaining section so the call can still be made
            overshoot_chars = (tokens - profile.token_limit) * CHARS_PER_TOKEN
            sections[0] = sections[0][: max(0, len(sections[0]) - overshoot_chars)]
            messages = build()
            tokens = estimate_message_tokens(messages)
            actions.append("truncate_section")

        if actions:
            logger.info(f"{__name__}:fit - {actions} -> {tokens} tokens on {profile.name}")

        return BudgetedPrompt(
            messages=messages,
            profile=profile,
            estimated_tokens=tokens,
            sections_used=len(sections),
            supplementary_dropped=supplementary_dropped,
            question_truncated=question_truncated,
            switched_profile=switched,
            actions=actions,
        )

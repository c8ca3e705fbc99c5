"""
LLM re-ranking of retrieved candidates.

Shows the model an index-tagged, truncated preview of every candidate and
asks for the indices ordered by relevance. The reply is parsed leniently:
integers are read in order, out-of-range or repeated indices are skipped,
and the list is padded with the untouched candidates in their original
order. A reply without any integer, or a failed model call, keeps the
similarity order. Re-ranking never fails the surrounding request.

Dependencies: langchain_core.messages, study_rag.boundary.llm
System role: Optional relevance reordering stage of the read path
"""

import logging
import re

from langchain_core.messages import HumanMessage, SystemMessage

from study_rag.boundary.llm.generative_model import GenerativeModel
from study_rag.core.exceptions import GenerationError
from study_rag.models.generation import ModelProfile
from study_rag.models.retrieval import RetrievalCandidate
from study_rag.observability.log_utils import preview

logger = logging.getLogger(__name__)

INTEGER = re.compile(r"\d+")

RERANK_SYSTEM_PROMPT = (
    "Você ordena trechos de documentos por relevância para uma pergunta. "
    "Responda apenas com os números dos trechos, do mais relevante para o menos "
    "relevante, separados por vírgula."
)


def parse_ranking(reply: str, count: int, keep: int) -> list[int]:
    """
    Turn a model reply into a list of candidate indices.

    Args:
        reply: Raw model text
        count: Number of candidates shown to the model
        keep: Number of indices wanted

    Returns:
        list[int]: min(keep, count) distinct indices; the original order
        when the reply contains no integer at all
    """
    limit = min(keep, count)
    numbers = [int(n) for n in INTEGER.findall(reply or "")]
    if not numbers:
        return list(range(limit))

    ranking: list[int] = []
    used: set[int] = set()
    for number in numbers:
        if len(ranking) == limit:
            break
        if number >= count or number in used:
            continue
        used.add(number)
        ranking.append(number)

    for index in range(count):
        if len(ranking) == limit:
            break
        if index not in used:
            used.add(index)
            ranking.append(index)

    return ranking


class Reranker:
    """Reorder candidates using a generative model's relevance judgment."""

    def __init__(
        self,
        model: GenerativeModel,
        profile: ModelProfile,
        preview_chars: int = 300,
    ) -> None:
        """
        Initialize re-ranker.

        Args:
            model: Generative model used for the ranking call
            profile: Low-temperature profile for the ranking call
            preview_chars: Characters of each candidate shown to the model
        """
        self._model = model
        self._profile = profile
        self._preview_chars = preview_chars

    def build_messages(self, query: str, candidates: list[RetrievalCandidate]) -> list:
        """Index-tagged ranking prompt."""
        listing = "\n".join(
            f"[{i}] {' '.join(candidate.content.split())[: self._preview_chars]}"
            for i, candidate in enumerate(candidates)
        )
        return [
            SystemMessage(content=RERANK_SYSTEM_PROMPT),
            HumanMessage(
                content=(
                    f"Pergunta: {query}\n\n"
                    f"Trechos:\n{listing}\n\n"
                    f"Ordem de relevância (números de 0 a {len(candidates) - 1}):"
                )
            ),
        ]

    async def rerank(
        self,
        query: str,
        candidates: list[RetrievalCandidate],
        keep: int,
    ) -> list[RetrievalCandidate]:
        """
        Reorder candidates by model-judged relevance.

        Args:
            query: User question
            candidates: Candidates in similarity order
            keep: Number of candidates to return

        Returns:
            list[RetrievalCandidate]: Up to keep candidates
        """
        if keep <= 0 or not candidates:
            return []
        if len(candidates) == 1:
            return candidates[:keep]

        try:
            reply = await self._model.complete(self.build_messages(query, candidates), self._profile)
        except GenerationError as e:
            logger.warning(f"{__name__}:rerank - Model failed ({e.kind}), keeping similarity order")
            return candidates[:keep]

        ranking = parse_ranking(reply, len(candidates), keep)
        logger.info(
            f"{__name__}:rerank - Ranking {ranking} from reply '{preview(reply, 60)}'"
        )
        return [candidates[i] for i in ranking]

"""
Test suite for the re-ranker and the context assembler.

System role: Verification of candidate ordering and prompt context budgeting
"""

import pytest

from study_rag.core.context_assembler import SECTION_SEPARATOR, ContextAssembler, render_section
from study_rag.core.exceptions import GenerationError
from study_rag.core.reranker import Reranker, parse_ranking


# ============================================================================
# parse_ranking
# ============================================================================


class TestParseRanking:
    """Test suite for parse_ranking."""

    def test_parse_ranking_should_follow_reply_order(self) -> None:
        assert parse_ranking("2, 0, 1", count=3, keep=3) == [2, 0, 1]

    def test_parse_ranking_should_skip_out_of_range_and_repeats(self) -> None:
        assert parse_ranking("7, 1, 1, 3", count=4, keep=3) == [1, 3, 0]

    def test_parse_ranking_should_pad_with_original_order(self) -> None:
        assert parse_ranking("Trecho 3 é o melhor", count=4, keep=4) == [3, 0, 1, 2]

    def test_parse_ranking_should_keep_order_without_integers(self) -> None:
        assert parse_ranking("não sei", count=5, keep=3) == [0, 1, 2]

    def test_parse_ranking_should_not_exceed_candidate_count(self) -> None:
        assert parse_ranking("1 0", count=2, keep=5) == [1, 0]


# ============================================================================
# Reranker
# ============================================================================


class TestReranker:
    """Test suite for Reranker.rerank."""

    @pytest.mark.asyncio
    async def test_rerank_should_reorder_by_model_reply(self, scripted_model, default_profile, make_candidate) -> None:
        # Arrange
        candidates = [make_candidate("a"), make_candidate("b"), make_candidate("c")]
        scripted_model.replies = ["2, 0"]
        reranker = Reranker(scripted_model, default_profile)

        # Act
        ranked = await reranker.rerank("pergunta", candidates, keep=2)

        # Assert
        assert [c.content for c in ranked] == ["c", "a"]
        assert len(scripted_model.calls) == 1

    @pytest.mark.asyncio
    async def test_rerank_should_keep_similarity_order_on_model_failure(
        self, scripted_model, default_profile, make_candidate
    ) -> None:
        candidates = [make_candidate("a"), make_candidate("b"), make_candidate("c")]
        scripted_model.replies = [GenerationError("boom", kind=GenerationError.QUOTA)]

        ranked = await Reranker(scripted_model, default_profile).rerank("pergunta", candidates, keep=2)

        assert [c.content for c in ranked] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_rerank_should_skip_model_for_single_candidate(
        self, scripted_model, default_profile, make_candidate
    ) -> None:
        ranked = await Reranker(scripted_model, default_profile).rerank("q", [make_candidate("a")], keep=3)

        assert [c.content for c in ranked] == ["a"]
        assert scripted_model.calls == []

    @pytest.mark.asyncio
    async def test_rerank_should_return_nothing_for_zero_keep(self, scripted_model, default_profile, make_candidate) -> None:
        assert await Reranker(scripted_model, default_profile).rerank("q", [make_candidate("a")], keep=0) == []

    def test_build_messages_should_tag_truncated_previews(self, scripted_model, default_profile, make_candidate) -> None:
        reranker = Reranker(scripted_model, default_profile, preview_chars=5)

        messages = reranker.build_messages("q", [make_candidate("abcdefghij"), make_candidate("xy\n\nz")])

        assert "[0] abcde\n" in messages[1].content
        assert "[1] xy z\n" in messages[1].content


# ============================================================================
# ContextAssembler
# ============================================================================


class TestContextAssembler:
    """Test suite for ContextAssembler.assemble."""

    def test_assemble_should_fill_in_rank_order_until_budget(self, make_candidate) -> None:
        # Arrange
        first = make_candidate("x" * 40, title="A")
        second = make_candidate("y" * 40, title="B")
        third = make_candidate("z" * 40, title="A")
        budget = len(render_section(first)) + len(SECTION_SEPARATOR) + len(render_section(second))

        # Act
        context = ContextAssembler(max_context_length=budget).assemble([first, second, third])

        # Assert
        assert context.used == [first, second]
        assert context.dropped == 1
        assert len(context.text) == budget
        assert context.sources == ["A", "B"]

    def test_assemble_should_truncate_oversized_first_candidate(self, make_candidate) -> None:
        context = ContextAssembler(max_context_length=30).assemble([make_candidate("x" * 100)])

        assert len(context.text) == 30
        assert context.text.startswith("[Fonte: Apostila]\n")
        assert not context.is_empty

    def test_assemble_should_label_untitled_sources(self, make_candidate) -> None:
        context = ContextAssembler().assemble([make_candidate("texto", title="")])

        assert context.text == "[Fonte: Documento]\ntexto"
        assert context.sources == ["Documento"]

    def test_assemble_should_return_empty_context_for_no_candidates(self) -> None:
        context = ContextAssembler().assemble([])

        assert context.is_empty
        assert context.text == ""

"""
Test suite for ChunkingTask.

Tests paragraph packing, sentence splitting of oversized paragraphs,
oversized single sentences and content preservation.

System role: Verification of the chunking stage of local ingestion
"""

import pytest

from study_rag.core.document_processing.tasks.chunking_task import ChunkingTask
from study_rag.core.exceptions import ValidationError


class TestChunkingTaskInit:
    """Test suite for ChunkingTask construction."""

    def test_init_should_reject_non_positive_size(self) -> None:
        with pytest.raises(ValidationError):
            ChunkingTask(max_chunk_size=0)


class TestChunkingTaskChunk:
    """Test suite for ChunkingTask.chunk."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\n\t\n"])
    def test_chunk_should_return_nothing_for_blank_text(self, text: str) -> None:
        assert ChunkingTask().chunk(text) == []

    def test_chunk_should_pack_small_paragraphs_together(self) -> None:
        # Arrange
        text = "Primeiro parágrafo.\n\n\n  Segundo parágrafo.  "

        # Act
        chunks = ChunkingTask(max_chunk_size=1000).chunk(text)

        # Assert
        assert len(chunks) == 1
        assert chunks[0].content == "Primeiro parágrafo.\n\nSegundo parágrafo."
        assert chunks[0].chunk_index == 0

    def test_chunk_should_keep_paragraphs_whole_when_they_do_not_fit_together(self) -> None:
        # Arrange
        first = "a" * 900
        second = "b" * 898

        # Act
        chunks = ChunkingTask(max_chunk_size=1000).chunk(f"{first}\n\n{second}")

        # Assert
        assert [chunk.content for chunk in chunks] == [first, second]
        assert [chunk.chunk_index for chunk in chunks] == [0, 1]

    def test_chunk_should_split_oversized_paragraph_on_sentences(self) -> None:
        # Arrange
        text = "Frase um é curta. Frase dois também é curta. Frase três fecha."

        # Act
        chunks = ChunkingTask(max_chunk_size=50).chunk(text)

        # Assert
        assert [chunk.content for chunk in chunks] == [
            "Frase um é curta. Frase dois também é curta.",
            "Frase três fecha.",
        ]

    def test_chunk_should_keep_single_long_sentence_as_oversized_chunk(self) -> None:
        # Arrange
        sentence = "Umafrasemuitocomprida sem nenhum ponto final"

        # Act
        chunks = ChunkingTask(max_chunk_size=10).chunk(sentence)

        # Assert
        assert len(chunks) == 1
        assert chunks[0].content == sentence

    def test_chunk_should_preserve_every_word_in_order(self) -> None:
        # Arrange
        paragraphs = [
            " ".join(f"Sentença {p}-{s} com algum conteúdo." for s in range(12))
            for p in range(5)
        ]
        text = "\n\n".join(paragraphs)

        # Act
        chunks = ChunkingTask(max_chunk_size=120).chunk(text)

        # Assert
        assert all(chunk.length <= 120 for chunk in chunks)
        assert " ".join(chunk.content for chunk in chunks).split() == text.split()
        assert [chunk.chunk_index for chunk in chunks] == list(range(len(chunks)))

"""
Text chunking task.

Splits normalized document text into bounded, paragraph-aligned chunks.
Paragraphs are kept whole when they fit; oversized paragraphs are split on
sentence boundaries. Content is never truncated or dropped: a single
sentence longer than the limit becomes its own oversized chunk.

Dependencies: re (stdlib)
System role: Second stage of document ingestion pipeline
"""

import logging
import re

from study_rag.core.document_processing.models import TextChunk
from study_rag.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

PARAGRAPH_BOUNDARY = re.compile(r"\n\s*\n")
SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")
PARAGRAPH_SEPARATOR = "\n\n"
SENTENCE_SEPARATOR = " "


class ChunkingTask:
    """Split text into chunks of at most max_chunk_size characters."""

    def __init__(self, max_chunk_size: int = 1000) -> None:
        """
        Initialize chunking task.

        Args:
            max_chunk_size: Maximum chunk size in characters

        Raises:
            ValidationError: When max_chunk_size is not positive
        """
        if max_chunk_size <= 0:
            raise ValidationError(
                "max_chunk_size must be positive",
                field="max_chunk_size",
                details={"value": max_chunk_size},
            )
        self.max_chunk_size = max_chunk_size

    def chunk(self, text: str) -> list[TextChunk]:
        """
        Split text into ordered chunks.

        Args:
            text: Raw or extracted document text

        Returns:
            list[TextChunk]: Non-empty chunks with contiguous chunk_index
        """
        if not text or not text.strip():
            return []

        pieces: list[str] = []
        buffer = ""

        for paragraph in self._paragraphs(text):
            for position, unit in enumerate(self._units(paragraph)):
                separator = PARAGRAPH_SEPARATOR if position == 0 else SENTENCE_SEPARATOR
                if not buffer:
                    buffer = unit
                elif len(buffer) + len(separator) + len(unit) <= self.max_chunk_size:
                    buffer = f"{buffer}{separator}{unit}"
                else:
                    pieces.append(buffer)
                    buffer = unit

        if buffer:
            pieces.append(buffer)

        oversized = sum(1 for piece in pieces if len(piece) > self.max_chunk_size)
        if oversized:
            logger.warning(
                f"{__name__}:chunk - {oversized} sentence(s) exceed max_chunk_size "
                f"({self.max_chunk_size}) and were kept as single chunks"
            )

        return [TextChunk(content=piece, chunk_index=i) for i, piece in enumerate(pieces)]

    @staticmethod
    def _paragraphs(text: str) -> list[str]:
        """Split on blank lines and drop empty paragraphs."""
        return [p.strip() for p in PARAGRAPH_BOUNDARY.split(text) if p.strip()]

    def _units(self, paragraph: str) -> list[str]:
        """A paragraph that fits is one unit; otherwise its sentences are."""
        if len(paragraph) <= self.max_chunk_size:
            return [paragraph]
        return [s.strip() for s in SENTENCE_BOUNDARY.split(paragraph) if s.strip()]

"""
Local text extraction for uploaded study documents.

Converts PDF, Word, spreadsheet, CSV, JSON and plain-text files into a
single text string. Used on the local fallback path when the external
processing backend is unavailable.

Dependencies: langchain_community.document_loaders, pandas
System role: First stage of the local ingestion path
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd
from langchain_community.document_loaders import Docx2txtLoader, PyPDFLoader

from study_rag.core.exceptions import ParsingError

logger = logging.getLogger(__name__)

SUPPORTED_TYPES = ("pdf", "docx", "doc", "xlsx", "xls", "csv", "json", "txt")


def detect_file_type(file_name: str) -> str | None:
    """Lowercase extension without dot, or None when unsupported."""
    suffix = Path(file_name).suffix.lower().lstrip(".")
    return suffix if suffix in SUPPORTED_TYPES else None


def json_to_text(value: Any, indent: int = 0) -> str:
    """Render parsed JSON as indented "key: value" lines."""
    spacing = "  " * indent
    if isinstance(value, list):
        return "".join(
            f"{spacing}[{i}] {json_to_text(item, indent + 1)}\n" for i, item in enumerate(value)
        )
    if isinstance(value, dict):
        text = ""
        for key, item in value.items():
            if isinstance(item, (dict, list)):
                text += f"{spacing}{key}:\n{json_to_text(item, indent + 1)}"
            else:
                text += f"{spacing}{key}: {item}\n"
        return text
    return str(value)


@dataclass
class ExtractedText:
    """Text extracted from one file plus format-specific metadata."""

    text: str
    metadata: dict[str, Any] = field(default_factory=dict)


class TextExtractor:
    """Extract plain text from supported study document formats."""

    def extract(self, file_path: str, file_name: str | None = None) -> ExtractedText:
        """
        Extract text from a file.

        Args:
            file_path: Path to the file on disk
            file_name: Original file name used for type detection (defaults
                to the path's name)

        Returns:
            ExtractedText: Text and metadata

        Raises:
            ParsingError: When the file is missing, unsupported, unreadable
                or contains no text
        """
        path = Path(file_path)
        if not path.exists():
            raise ParsingError(f"File not found: {file_path}")

        file_type = detect_file_type(file_name or path.name)
        if file_type is None:
            raise ParsingError(
                f"Unsupported file format: {Path(file_name or path.name).suffix}",
                file_type=Path(file_name or path.name).suffix,
            )

        logger.info(f"{__name__}:extract - Extracting {file_type.upper()} {path.name}")
        handlers = {
            "pdf": self._extract_pdf,
            "docx": self._extract_word,
            "doc": self._extract_word,
            "xlsx": self._extract_excel,
            "xls": self._extract_excel,
            "csv": self._extract_csv,
            "json": self._extract_json,
            "txt": self._extract_text,
        }

        try:
            extracted = handlers[file_type](path)
        except ParsingError:
            raise
        except Exception as e:
            raise ParsingError(
                f"Failed to extract {file_type} text: {e}",
                file_type=file_type,
            ) from e

        if not extracted.text.strip():
            raise ParsingError("Document contains no extractable text", file_type=file_type)

        extracted.metadata.setdefault("file_type", file_type)
        logger.info(
            f"{__name__}:extract - Extracted {len(extracted.text)} chars",
            extra={"file_type": file_type},
        )
        return extracted

    def _extract_pdf(self, path: Path) -> ExtractedText:
        pages = PyPDFLoader(str(path)).load()
        return ExtractedText(
            text="\n\n".join(page.page_content for page in pages),
            metadata={"page_count": len(pages)},
        )

    def _extract_word(self, path: Path) -> ExtractedText:
        documents = Docx2txtLoader(str(path)).load()
        return ExtractedText(text="\n\n".join(doc.page_content for doc in documents))

    def _extract_excel(self, path: Path) -> ExtractedText:
        sheets = pd.read_excel(path, sheet_name=None, header=None)
        text = ""
        total_rows = 0
        for sheet_name, frame in sheets.items():
            text += f"\n=== PLANILHA: {sheet_name} ===\n"
            for row in frame.itertuples(index=False):
                cells = [str(cell) for cell in row if not pd.isna(cell)]
                if cells:
                    text += " | ".join(cells) + "\n"
                    total_rows += 1
            text += "\n"
        return ExtractedText(
            text=text.strip(),
            metadata={"sheet_names": list(sheets), "row_count": total_rows},
        )

    def _extract_csv(self, path: Path) -> ExtractedText:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False)
        lines = [" | ".join(str(column) for column in frame.columns)]
        lines.extend(" | ".join(row) for row in frame.itertuples(index=False))
        text = "\n".join(lines) if len(frame) else ""
        return ExtractedText(text=text.strip(), metadata={"row_count": len(frame)})

    def _extract_json(self, path: Path) -> ExtractedText:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ExtractedText(text=json_to_text(data).strip())

    def _extract_text(self, path: Path) -> ExtractedText:
        return ExtractedText(text=path.read_text(encoding="utf-8"))

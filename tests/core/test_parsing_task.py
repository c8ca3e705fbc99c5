"""
Test suite for TextExtractor.

System role: Verification of local text extraction
"""

import json

import pytest

from study_rag.core.document_processing.tasks.parsing_task import (
    TextExtractor,
    detect_file_type,
    json_to_text,
)
from study_rag.core.exceptions import ParsingError


@pytest.fixture
def extractor() -> TextExtractor:
    return TextExtractor()


class TestDetectFileType:
    """Test suite for detect_file_type."""

    @pytest.mark.parametrize(
        ("file_name", "expected"),
        [("Edital.PDF", "pdf"), ("notas.docx", "docx"), ("dados.xls", "xls"), ("setup.exe", None), ("sem_extensao", None)],
    )
    def test_detect_file_type_should_map_extension(self, file_name: str, expected: str | None) -> None:
        assert detect_file_type(file_name) == expected


class TestTextExtractor:
    """Test suite for TextExtractor.extract."""

    def test_extract_should_read_plain_text(self, extractor, tmp_path) -> None:
        # Arrange
        path = tmp_path / "resumo.txt"
        path.write_text("Crase é a fusão de duas vogais.", encoding="utf-8")

        # Act
        extracted = extractor.extract(str(path))

        # Assert
        assert extracted.text == "Crase é a fusão de duas vogais."
        assert extracted.metadata["file_type"] == "txt"

    def test_extract_should_detect_type_from_original_name(self, extractor, tmp_path) -> None:
        path = tmp_path / "upload-123"
        path.write_text("conteúdo", encoding="utf-8")

        extracted = extractor.extract(str(path), file_name="Resumo.txt")

        assert extracted.text == "conteúdo"

    def test_extract_should_render_csv_rows(self, extractor, tmp_path) -> None:
        path = tmp_path / "notas.csv"
        path.write_text("disciplina,nota\nPortuguês,8\nMatemática,7\n", encoding="utf-8")

        extracted = extractor.extract(str(path))

        assert extracted.text == "disciplina | nota\nPortuguês | 8\nMatemática | 7"
        assert extracted.metadata["row_count"] == 2

    def test_extract_should_render_json_as_key_value_lines(self, extractor, tmp_path) -> None:
        path = tmp_path / "plano.json"
        path.write_text(json.dumps({"materia": "Direito", "topicos": ["Penal", "Civil"]}), encoding="utf-8")

        extracted = extractor.extract(str(path))

        assert extracted.text == "materia: Direito\ntopicos:\n  [0] Penal\n  [1] Civil"

    def test_extract_should_raise_for_missing_file(self, extractor, tmp_path) -> None:
        with pytest.raises(ParsingError, match="File not found"):
            extractor.extract(str(tmp_path / "nao_existe.txt"))

    def test_extract_should_raise_for_unsupported_format(self, extractor, tmp_path) -> None:
        path = tmp_path / "programa.exe"
        path.write_bytes(b"MZ")

        with pytest.raises(ParsingError) as exc_info:
            extractor.extract(str(path))

        assert exc_info.value.details["file_type"] == ".exe"

    def test_extract_should_raise_for_empty_text(self, extractor, tmp_path) -> None:
        path = tmp_path / "vazio.txt"
        path.write_text("   \n\n", encoding="utf-8")

        with pytest.raises(ParsingError, match="no extractable text"):
            extractor.extract(str(path))

    def test_extract_should_wrap_reader_failures(self, extractor, tmp_path) -> None:
        path = tmp_path / "quebrado.json"
        path.write_text("{nao é json", encoding="utf-8")

        with pytest.raises(ParsingError) as exc_info:
            extractor.extract(str(path))

        assert exc_info.value.details["file_type"] == "json"


class TestJsonToText:
    """Test suite for json_to_text."""

    def test_json_to_text_should_indent_nested_objects(self) -> None:
        assert json_to_text({"a": {"b": 1}}) == "a:\n  b: 1\n"

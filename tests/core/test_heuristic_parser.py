"""
Test suite for the line heuristics used on non-JSON replies and raw text.

System role: Verification of regex recovery for roles and syllabus
"""

from study_rag.core.extraction.heuristic_parser import (
    clean_label,
    heuristic_roles,
    heuristic_syllabus,
    roles_from_text,
)


class TestCleanLabel:
    """Test suite for clean_label."""

    def test_clean_label_should_strip_markdown_and_punctuation(self) -> None:
        assert clean_label("**Analista Judiciário**.") == "Analista Judiciário"
        assert clean_label('"Técnico"') == "Técnico"


class TestHeuristicRoles:
    """Test suite for heuristic_roles."""

    def test_heuristic_roles_should_read_bullets_under_role_heading(self) -> None:
        # Arrange
        reply = "## Cargos disponíveis\n- Analista Judiciário\n- **Técnico Judiciário**\n## Outros\n- Nota"

        # Act
        result = heuristic_roles(reply, set())

        # Assert
        assert result.is_ok
        assert result.value == [{"nome": "Analista Judiciário"}, {"nome": "Técnico Judiciário"}]

    def test_heuristic_roles_should_read_labelled_lines(self) -> None:
        result = heuristic_roles('"nome": "Analista",\ncargo: Técnico', set())

        assert [item["nome"] for item in result.value] == ["Analista", "Técnico"]

    def test_heuristic_roles_should_read_emphasised_labels(self) -> None:
        # Arrange
        reply = "**Cargo:** Analista Judiciário\n- **Cargo**: Técnico Judiciário\n_Nome:_ Oficial de Justiça"

        # Act
        result = heuristic_roles(reply, set())

        # Assert
        assert result.is_ok
        assert [item["nome"] for item in result.value] == [
            "Analista Judiciário",
            "Técnico Judiciário",
            "Oficial de Justiça",
        ]

    def test_heuristic_roles_should_treat_bare_bold_label_as_heading(self) -> None:
        result = heuristic_roles("**Cargo:**\n- Analista Judiciário", set())

        assert result.value == [{"nome": "Analista Judiciário"}]

    def test_heuristic_roles_should_skip_names_already_seen(self) -> None:
        seen = {"analista"}

        result = heuristic_roles("cargo: Analista\ncargo: Técnico", seen)

        assert result.value == [{"nome": "Técnico"}]
        assert "técnico" in seen

    def test_heuristic_roles_should_fail_on_plain_prose(self) -> None:
        result = heuristic_roles("O edital não menciona vagas.", set())

        assert not result.is_ok
        assert result.stage == "heuristic"


class TestHeuristicSyllabus:
    """Test suite for heuristic_syllabus."""

    def test_heuristic_syllabus_should_group_bullets_under_headings(self) -> None:
        # Arrange
        reply = "Português:\n- Crase\n- Regência\nMatemática:\n1. Frações\nVazia:\n"

        # Act
        result = heuristic_syllabus(reply, set())

        # Assert
        assert result.value == [
            {"disciplina": "Português", "topicos": ["Crase", "Regência"]},
            {"disciplina": "Matemática", "topicos": ["Frações"]},
        ]

    def test_heuristic_syllabus_should_split_uppercase_subject_lines(self) -> None:
        result = heuristic_syllabus("LÍNGUA PORTUGUESA: Crase. Concordância verbal.", set())

        assert result.value == [
            {"disciplina": "Língua Portuguesa", "topicos": ["Crase", "Concordância verbal"]},
        ]

    def test_heuristic_syllabus_should_fail_without_topics(self) -> None:
        assert not heuristic_syllabus("texto corrido sem estrutura", set()).is_ok


class TestRolesFromText:
    """Test suite for roles_from_text."""

    def test_roles_from_text_should_find_labelled_role(self) -> None:
        roles = roles_from_text("Edital 1/2024\nCargo: Analista Judiciário.\n", set())

        assert roles == ["Analista judiciário"]

    def test_roles_from_text_should_respect_cap(self) -> None:
        text = "vaga para auditor fiscal. vaga para delegado. vaga para escrivão."

        roles = roles_from_text(text, set(), max_roles=2)

        assert roles == ["Auditor fiscal", "Delegado"]

    def test_roles_from_text_should_return_empty_list_without_matches(self) -> None:
        assert roles_from_text("nada aqui", set()) == []

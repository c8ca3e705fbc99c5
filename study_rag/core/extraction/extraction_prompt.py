"""
Structured extraction prompts.

JSON-only prompts for roles and syllabus extraction. Fields the context does
not cover must come back as "Não informado" instead of being guessed.

Dependencies: langchain_core.prompts
System role: Prompt templates for structured extraction
"""

from langchain_core.prompts import ChatPromptTemplate

from study_rag.core.extraction.extraction_schema import NOT_INFORMED, ROLES_FIELD, SYLLABUS_FIELD

SYSTEM_PROMPT = (
    "Você é um especialista em análise de editais de concurso. Extraia informações "
    "EXCLUSIVAMENTE dos documentos fornecidos, sem usar conhecimento prévio. Mantenha "
    "nomes e localizações EXATOS conforme o documento. Responda SEMPRE e SOMENTE com JSON válido."
)

ROLES_INSTRUCTIONS = f"""Identifique os cargos mencionados APENAS neste contexto.

Para cada cargo, extraia:
- Nome EXATO do cargo conforme aparece no documento (incluindo UF se mencionada)
- Requisitos de formação
- Atribuições e funções
- Salário/remuneração
- Carga horária
- Número de vagas

Se alguma informação não estiver no contexto, use "{NOT_INFORMED}". NÃO invente cargos.

Formato:
{{
  "{ROLES_FIELD}": [
    {{
      "nome": "Nome exato do cargo",
      "requisitos": "Requisitos ou '{NOT_INFORMED}'",
      "atribuicoes": "Atribuições ou '{NOT_INFORMED}'",
      "salario": "Salário ou '{NOT_INFORMED}'",
      "cargaHoraria": "Carga horária ou '{NOT_INFORMED}'",
      "vagas": "Número de vagas ou '{NOT_INFORMED}'"
    }}
  ]
}}"""

SYLLABUS_INSTRUCTIONS = f"""Identifique TODAS as disciplinas/matérias do conteúdo programático presentes neste contexto.

Para cada disciplina, extraia:
- Nome da disciplina
- Lista de tópicos/assuntos, na ordem do documento
- Detalhamento específico quando houver

Se não houver detalhamento, use "{NOT_INFORMED}". NÃO invente disciplinas.

Formato:
{{
  "{SYLLABUS_FIELD}": [
    {{
      "disciplina": "Nome da disciplina",
      "topicos": ["Tópico 1", "Tópico 2"],
      "detalhamento": "Detalhes ou '{NOT_INFORMED}'"
    }}
  ]
}}"""

HUMAN_TEMPLATE = """CONTEXTO DO DOCUMENTO:
{context}

INSTRUÇÕES:
{instructions}

Responda apenas com o JSON, sem markdown e sem texto adicional."""

EXTRACTION_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", HUMAN_TEMPLATE),
])

FIELD_INSTRUCTIONS = {
    ROLES_FIELD: ROLES_INSTRUCTIONS,
    SYLLABUS_FIELD: SYLLABUS_INSTRUCTIONS,
}


def build_extraction_messages(field: str, context: str) -> list:
    """
    Build chat messages for one field extraction call.

    Args:
        field: ROLES_FIELD or SYLLABUS_FIELD
        context: Assembled document context

    Returns:
        list[BaseMessage]: System and human messages
    """
    return EXTRACTION_PROMPT.invoke({
        "context": context,
        "instructions": FIELD_INSTRUCTIONS[field],
    }).to_messages()

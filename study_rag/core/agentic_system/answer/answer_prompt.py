"""
Answer generation prompts.

System and human templates for grounded study answers, the review feedback
block appended on quality-gate retries, and the fixed replies used when
there is no context or the model returns nothing.

Dependencies: langchain_core.prompts
System role: Prompt templates for answer generation
"""

from langchain_core.prompts import ChatPromptTemplate

NO_CONTEXT_ANSWER = (
    "Não encontrei informações relevantes sobre isso nos seus documentos. "
    "Adicione materiais relacionados à sua base de estudos e tente novamente."
)

EMPTY_REPLY_APOLOGY = "Desculpe, não consegui gerar uma resposta."

SYSTEM_PROMPT = """Você é um assistente de estudos que responde com base na base de conhecimento pessoal do estudante.

## Regras
1. Baseie a resposta EXCLUSIVAMENTE no contexto fornecido
2. Se o contexto não responder à pergunta, diga isso claramente
3. Seja preciso, didático e organizado
4. Use formatação markdown (títulos, listas, negrito) para estruturar a resposta
5. Cite as fontes entre [colchetes] quando usar informações da base"""

HUMAN_TEMPLATE = """CONTEXTO DA BASE DE CONHECIMENTO:
{context}
{supplementary}
PERGUNTA DO USUÁRIO:
{question}
{review_feedback}
Responda usando APENAS as informações do contexto acima."""

ANSWER_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", HUMAN_TEMPLATE),
])


def format_supplementary(supplementary: str | None) -> str:
    """Render optional supplementary (web-search-style) context."""
    if not supplementary:
        return ""
    return f"\nCONTEXTO COMPLEMENTAR:\n{supplementary}\n"


def format_review_feedback(issues: list[str]) -> str:
    """Render the issues found by the previous review as revision instructions."""
    if not issues:
        return ""
    bullets = "\n".join(f"- {issue}" for issue in issues)
    return (
        "\nA resposta anterior foi revisada e precisa melhorar nestes pontos:\n"
        f"{bullets}\n"
        "Escreva uma nova resposta completa corrigindo todos eles.\n"
    )


def build_answer_messages(
    question: str,
    context: str,
    supplementary: str | None = None,
    issues: list[str] | None = None,
) -> list:
    """
    Build chat messages for one drafting call.

    Args:
        question: User question
        context: Assembled context text
        supplementary: Optional supplementary context
        issues: Review issues from the previous attempt

    Returns:
        list[BaseMessage]: System and human messages
    """
    return ANSWER_PROMPT.invoke({
        "context": context,
        "supplementary": format_supplementary(supplementary),
        "question": question,
        "review_feedback": format_review_feedback(issues or []),
    }).to_messages()

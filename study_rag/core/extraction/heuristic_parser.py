"""
Line-oriented heuristics for roles and syllabus subjects.

Last stage of the recovery chain for model replies that are not JSON at all,
and the whole analysis on the local fallback path where only raw document
text is available. Every helper takes the caller's `seen` set so
deduplication state never outlives one extraction run.

Dependencies: re
System role: Regex recovery for structured extraction
"""

import logging
import re
from typing import Any

from study_rag.core.parsed import Parsed

logger = logging.getLogger(__name__)

BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(.+?)\s*$")
MARKDOWN_HEADING = re.compile(r"^\s*#{1,6}\s+(.+?)\s*$")
COLON_HEADING = re.compile(r"^\s*\**([^\n:*]{3,80}?)\**\s*:\s*\**\s*$")
LABELLED_ROLE = re.compile(
    r'^\s*(?:[-*•]\s*|\d+[.)]\s*)?[*_"]*(?:cargo|nome)[*_"]*\s*[:=][*_"\s]*([^"\n*_\s][^"\n]*?)[*_"]*\s*,?\s*$',
    re.IGNORECASE,
)
LABELLED_SUBJECT = re.compile(
    r'^\s*(?:[-*•]\s*|\d+[.)]\s*)?[*_"]*disciplina[*_"]*\s*[:=][*_"\s]*([^"\n*_\s][^"\n]*?)[*_"]*\s*,?\s*$',
    re.IGNORECASE,
)
UPPERCASE_SUBJECT = re.compile(
    r"^\s*([A-ZÁÉÍÓÚÂÊÔÃÕÇ][A-ZÁÉÍÓÚÂÊÔÃÕÇ ,/\-]{3,80}):\s*(.+)$",
    re.MULTILINE,
)
ROLE_HEADING_WORDS = ("cargo", "vaga", "função", "funcao")

# Raw-text role patterns, applied to lowercased text
ROLE_PATTERNS = [
    re.compile(r"cargo:\s*([^.,\n]+)"),
    re.compile(r"vaga para\s*([^.,\n]+)"),
    re.compile(r"função de\s*([^.,\n]+)"),
    re.compile(r"auditor[^.,\n]*"),
    re.compile(r"analista[^.,\n]*"),
    re.compile(r"técnico[^.,\n]*"),
    re.compile(r"professor[^.,\n]*"),
    re.compile(r"delegado[^.,\n]*"),
    re.compile(r"escrivão[^.,\n]*"),
    re.compile(r"procurador[^.,\n]*"),
    re.compile(r"assistente[^.,\n]*"),
]


def clean_label(text: str) -> str:
    """Strip markdown emphasis, quotes and trailing punctuation."""
    return text.replace("**", "").replace("__", "").strip().strip("\"'").strip().rstrip(".:,;").strip()


def _heading(line: str) -> str | None:
    match = MARKDOWN_HEADING.match(line) or COLON_HEADING.match(line)
    if match and not BULLET.match(line):
        return clean_label(match.group(1))
    return None


def _add(name: str, seen: set[str]) -> bool:
    key = name.casefold()
    if not name or key in seen:
        return False
    seen.add(key)
    return True


def heuristic_roles(reply: str, seen: set[str]) -> Parsed[list[dict[str, Any]]]:
    """
    Recover role names from labelled lines and bullets under a role heading.

    Args:
        reply: Model reply that failed JSON recovery
        seen: Per-run set of names already emitted

    Returns:
        Parsed[list[dict]]: Items with a "nome" key
    """
    items: list[dict[str, Any]] = []
    under_role_heading = False

    for line in reply.splitlines():
        labelled = LABELLED_ROLE.match(line)
        if labelled:
            name = clean_label(labelled.group(1))
            if _add(name, seen):
                items.append({"nome": name})
            continue

        heading = _heading(line)
        if heading is not None:
            under_role_heading = any(word in heading.casefold() for word in ROLE_HEADING_WORDS)
            continue

        bullet = BULLET.match(line)
        if bullet and under_role_heading:
            name = clean_label(bullet.group(1))
            if _add(name, seen):
                items.append({"nome": name})

    if not items:
        return Parsed.fail("no role lines", stage="heuristic")
    return Parsed.ok(items, stage="heuristic")


def heuristic_syllabus(reply: str, seen: set[str]) -> Parsed[list[dict[str, Any]]]:
    """
    Recover subjects from headings followed by bullet or numbered topics.

    Also understands "disciplina: X" labels and upper-case "SUBJECT: topic.
    topic." lines as they appear in extracted notice text.

    Args:
        reply: Model reply (or raw text) to scan
        seen: Per-run set of subject names already emitted

    Returns:
        Parsed[list[dict]]: Items with "disciplina" and "topicos" keys
    """
    items: list[dict[str, Any]] = []
    current: dict[str, Any] | None = None

    def start(name: str) -> dict[str, Any] | None:
        if not _add(name, seen):
            return None
        item = {"disciplina": name, "topicos": []}
        items.append(item)
        return item

    for line in reply.splitlines():
        labelled = LABELLED_SUBJECT.match(line)
        if labelled:
            current = start(clean_label(labelled.group(1)))
            continue

        uppercase = UPPERCASE_SUBJECT.match(line)
        if uppercase:
            current = start(clean_label(uppercase.group(1)).title())
            if current is not None:
                current["topicos"].extend(
                    topic for topic in (clean_label(t) for t in re.split(r"[.;]\s+", uppercase.group(2)))
                    if topic
                )
            continue

        heading = _heading(line)
        if heading is not None:
            current = start(heading)
            continue

        bullet = BULLET.match(line)
        if bullet and current is not None:
            topic = clean_label(bullet.group(1))
            if topic:
                current["topicos"].append(topic)

    items = [item for item in items if item["topicos"]]
    if not items:
        return Parsed.fail("no subject headings with topics", stage="heuristic")
    return Parsed.ok(items, stage="heuristic")


def roles_from_text(text: str, seen: set[str], max_roles: int = 5) -> list[str]:
    """
    Find role names in raw document text.

    Args:
        text: Extracted document text
        seen: Per-run set of names already emitted
        max_roles: Maximum number of names returned

    Returns:
        list[str]: Capitalized role names, possibly empty
    """
    lowered = text.lower()
    roles: list[str] = []

    for pattern in ROLE_PATTERNS:
        for match in pattern.finditer(lowered):
            role = match.group(1) if match.groups() else match.group(0)
            role = re.sub(r"[.:,;]", "", role).strip()
            if not 3 < len(role) < 100:
                continue
            role = role[0].upper() + role[1:]
            if _add(role, seen):
                roles.append(role)
            if len(roles) >= max_roles:
                logger.info(f"{__name__}:roles_from_text - Found {roles}")
                return roles

    logger.info(f"{__name__}:roles_from_text - Found {roles}")
    return roles

"""
Structured extraction of roles and syllabus from exam notices.

For each field, a fixed set of sub-queries is run against the document's
chunks (scoped to owner and document), the merged context is sent to the
model with a JSON-only prompt, and the reply goes through a recovery chain:
largest JSON object, fenced block, named array salvage, line heuristics.
A field with no context makes no model call; a field nothing could parse
is left empty. Both cases are flagged and no record is ever invented.

analyze_text is the model-free variant used when only raw text exists.

Dependencies: study_rag.core.retriever, study_rag.boundary.llm, pydantic
System role: Exam-notice structured extraction
"""

import asyncio
import logging
from typing import Any, Callable

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from study_rag.boundary.llm.generative_model import GenerativeModel
from study_rag.configs.extraction import ExtractionSettings, FieldQueryPlan
from study_rag.core.context_assembler import ContextAssembler
from study_rag.core.extraction.extraction_prompt import build_extraction_messages
from study_rag.core.extraction.extraction_schema import (
    ROLES_FIELD,
    SYLLABUS_FIELD,
    ExtractionResult,
    RoleRecord,
    SyllabusRecord,
)
from study_rag.core.extraction.heuristic_parser import (
    heuristic_roles,
    heuristic_syllabus,
    roles_from_text,
)
from study_rag.core.extraction.json_recovery import fenced_block, field_array, largest_object
from study_rag.core.parsed import Parsed, first_ok
from study_rag.core.retriever import Retriever
from study_rag.models.generation import ModelProfile
from study_rag.models.retrieval import QueryFilter, RetrievalOptions
from study_rag.observability.log_utils import preview

logger = logging.getLogger(__name__)

FIELD_KEYS: dict[str, tuple[str, ...]] = {
    ROLES_FIELD: (ROLES_FIELD, "roles"),
    SYLLABUS_FIELD: (SYLLABUS_FIELD, "disciplinas", "syllabus"),
}
NAME_KEYS: dict[str, tuple[str, ...]] = {
    ROLES_FIELD: ("nome", "cargo", "name"),
    SYLLABUS_FIELD: ("disciplina", "nome", "name"),
}
RECORD_TYPES: dict[str, type[BaseModel]] = {
    ROLES_FIELD: RoleRecord,
    SYLLABUS_FIELD: SyllabusRecord,
}


def to_records(field: str, items: list[Any]) -> list[BaseModel]:
    """
    Validate raw items into records, skipping those without a name.

    Args:
        field: ROLES_FIELD or SYLLABUS_FIELD
        items: Raw JSON items (objects or bare names)

    Returns:
        list: RoleRecord or SyllabusRecord instances
    """
    record_type = RECORD_TYPES[field]
    name_key = NAME_KEYS[field][0]
    records = []
    for item in items:
        if isinstance(item, str):
            item = {name_key: item}
        if not isinstance(item, dict):
            continue
        name = next(
            (str(item[key]).strip() for key in NAME_KEYS[field] if item.get(key) and str(item[key]).strip()),
            "",
        )
        if not name:
            continue
        try:
            records.append(record_type.model_validate({**item, name_key: name}))
        except PydanticValidationError as e:
            logger.debug(f"{__name__}:to_records - Skipping {field} item: {e.error_count()} errors")
    return records


def parse_field(field: str, reply: str) -> tuple[Parsed[list[BaseModel]], list[str]]:
    """
    Run the recovery chain over a model reply.

    Args:
        field: ROLES_FIELD or SYLLABUS_FIELD
        reply: Raw model reply

    Returns:
        tuple: First successful Parsed records (or the last failure) and the
        reasons of the stages that failed before it
    """
    keys = FIELD_KEYS[field]
    heuristic = heuristic_roles if field == ROLES_FIELD else heuristic_syllabus
    seen: set[str] = set()

    def stage(attempt: Callable[[], Parsed[list[Any]]]) -> Callable[[], Parsed[list[BaseModel]]]:
        def run() -> Parsed[list[BaseModel]]:
            result = attempt()
            if not result.is_ok:
                return Parsed(is_ok=False, reason=result.reason, stage=result.stage)
            records = to_records(field, result.value)
            if result.value and not records:
                return Parsed.fail("items without usable names", stage=result.stage)
            return Parsed.ok(records, stage=result.stage)
        return run

    return first_ok([
        stage(lambda: largest_object(reply, keys)),
        stage(lambda: fenced_block(reply, keys)),
        stage(lambda: field_array(reply, keys)),
        stage(lambda: heuristic(reply, seen)),
    ])


class StructuredExtractor:
    """Extract roles and syllabus subjects from one indexed document."""

    def __init__(
        self,
        retriever: Retriever,
        model: GenerativeModel,
        settings: ExtractionSettings,
    ) -> None:
        """
        Initialize extractor.

        Args:
            retriever: Owner-scoped multi-query retriever
            model: Generative model for the JSON extraction calls
            settings: Sub-queries, thresholds and model parameters
        """
        self._retriever = retriever
        self._model = model
        self._settings = settings
        self._assembler = ContextAssembler(max_context_length=settings.max_context_length)

    def _profile(self, field: str, plan: FieldQueryPlan) -> ModelProfile:
        return ModelProfile(
            name=f"extraction_{field}",
            provider=self._settings.provider,
            model=self._settings.model,
            temperature=plan.temperature,
            max_tokens=plan.max_tokens,
            top_p=1.0,
        )

    async def analyze(self, user_id: str, document_id: str) -> ExtractionResult:
        """
        Extract roles and syllabus from a document's indexed chunks.

        Args:
            user_id: Document owner
            document_id: Document whose chunks are searched

        Returns:
            ExtractionResult: Records, raw replies and flags

        Raises:
            GenerationError: If an extraction model call fails
            VectorStoreError: If retrieval fails
        """
        logger.info(f"{__name__}:analyze - Start", extra={"document_id": document_id})
        query_filter = QueryFilter(user_id=user_id, document_id=document_id)

        (roles, roles_reply, roles_flags), (syllabus, syllabus_reply, syllabus_flags) = (
            await asyncio.gather(
                self._extract_field(ROLES_FIELD, self._settings.roles, query_filter),
                self._extract_field(SYLLABUS_FIELD, self._settings.syllabus, query_filter),
            )
        )

        result = ExtractionResult(
            roles=roles,
            syllabus=syllabus,
            raw_model_responses={ROLES_FIELD: roles_reply, SYLLABUS_FIELD: syllabus_reply},
            flags=roles_flags + syllabus_flags,
        )
        logger.info(
            f"{__name__}:analyze - Done: {len(result.roles)} roles, {len(result.syllabus)} subjects",
            extra={"document_id": document_id, "flags": result.flags},
        )
        return result

    async def _extract_field(
        self,
        field: str,
        plan: FieldQueryPlan,
        query_filter: QueryFilter,
    ) -> tuple[list, str, list[str]]:
        options = RetrievalOptions(
            filter=query_filter,
            top_k=plan.top_k,
            min_similarity=plan.min_similarity,
            final_top_k=self._settings.final_top_k,
        )
        retrieval = await self._retriever.retrieve_many(plan.sub_queries, options)
        if retrieval.is_empty:
            logger.info(f"{__name__}:_extract_field - No context for {field}, skipping model call")
            return [], "", [f"no_context:{field}"]

        context = self._assembler.assemble(retrieval.candidates)
        reply = await self._model.complete(
            build_extraction_messages(field, context.text),
            self._profile(field, plan),
        )

        parsed, reasons = parse_field(field, reply)
        if not parsed.is_ok:
            logger.warning(
                f"{__name__}:_extract_field - Could not parse {field}: {reasons}",
                extra={"reply": preview(reply, 200)},
            )
            return [], reply, [f"unparsed:{field}"]

        logger.info(
            f"{__name__}:_extract_field - {len(parsed.value)} {field} via {parsed.stage}",
            extra={"failed_stages": reasons},
        )
        flags = [f"heuristic:{field}"] if parsed.stage == "heuristic" else []
        return parsed.value, reply, flags

    def analyze_text(self, text: str) -> ExtractionResult:
        """
        Model-free analysis of raw document text.

        Args:
            text: Extracted document text

        Returns:
            ExtractionResult: Roles found by pattern matching and subjects
            found by heading analysis; empty fields are flagged
        """
        role_names = roles_from_text(text, set(), max_roles=self._settings.max_heuristic_roles)
        roles = [RoleRecord(nome=name) for name in role_names]

        subjects = heuristic_syllabus(text, set())
        syllabus = to_records(SYLLABUS_FIELD, subjects.unwrap_or([]))

        flags = ["heuristic"]
        if not roles:
            flags.append(f"no_matches:{ROLES_FIELD}")
        if not syllabus:
            flags.append(f"no_matches:{SYLLABUS_FIELD}")

        logger.info(
            f"{__name__}:analyze_text - {len(roles)} roles, {len(syllabus)} subjects from raw text"
        )
        return ExtractionResult(roles=roles, syllabus=syllabus, flags=flags)

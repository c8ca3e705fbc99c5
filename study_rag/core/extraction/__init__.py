"""
Structured extraction of exam-notice roles and syllabus.
"""

from study_rag.core.extraction.extraction_schema import (
    NOT_INFORMED,
    ROLES_FIELD,
    SYLLABUS_FIELD,
    ExtractionResult,
    RoleRecord,
    SyllabusRecord,
)
from study_rag.core.extraction.structured_extractor import StructuredExtractor, parse_field

__all__ = [
    "NOT_INFORMED",
    "ROLES_FIELD",
    "SYLLABUS_FIELD",
    "ExtractionResult",
    "RoleRecord",
    "StructuredExtractor",
    "SyllabusRecord",
    "parse_field",
]

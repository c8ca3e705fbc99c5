"""
Application services.
"""

from study_rag.application.services.job_service import JobService
from study_rag.application.services.processing_service import (
    AnalysisMode,
    DocumentProcessingService,
    ProcessingOutcome,
    UploadRequest,
)
from study_rag.application.services.query_service import StudyQueryService
from study_rag.application.services.scheduler import TaskScheduler

__all__ = [
    "AnalysisMode",
    "DocumentProcessingService",
    "JobService",
    "ProcessingOutcome",
    "StudyQueryService",
    "TaskScheduler",
    "UploadRequest",
]

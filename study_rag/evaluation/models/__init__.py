"""
Evaluation models - Data classes for answer review results.
"""

from study_rag.evaluation.models.review_models import RUBRIC_DIMENSIONS, ReviewVerdict

__all__ = [
    "RUBRIC_DIMENSIONS",
    "ReviewVerdict",
]

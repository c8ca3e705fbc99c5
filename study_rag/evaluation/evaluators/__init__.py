"""
Evaluators - model-backed reviewers.
"""

from study_rag.evaluation.evaluators.answer_reviewer import AnswerReviewer

__all__ = ["AnswerReviewer"]

"""
Observability module.

Provides logging configuration and safe structured-logging helpers.
"""

from study_rag.observability.logger import configure_logging
from study_rag.observability.log_utils import preview

__all__ = ["configure_logging", "preview"]

"""
Database models package.

Exports:
  - DocumentModel: Document ORM model
  - JobModel: Job ORM model

Dependencies: sqlalchemy, study_rag.boundary.db.base
System role: Database model definitions for domain entities
"""

from study_rag.boundary.db.models.document_model import DocumentModel
from study_rag.boundary.db.models.job_model import JobModel

__all__ = ["DocumentModel", "JobModel"]

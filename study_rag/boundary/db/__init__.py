"""
Database boundary layer: ORM models, CRUD operations, stores and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), create_tables(): Connection management
  - DocumentModel, JobModel: ORM entities
  - SqlDocumentStore, SqlJobStore: Record-level stores used by the services

Dependencies: sqlalchemy, study_rag.configs
System role: Database adapter providing persistent storage for documents and jobs
"""

from study_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin
from study_rag.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
)
from study_rag.boundary.db.document_store import (
    DocumentStore,
    JobStore,
    SqlDocumentStore,
    SqlJobStore,
)
from study_rag.boundary.db.models import DocumentModel, JobModel

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "create_tables",
    "get_async_engine",
    "get_async_session_factory",
    "DocumentStore",
    "JobStore",
    "SqlDocumentStore",
    "SqlJobStore",
    "DocumentModel",
    "JobModel",
]

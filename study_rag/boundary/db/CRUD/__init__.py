"""Row-level access to the documents and jobs tables.

The SQL stores in study_rag.boundary.db.document_store are the only callers;
each store operation opens a session, runs one CRUD call and commits.
"""

from study_rag.boundary.db.CRUD.base_crud import BaseCRUD
from study_rag.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from study_rag.boundary.db.CRUD.job_crud import JobCRUD, job_crud

__all__ = ["BaseCRUD", "DocumentCRUD", "JobCRUD", "document_crud", "job_crud"]

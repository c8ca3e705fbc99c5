"""
Document processing package.

Local ingestion path: text extraction, chunking, embedding and indexing.
"""

"""
Study RAG core.

Retrieval-augmented answering and structured extraction over a student's
personal document corpus.
"""

__version__ = "0.1.0"

"""
Domain models shared across layers.

Pydantic schemas for documents, jobs, retrieval candidates, generation
profiles and extraction records.
"""

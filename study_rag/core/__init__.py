"""
Core domain logic: chunking, retrieval, generation and extraction.
"""

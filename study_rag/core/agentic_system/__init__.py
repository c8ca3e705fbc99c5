"""Generative answering: prompt, routing, token budget and quality gate."""

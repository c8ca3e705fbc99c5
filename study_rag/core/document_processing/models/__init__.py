"""Document processing models."""

from .chunk import TextChunk
from .pipeline_result import PipelineResult

__all__ = ["TextChunk", "PipelineResult"]

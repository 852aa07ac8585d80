"""Handler exports."""

from .output_handler import OutputHandler
from .pipeline_handler import PipelineHandler

__all__ = ["OutputHandler", "PipelineHandler"]

"""Pipeline architecture for page transformation."""

from .base import EventEmitter, PageContext, TransformPipeline, TransformStep
from .steps import ExtractStep, NormalizeStep, RenderStep, SanitizeStep, default_pipeline

__all__ = [
    "EventEmitter",
    "PageContext",
    "TransformPipeline",
    "TransformStep",
    "SanitizeStep",
    "NormalizeStep",
    "ExtractStep",
    "RenderStep",
    "default_pipeline",
]

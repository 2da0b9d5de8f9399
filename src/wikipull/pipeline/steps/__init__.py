"""Pipeline steps for page transformation."""

from ...conversion.extractor import ComponentExtractor
from ...conversion.markdown import MarkdownRenderer
from ...conversion.normalizer import ReferenceNormalizer
from ...conversion.sanitizer import DocumentSanitizer
from ...models.config import WikipullConfig
from ..base import TransformPipeline
from .extract import ExtractStep
from .normalize import NormalizeStep
from .render import RenderStep
from .sanitize import SanitizeStep


def default_pipeline(config: WikipullConfig) -> TransformPipeline:
    """Build the standard sanitize -> normalize -> extract -> render pipeline."""
    return TransformPipeline(
        steps=[
            SanitizeStep(DocumentSanitizer.from_config(config)),
            NormalizeStep(ReferenceNormalizer.from_config(config)),
            ExtractStep(ComponentExtractor()),
            RenderStep(MarkdownRenderer.from_config(config)),
        ]
    )


__all__ = [
    "ExtractStep",
    "NormalizeStep",
    "RenderStep",
    "SanitizeStep",
    "default_pipeline",
]

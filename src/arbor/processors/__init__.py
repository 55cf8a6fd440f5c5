"""Content processors and their per-build registry."""

from arbor.processors.base import ContentProcessor, ProcessorRegistry, extension_name
from arbor.processors.markdown import MarkdownProcessor
from arbor.processors.template import TemplateProcessor, create_environment

__all__ = [
    "ContentProcessor",
    "MarkdownProcessor",
    "ProcessorRegistry",
    "TemplateProcessor",
    "create_environment",
    "extension_name",
]

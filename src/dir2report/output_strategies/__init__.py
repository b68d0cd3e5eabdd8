"""Rendering of report sections."""

from .base_strategy import OutputStrategy
from .markdown_strategy import MarkdownOutputStrategy, fence_length

__all__ = ["MarkdownOutputStrategy", "OutputStrategy", "fence_length"]

"""
Per-category detectors, dispatched by file category.
"""

from typing import Dict, Optional

from ..types import FileCategory
from .base import Detector
from .database import DatabaseDetector
from .markdown import MarkdownDetector
from .source import SourceDetector

DETECTORS: Dict[FileCategory, Detector] = {
    FileCategory.DATABASE: DatabaseDetector(),
    FileCategory.MARKDOWN: MarkdownDetector(),
    FileCategory.SOURCE: SourceDetector(),
}


def get_detector(category: Optional[FileCategory]) -> Optional[Detector]:
    """Return the detector registered for a category, or None."""
    if category is None:
        return None
    return DETECTORS.get(category)


__all__ = [
    'Detector',
    'DatabaseDetector',
    'MarkdownDetector',
    'SourceDetector',
    'DETECTORS',
    'get_detector',
]

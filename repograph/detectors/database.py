from typing import AbstractSet, Optional

from ..types import FileCategory, LocalGraph, NodeType
from .base import Detector
from .patterns import file_node


class DatabaseDetector(Detector):
    """Makes database files visible as unconnected vertices.

    Database files are opaque: their content is never read.
    """

    category = FileCategory.DATABASE
    needs_text = False

    def detect(
        self,
        file_path: str,
        text: Optional[str] = None,
        known_files: AbstractSet[str] = frozenset(),
    ) -> LocalGraph:
        return LocalGraph(nodes=[file_node(file_path, NodeType.DB)], edges=[])

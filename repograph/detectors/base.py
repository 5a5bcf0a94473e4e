from abc import ABC, abstractmethod
from typing import AbstractSet, Optional

from ..types import FileCategory, LocalGraph


class Detector(ABC):
    """Converts one file into its local node/edge contribution.

    Implementations are stateless: the same arguments always produce the same
    LocalGraph, so one instance can be shared across worker threads.
    """

    category: FileCategory
    needs_text: bool = True

    @abstractmethod
    def detect(
        self,
        file_path: str,
        text: Optional[str],
        known_files: AbstractSet[str],
    ) -> LocalGraph:
        """Return the local subgraph for ``file_path``."""

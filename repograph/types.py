from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field
from enum import Enum


class FileCategory(Enum):
    """Detector category a file belongs to."""
    DATABASE = "database"
    MARKDOWN = "markdown"
    SOURCE = "source"


class NodeType(Enum):
    """Node type enumeration."""
    DB = "db"
    MD = "md"
    TS = "ts"
    TSX = "tsx"
    JS = "js"
    JSX = "jsx"
    FN = "fn"
    URL = "url"


class EdgeKind(Enum):
    """Edge kind enumeration."""
    IMPORT = "import"
    DECLARES = "declares"
    WIKILINK = "wikilink"
    MDLINK = "mdlink"
    URL = "url"


class RepographError(Exception):
    """Base class for graph building errors."""


class FileLoadError(RepographError):
    """A file's text could not be loaded."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(f"{file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason


class FileTooLargeError(FileLoadError):
    """A file exceeds the configured read size cap."""


class BuildCancelledError(RepographError):
    """A graph build was abandoned through its cancellation signal."""


@dataclass
class Node:
    """Represents a node in the workspace graph."""
    id: str
    label: str
    type: NodeType
    file_path: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "type": self.type.value,
        }
        if self.file_path is not None:
            data["filePath"] = self.file_path
        if self.meta:
            data["meta"] = dict(self.meta)
        return data


@dataclass(frozen=True)
class Edge:
    """Represents a directed edge in the workspace graph."""
    source: str
    target: str
    kind: EdgeKind

    def sort_key(self):
        return (self.source, self.target, self.kind.value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "source": self.source,
            "target": self.target,
            "kind": self.kind.value,
        }


@dataclass
class LocalGraph:
    """Nodes and edges contributed by one detector invocation."""
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)


@dataclass(frozen=True)
class FileFailure:
    """A per-file diagnostic raised during a build."""
    file_path: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"filePath": self.file_path, "reason": self.reason}


@dataclass
class GraphResult:
    """Represents an aggregated workspace graph."""
    nodes: List[Node]
    edges: List[Edge]
    failures: List[FileFailure] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "failures": [failure.to_dict() for failure in self.failures],
            "metadata": self.metadata,
        }

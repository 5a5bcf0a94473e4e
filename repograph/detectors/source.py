"""
TypeScript / JavaScript source detector.

Matching is lexical: imports and exported declarations are found with regular
expressions, so text inside comments or string literals can match and
dynamically generated exports are missed.
"""
import os
import re
from typing import AbstractSet, List, Optional, Tuple

from ..types import Edge, EdgeKind, FileCategory, LocalGraph, Node, NodeType
from .base import Detector
from .patterns import declaration_id, file_node, resolve_relative, url_subgraph


class SourceDetector(Detector):
    """Detects relative imports, exported declarations and URLs in TS/JS files."""

    category = FileCategory.SOURCE

    IMPORT_PATTERNS = [
        # import x from './a', import { x } from './a', export * from './a'
        re.compile(r'''\b(?:import|export)\s+(?:type\s+)?[^'"`;]*?\bfrom\s*['"]([^'"\n]+)['"]'''),
        # import './a'
        re.compile(r'''\bimport\s*['"]([^'"\n]+)['"]'''),
        # require('./a'), import('./a')
        re.compile(r'''\b(?:require|import)\s*\(\s*['"]([^'"\n]+)['"]\s*\)'''),
    ]

    DECLARATION_PATTERN = re.compile(
        r'\bexport\s+(?:default\s+)?(?:async\s+)?(?:abstract\s+)?'
        r'(?:function(?:\s*\*\s*|\s+)|class\s+(?!extends\b|implements\b))([A-Za-z_$][\w$]*)'
        r'|\bexport\s+const\s+([A-Za-z_$][\w$]*)\s*[=:]'
    )

    # Probed in order; the first known candidate wins.
    RESOLUTION_SUFFIXES = ('', '.ts', '.tsx', '.js', '.jsx', '/index.ts', '/index.js')

    def detect(
        self,
        file_path: str,
        text: Optional[str],
        known_files: AbstractSet[str],
    ) -> LocalGraph:
        graph = LocalGraph(nodes=[file_node(file_path, self._node_type(file_path))])
        text = text or ""

        for specifier in self.extract_import_specifiers(text):
            target = self.resolve_import(file_path, specifier, known_files)
            if target is not None:
                graph.edges.append(Edge(source=file_path, target=target, kind=EdgeKind.IMPORT))

        for name in self.extract_declarations(text):
            node_id = declaration_id(file_path, name)
            graph.nodes.append(Node(
                id=node_id,
                label=name,
                type=NodeType.FN,
                file_path=file_path,
                meta={"parent": file_path},
            ))
            graph.edges.append(Edge(source=file_path, target=node_id, kind=EdgeKind.DECLARES))

        url_nodes, url_edges = url_subgraph(file_path, text)
        graph.nodes.extend(url_nodes)
        graph.edges.extend(url_edges)

        return graph

    @staticmethod
    def _node_type(file_path: str) -> NodeType:
        # extensions configured beyond ts/tsx/js/jsx are typed as js
        ext = os.path.splitext(file_path)[1].lower().lstrip('.')
        if ext in ("ts", "tsx", "js", "jsx"):
            return NodeType(ext)
        return NodeType.JS

    def extract_import_specifiers(self, text: str) -> List[str]:
        """Return every import specifier in text, in order of appearance."""
        found: List[Tuple[int, str]] = []
        for pattern in self.IMPORT_PATTERNS:
            for match in pattern.finditer(text):
                found.append((match.start(1), match.group(1).strip()))
        found.sort()
        return [specifier for _, specifier in found if specifier]

    def extract_declarations(self, text: str) -> List[str]:
        """Return exported function, class and const names in order of appearance."""
        return [
            match.group(1) or match.group(2)
            for match in self.DECLARATION_PATTERN.finditer(text)
        ]

    def resolve_import(
        self,
        file_path: str,
        specifier: str,
        known_files: AbstractSet[str],
    ) -> Optional[str]:
        """
        Resolve a relative import specifier to a known file.

        Bare (package) specifiers are never resolved.

        Args:
            file_path: Path of the importing file
            specifier: Raw module specifier from the import statement
            known_files: Every indexable path in the workspace

        Returns:
            The first candidate present in known_files, or None
        """
        if not specifier.startswith('.'):
            return None

        base = resolve_relative(file_path, specifier)
        for suffix in self.RESOLUTION_SUFFIXES:
            candidate = base + suffix
            if candidate in known_files:
                return candidate
        return None

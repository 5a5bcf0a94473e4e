"""
Markdown detector.

Emits one ``md`` node per document plus three independent edge scans:

- ``[[Target]]`` wikilinks, matched case-insensitively against the
  extension-stripped base names of known files
- ``[text](target)`` inline links, resolved relative to the document
- bare ``http(s)://`` URLs, externalized as ``url`` nodes
"""
import os
import re
from typing import AbstractSet, Dict, List, Optional
from urllib.parse import unquote

from ..types import Edge, EdgeKind, FileCategory, LocalGraph, NodeType
from .base import Detector
from .patterns import file_node, resolve_relative, url_subgraph


class MarkdownDetector(Detector):
    """Detects wikilinks, inline links and URLs in markdown documents."""

    category = FileCategory.MARKDOWN

    # [[Target]], [[Target|alias]], [[Target#anchor]]
    WIKILINK_PATTERN = re.compile(r'\[\[([^\]|#]+?)(?:[|#][^\]]*)?\]\]')
    # [text](target); group 1 is the target
    LINK_PATTERN = re.compile(r'\[(?:[^\]]*)\]\(([^)]+)\)')
    # optional "title" after an inline link destination
    LINK_TITLE_PATTERN = re.compile(r'\s+(?:"[^"]*"|\'[^\']*\')\s*$')

    EXTERNAL_PREFIXES = ('http://', 'https://')

    def detect(
        self,
        file_path: str,
        text: Optional[str],
        known_files: AbstractSet[str],
    ) -> LocalGraph:
        graph = LocalGraph(nodes=[file_node(file_path, NodeType.MD)])
        text = text or ""

        graph.edges.extend(self._wikilink_edges(file_path, text, known_files))
        graph.edges.extend(self._inline_link_edges(file_path, text, known_files))

        url_nodes, url_edges = url_subgraph(file_path, text)
        graph.nodes.extend(url_nodes)
        graph.edges.extend(url_edges)

        return graph

    def _wikilink_edges(self, file_path: str, text: str, known_files: AbstractSet[str]) -> List[Edge]:
        edges = []
        stem_index: Optional[Dict[str, str]] = None

        for match in self.WIKILINK_PATTERN.finditer(text):
            name = match.group(1).strip()
            if not name:
                continue
            if stem_index is None:
                stem_index = self._build_stem_index(known_files)

            target = stem_index.get(name.casefold())
            if target is not None:
                edges.append(Edge(source=file_path, target=target, kind=EdgeKind.WIKILINK))

        return edges

    @staticmethod
    def _build_stem_index(known_files: AbstractSet[str]) -> Dict[str, str]:
        """
        Map case-folded base names (without extension) to a known file.

        Several files can share a base name; the lexicographically smallest
        path wins so that resolution does not depend on set iteration order.
        """
        index: Dict[str, str] = {}
        for known in known_files:
            stem = os.path.splitext(os.path.basename(known))[0].casefold()
            current = index.get(stem)
            if current is None or known < current:
                index[stem] = known
        return index

    def _inline_link_edges(self, file_path: str, text: str, known_files: AbstractSet[str]) -> List[Edge]:
        edges = []

        for match in self.LINK_PATTERN.finditer(text):
            target = self._clean_link_target(match.group(1))
            if target is None:
                continue

            candidate = resolve_relative(file_path, target)
            if candidate in known_files:
                edges.append(Edge(source=file_path, target=candidate, kind=EdgeKind.MDLINK))

        return edges

    def _clean_link_target(self, raw: str) -> Optional[str]:
        """
        Reduce a raw link destination to a relative file reference.

        Returns None for external links, anchor-only links and destinations
        that are empty once the fragment is removed.
        """
        link = raw.strip()
        if link.startswith(self.EXTERNAL_PREFIXES) or link.startswith('#'):
            return None

        if link.startswith('<') and link.endswith('>'):
            link = link[1:-1].strip()
        else:
            link = self.LINK_TITLE_PATTERN.sub('', link)

        link = unquote(link.split('#', 1)[0]).strip()
        return link or None

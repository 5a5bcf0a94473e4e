"""
Lexical patterns shared by the text detectors.
"""
import os
import re
from typing import List, Tuple

from ..types import Edge, EdgeKind, Node, NodeType

URL_PATTERN = re.compile(r"https?://[\w\-._~:/?#\[\]@!$&'()*+,;=%]+")

URL_ID_PREFIX = "url:"
DECLARATION_SEPARATOR = "::"

_TRAILING_PUNCTUATION = ".,;:!?'*_~"
_BRACKET_PAIRS = {")": "(", "]": "["}


def _trim_url(url: str) -> str:
    """Drop trailing punctuation and unbalanced closing brackets."""
    while url:
        last = url[-1]
        if last in _TRAILING_PUNCTUATION:
            url = url[:-1]
        elif last in _BRACKET_PAIRS and url.count(last) > url.count(_BRACKET_PAIRS[last]):
            url = url[:-1]
        else:
            break
    return url


def extract_urls(text: str) -> List[str]:
    """Return every http(s) URL in text, in order of appearance."""
    urls = []
    for match in URL_PATTERN.finditer(text):
        url = _trim_url(match.group(0))
        # a bare scheme is not a URL
        if url.split("://", 1)[1]:
            urls.append(url)
    return urls


def url_id(url: str) -> str:
    return f"{URL_ID_PREFIX}{url}"


def declaration_id(file_path: str, name: str) -> str:
    return f"{file_path}{DECLARATION_SEPARATOR}{name}"


def url_subgraph(file_path: str, text: str) -> Tuple[List[Node], List[Edge]]:
    """Build a url node and a url edge for every URL in text."""
    nodes = []
    edges = []
    for url in extract_urls(text):
        node_id = url_id(url)
        nodes.append(Node(id=node_id, label=url, type=NodeType.URL, meta={"url": url}))
        edges.append(Edge(source=file_path, target=node_id, kind=EdgeKind.URL))
    return nodes, edges


def file_node(file_path: str, node_type: NodeType) -> Node:
    return Node(
        id=file_path,
        label=os.path.basename(file_path),
        type=node_type,
        file_path=file_path,
    )


def resolve_relative(file_path: str, reference: str) -> str:
    """Resolve a reference against the directory of file_path."""
    return os.path.normpath(os.path.join(os.path.dirname(file_path), reference))

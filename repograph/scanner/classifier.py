import os
from functools import lru_cache
from typing import Dict, Optional

from ..config import parse_extensions, settings
from ..types import FileCategory


@lru_cache(maxsize=8)
def _extension_map(database: str, markdown: str, source: str) -> Dict[str, FileCategory]:
    # keyed by the raw settings values so overrides rebuild the map
    mapping: Dict[str, FileCategory] = {}
    for ext in parse_extensions(database):
        mapping.setdefault(ext, FileCategory.DATABASE)
    for ext in parse_extensions(markdown):
        mapping.setdefault(ext, FileCategory.MARKDOWN)
    for ext in parse_extensions(source):
        mapping.setdefault(ext, FileCategory.SOURCE)
    return mapping


def extension_map() -> Dict[str, FileCategory]:
    return _extension_map(
        settings.database_extensions,
        settings.markdown_extensions,
        settings.source_extensions,
    )


def classify_path(file_path: str) -> Optional[FileCategory]:
    """Return the detector category for a file, or None if it is not indexed.

    Extensions are matched case-insensitively. An extension listed under more
    than one category keeps the first one (database, markdown, source).
    """
    ext = os.path.splitext(file_path)[1].lower()
    if not ext:
        return None
    return extension_map().get(ext)


def is_indexable(file_path: str) -> bool:
    return classify_path(file_path) is not None

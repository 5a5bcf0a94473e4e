"""
File discovery and classification for workspace scans.
"""

from .classifier import classify_path, is_indexable
from .local_workspace_scanner import LocalWorkspaceScanner

__all__ = [
    'classify_path',
    'is_indexable',
    'LocalWorkspaceScanner',
]

"""
Repository graph builder: scans a workspace and links its source files,
markdown documents, database files, declarations and URLs into one graph.
"""

__version__ = "0.1.0"

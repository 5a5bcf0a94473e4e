import os
from pathlib import Path
from typing import List, Optional, Iterator

from ..config import settings
from ..types import FileLoadError, FileTooLargeError
from ..utils.logger import app_logger
from .classifier import classify_path


class LocalWorkspaceScanner:
    """Scanner for indexable files in a local workspace."""

    def __init__(self, root_path: Optional[str] = None, max_file_size: Optional[int] = None):
        if root_path is None:
            self.root_path = Path.cwd().resolve()
        else:
            self.root_path = Path(root_path).resolve()

        self.ignored_dirs = settings.ignored_dirs_set
        self.max_file_size = max_file_size if max_file_size is not None else settings.max_file_size_bytes
        self.logger = app_logger.bind(component="scanner")

    def scan_directory(self) -> List[str]:
        """Scan directory and return the sorted absolute paths of indexable files."""
        self.logger.info(f"Scanning directory: {self.root_path}")

        all_files = sorted(self._walk_directory())

        self.logger.info(f"Found {len(all_files)} indexable files")
        return all_files

    def _walk_directory(self) -> Iterator[str]:
        """Walk through directory and yield indexable file paths."""
        for root, dirs, files in os.walk(self.root_path, onerror=self._on_walk_error):
            # Remove ignored directories
            dirs[:] = [d for d in dirs if d not in self.ignored_dirs]

            for file_name in files:
                file_path = os.path.normpath(os.path.join(root, file_name))

                if self._should_include_file(file_path):
                    yield file_path

    def _on_walk_error(self, error: OSError):
        self.logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")

    def _should_include_file(self, file_path: str) -> bool:
        """Check if file should be included in scan."""
        if classify_path(file_path) is None:
            return False
        return os.path.isfile(file_path)

    def load_file_content(self, file_path: str) -> str:
        """Load the UTF-8 text of a file, bounded by the size cap.

        Raises:
            FileTooLargeError: the file is larger than ``max_file_size`` bytes.
            FileLoadError: the file cannot be read or decoded.
        """
        try:
            size = os.path.getsize(file_path)
        except OSError as e:
            raise FileLoadError(file_path, e.strerror or str(e)) from e

        if size > self.max_file_size:
            raise FileTooLargeError(
                file_path, f"file is {size} bytes, limit is {self.max_file_size}"
            )

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise FileLoadError(file_path, f"not valid UTF-8: {e.reason}") from e
        except OSError as e:
            raise FileLoadError(file_path, e.strerror or str(e)) from e

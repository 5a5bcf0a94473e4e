import pytest
import tempfile
from pathlib import Path
from typing import Generator, FrozenSet
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from repograph.detectors import DatabaseDetector, MarkdownDetector, SourceDetector


@pytest.fixture
def markdown_detector() -> MarkdownDetector:
    return MarkdownDetector()


@pytest.fixture
def source_detector() -> SourceDetector:
    return SourceDetector()


@pytest.fixture
def database_detector() -> DatabaseDetector:
    return DatabaseDetector()


@pytest.fixture
def known_files() -> FrozenSet[str]:
    """Known-file set of a small virtual workspace rooted at /ws."""
    return frozenset({
        "/ws/README.md",
        "/ws/docs/Notes.md",
        "/ws/docs/guide.md",
        "/ws/docs/setup guide.md",
        "/ws/src/app.ts",
        "/ws/src/foo.ts",
        "/ws/src/foo.js",
        "/ws/src/bar.js",
        "/ws/src/view.tsx",
        "/ws/src/widget.jsx",
        "/ws/src/utils/index.ts",
        "/ws/src/helpers/index.js",
        "/ws/data/app.sqlite",
    })


@pytest.fixture
def temp_workspace() -> Generator[Path, None, None]:
    """Create temporary workspace for testing."""
    with tempfile.TemporaryDirectory() as temp_dir:
        root = Path(temp_dir).resolve()

        (root / "src").mkdir()
        (root / "docs").mkdir()
        (root / "node_modules" / "lib").mkdir(parents=True)

        (root / "src" / "app.ts").write_text("""
import { helper } from './helper';
import React from 'react';
const legacy = require('./legacy');

// Docs live at https://example.com/docs
export function main() {
    return helper();
}

export const VERSION = "1.0";
""")

        (root / "src" / "helper.ts").write_text("""
export async function helper() {
    return 42;
}

export class Helper {}
""")

        (root / "src" / "legacy.js").write_text("""
module.exports = { old: true };
""")

        (root / "README.md").write_text("""
# Test Workspace

See [the app](src/app.ts) and [[notes]].
Project home: https://example.com/docs
""")

        (root / "docs" / "Notes.md").write_text("""
Back to [readme](../README.md#top). Missing [[nowhere]].
""")

        (root / "data.sqlite").write_bytes(b"SQLite format 3\x00\xff\xfe\x00binary")

        # not indexed
        (root / "notes.txt").write_text("plain text [[README]]")
        (root / "node_modules" / "lib" / "index.js").write_text("export const hidden = 1;")

        yield root

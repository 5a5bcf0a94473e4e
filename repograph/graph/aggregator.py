import os
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from threading import Event
from typing import AbstractSet, Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..config import settings
from ..detectors import get_detector
from ..scanner.classifier import classify_path
from ..scanner.local_workspace_scanner import LocalWorkspaceScanner
from ..types import (
    BuildCancelledError,
    Edge,
    EdgeKind,
    FileFailure,
    FileLoadError,
    GraphResult,
    LocalGraph,
    Node,
    NodeType,
)
from ..utils.logger import app_logger

LoadText = Callable[[str], str]


class GraphAccumulator:
    """Merges local subgraphs into one graph.

    Nodes are deduplicated by id and the first instance merged is kept. Edges
    are kept as a multiset; edges with an endpoint missing from the merged
    node set are dropped when the result is produced.
    """

    def __init__(self):
        self._nodes: Dict[str, Node] = {}
        self._edges: List[Edge] = []

    def merge(self, local: LocalGraph):
        for node in local.nodes:
            self._nodes.setdefault(node.id, node)
        self._edges.extend(local.edges)

    def to_result(self, failures: List[FileFailure], metadata: Dict) -> GraphResult:
        nodes = [self._nodes[node_id] for node_id in sorted(self._nodes)]
        edges = sorted(
            (edge for edge in self._edges
             if edge.source in self._nodes and edge.target in self._nodes),
            key=Edge.sort_key,
        )
        return GraphResult(nodes=nodes, edges=edges, failures=failures, metadata=metadata)


class GraphAggregator:
    """Runs detectors over a workspace snapshot and merges their output."""

    POLL_INTERVAL = 0.05

    def __init__(
        self,
        load_text: Optional[LoadText] = None,
        max_workers: Optional[int] = None,
        build_timeout: Optional[float] = None,
        include_imports: Optional[bool] = None,
        include_declarations: Optional[bool] = None,
        include_urls: Optional[bool] = None,
    ):
        self.load_text = load_text or LocalWorkspaceScanner().load_file_content
        self.max_workers = max_workers or settings.max_workers
        self.build_timeout = build_timeout or settings.build_timeout
        self.include_imports = settings.include_imports if include_imports is None else include_imports
        self.include_declarations = (
            settings.include_declarations if include_declarations is None else include_declarations
        )
        self.include_urls = settings.include_urls if include_urls is None else include_urls
        self.logger = app_logger.bind(component="aggregator")

        # State of the last completed build; replaced only on success.
        self.last_result: Optional[GraphResult] = None
        self._known_files: Optional[FrozenSet[str]] = None
        self._local_graphs: Dict[str, LocalGraph] = {}
        self._failures: Dict[str, FileFailure] = {}

    @staticmethod
    def known_file_set(file_paths: Iterable[str]) -> FrozenSet[str]:
        """Normalize a workspace snapshot into the set of indexable paths."""
        return frozenset(
            os.path.normpath(path) for path in file_paths
            if classify_path(path) is not None
        )

    def detect_file(self, file_path: str, known_files: AbstractSet[str]) -> Optional[LocalGraph]:
        """Run the matching detector for one file."""
        detector = get_detector(classify_path(file_path))
        if detector is None:
            return None

        text = self.load_text(file_path) if detector.needs_text else None
        local = detector.detect(file_path, text, known_files)
        self.logger.debug(
            f"Detected {file_path}: {len(local.nodes)} nodes, {len(local.edges)} edges"
        )
        return local

    def build(self, file_paths: Iterable[str], cancel_event: Optional[Event] = None) -> GraphResult:
        """Build the graph for a full workspace snapshot.

        Args:
            file_paths: Absolute paths of the workspace files. Unsupported
                files are ignored.
            cancel_event: Setting this event abandons the build.

        Returns:
            The aggregated graph, with per-file failures as diagnostics.

        Raises:
            BuildCancelledError: cancel_event was set before the build finished.
                The previous result is left untouched.
        """
        started = time.monotonic()
        known_files = self.known_file_set(file_paths)
        self.logger.info(f"Building graph for {len(known_files)} files")

        local_graphs, failures = self._run_detectors(sorted(known_files), known_files, cancel_event)

        return self._commit(known_files, local_graphs, failures, started)

    def refresh(
        self,
        file_paths: Iterable[str],
        changed_paths: Iterable[str],
        cancel_event: Optional[Event] = None,
    ) -> GraphResult:
        """Rebuild after some files changed.

        When the known-file set is the same as in the last build only the
        changed files are re-detected; any addition or removal of files
        changes how references resolve, so a full build runs instead.
        """
        known_files = self.known_file_set(file_paths)
        if self._known_files is None or known_files != self._known_files:
            self.logger.info("Workspace file set changed, running full build")
            return self.build(known_files, cancel_event)

        started = time.monotonic()
        changed = sorted(self.known_file_set(changed_paths) & known_files)
        self.logger.info(f"Refreshing {len(changed)} changed files")

        updated, updated_failures = self._run_detectors(changed, known_files, cancel_event)

        local_graphs = dict(self._local_graphs)
        failures = dict(self._failures)
        for path in changed:
            local_graphs.pop(path, None)
            failures.pop(path, None)
        local_graphs.update(updated)
        failures.update(updated_failures)

        return self._commit(known_files, local_graphs, failures, started)

    def _run_detectors(
        self,
        paths: List[str],
        known_files: FrozenSet[str],
        cancel_event: Optional[Event],
    ) -> Tuple[Dict[str, LocalGraph], Dict[str, FileFailure]]:
        local_graphs: Dict[str, LocalGraph] = {}
        failures: Dict[str, FileFailure] = {}
        if not paths:
            return local_graphs, failures

        self._check_cancelled(cancel_event)
        deadline = time.monotonic() + self.build_timeout

        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        futures: Dict[Future, str] = {
            executor.submit(self.detect_file, path, known_files): path for path in paths
        }
        pending = set(futures)
        try:
            # This loop is the only writer of local_graphs and failures.
            while pending:
                self._check_cancelled(cancel_event)
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                done, pending = wait(
                    pending,
                    timeout=min(remaining, self.POLL_INTERVAL),
                    return_when=FIRST_COMPLETED,
                )
                for future in done:
                    self._collect(futures[future], future, local_graphs, failures)

            self._check_cancelled(cancel_event)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        for future in pending:
            path = futures[future]
            failures[path] = FileFailure(path, f"timed out after {self.build_timeout}s")
            self.logger.warning(f"Skipping {path}: build timed out")

        return local_graphs, failures

    def _collect(
        self,
        path: str,
        future: Future,
        local_graphs: Dict[str, LocalGraph],
        failures: Dict[str, FileFailure],
    ):
        try:
            local = future.result()
        except FileLoadError as e:
            failures[path] = FileFailure(path, e.reason)
            self.logger.warning(f"Skipping {path}: {e.reason}")
        except Exception as e:
            failures[path] = FileFailure(path, f"{type(e).__name__}: {e}")
            self.logger.error(f"Detector failed for {path}: {e}")
        else:
            if local is not None:
                local_graphs[path] = local

    def _check_cancelled(self, cancel_event: Optional[Event]):
        if cancel_event is not None and cancel_event.is_set():
            self.logger.info("Graph build cancelled, discarding partial results")
            raise BuildCancelledError("graph build cancelled")

    def _commit(
        self,
        known_files: FrozenSet[str],
        local_graphs: Dict[str, LocalGraph],
        failures: Dict[str, FileFailure],
        started: float,
    ) -> GraphResult:
        accumulator = GraphAccumulator()
        # sorted merge order makes the kept duplicate deterministic
        for path in sorted(local_graphs):
            accumulator.merge(self._filter(local_graphs[path]))

        failure_list = [failures[path] for path in sorted(failures)]
        metadata = {
            "file_count": len(known_files),
            "indexed_file_count": len(local_graphs),
            "failure_count": len(failure_list),
            "duration_seconds": round(time.monotonic() - started, 3),
        }
        result = accumulator.to_result(failure_list, metadata)
        result.metadata["node_count"] = len(result.nodes)
        result.metadata["edge_count"] = len(result.edges)

        self._known_files = known_files
        self._local_graphs = local_graphs
        self._failures = failures
        self.last_result = result

        self.logger.info(
            f"Graph complete: {len(result.nodes)} nodes, {len(result.edges)} edges, "
            f"{len(failure_list)} failures"
        )
        return result

    def _filter(self, local: LocalGraph) -> LocalGraph:
        """Apply the configured content switches to one local graph."""
        if self.include_imports and self.include_declarations and self.include_urls:
            return local

        dropped_nodes = set()
        dropped_edges = set()
        if not self.include_imports:
            dropped_edges.add(EdgeKind.IMPORT)
        if not self.include_declarations:
            dropped_nodes.add(NodeType.FN)
            dropped_edges.add(EdgeKind.DECLARES)
        if not self.include_urls:
            dropped_nodes.add(NodeType.URL)
            dropped_edges.add(EdgeKind.URL)

        return LocalGraph(
            nodes=[node for node in local.nodes if node.type not in dropped_nodes],
            edges=[edge for edge in local.edges if edge.kind not in dropped_edges],
        )


def build_workspace_graph(
    root_path: Optional[str] = None,
    max_workers: Optional[int] = None,
    cancel_event: Optional[Event] = None,
) -> GraphResult:
    """Scan a workspace directory and build its graph."""
    scanner = LocalWorkspaceScanner(root_path)
    aggregator = GraphAggregator(load_text=scanner.load_file_content, max_workers=max_workers)
    return aggregator.build(scanner.scan_directory(), cancel_event=cancel_event)

from pathlib import Path
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from repograph.detectors.markdown import MarkdownDetector
from repograph.types import Edge, EdgeKind, NodeType


DOC = "/ws/README.md"


def edges_of_kind(graph, kind):
    return [edge for edge in graph.edges if edge.kind == kind]


class TestMarkdownFileNode:
    """Test the whole-file node of a markdown document."""

    def test_file_node(self, markdown_detector: MarkdownDetector, known_files):
        graph = markdown_detector.detect(DOC, "# Title", known_files)

        assert len(graph.nodes) == 1
        node = graph.nodes[0]
        assert node.id == DOC
        assert node.label == "README.md"
        assert node.type == NodeType.MD
        assert node.file_path == DOC
        assert graph.edges == []

    def test_empty_content(self, markdown_detector: MarkdownDetector, known_files):
        graph = markdown_detector.detect(DOC, "", known_files)
        assert [node.id for node in graph.nodes] == [DOC]
        assert graph.edges == []


class TestWikilinks:
    """Test [[wikilink]] resolution."""

    def test_case_insensitive_base_name(self, markdown_detector: MarkdownDetector, known_files):
        graph = markdown_detector.detect(DOC, "See [[notes]].", known_files)

        assert edges_of_kind(graph, EdgeKind.WIKILINK) == [
            Edge(source=DOC, target="/ws/docs/Notes.md", kind=EdgeKind.WIKILINK)
        ]

    def test_alias_and_anchor(self, markdown_detector: MarkdownDetector, known_files):
        text = "[[Notes|my notes]] and [[guide#install]] and [[ view ]]"
        graph = markdown_detector.detect(DOC, text, known_files)

        targets = [edge.target for edge in edges_of_kind(graph, EdgeKind.WIKILINK)]
        assert targets == ["/ws/docs/Notes.md", "/ws/docs/guide.md", "/ws/src/view.tsx"]

    def test_extension_in_target_does_not_match(self, markdown_detector: MarkdownDetector, known_files):
        graph = markdown_detector.detect(DOC, "[[Notes.md]]", known_files)
        assert edges_of_kind(graph, EdgeKind.WIKILINK) == []

    def test_dangling_wikilink_is_dropped(self, markdown_detector: MarkdownDetector, known_files):
        graph = markdown_detector.detect(DOC, "[[does not exist]]", known_files)
        assert edges_of_kind(graph, EdgeKind.WIKILINK) == []

    def test_ambiguous_base_name_picks_smallest_path(self, markdown_detector: MarkdownDetector, known_files):
        # foo.js and foo.ts share the base name "foo"
        graph = markdown_detector.detect(DOC, "[[foo]]", known_files)

        assert [edge.target for edge in graph.edges] == ["/ws/src/foo.js"]

    def test_tie_break_ignores_set_order(self, markdown_detector: MarkdownDetector):
        paths = ["/ws/b/Topic.md", "/ws/a/topic.md", "/ws/c/TOPIC.ts"]
        for ordering in (paths, list(reversed(paths))):
            known = frozenset(ordering)
            graph = markdown_detector.detect(DOC, "[[Topic]]", known)
            assert [edge.target for edge in graph.edges] == ["/ws/a/topic.md"]

    def test_malformed_wikilinks(self, markdown_detector: MarkdownDetector, known_files):
        text = "[[]] [[ ]] [[notes [[|alias]] [[#anchor]]"
        graph = markdown_detector.detect(DOC, text, known_files)
        assert edges_of_kind(graph, EdgeKind.WIKILINK) == []


class TestInlineLinks:
    """Test [text](target) resolution."""

    def test_relative_link(self, markdown_detector: MarkdownDetector, known_files):
        graph = markdown_detector.detect("/ws/docs/guide.md", "[home](../README.md)", known_files)

        assert edges_of_kind(graph, EdgeKind.MDLINK) == [
            Edge(source="/ws/docs/guide.md", target="/ws/README.md", kind=EdgeKind.MDLINK)
        ]

    def test_fragment_is_stripped(self, markdown_detector: MarkdownDetector, known_files):
        graph = markdown_detector.detect(DOC, "[notes](docs/Notes.md#section-2)", known_files)
        assert [edge.target for edge in edges_of_kind(graph, EdgeKind.MDLINK)] == ["/ws/docs/Notes.md"]

    def test_dot_segments(self, markdown_detector: MarkdownDetector, known_files):
        graph = markdown_detector.detect(DOC, "[app](./src/../src/app.ts)", known_files)
        assert [edge.target for edge in edges_of_kind(graph, EdgeKind.MDLINK)] == ["/ws/src/app.ts"]

    def test_no_extension_guessing(self, markdown_detector: MarkdownDetector, known_files):
        graph = markdown_detector.detect(DOC, "[notes](docs/Notes)", known_files)
        assert edges_of_kind(graph, EdgeKind.MDLINK) == []

    def test_external_and_anchor_links_are_skipped(self, markdown_detector: MarkdownDetector, known_files):
        text = "[site](https://example.com/README.md) [top](#top) [plain](http://x.org)"
        graph = markdown_detector.detect(DOC, text, known_files)
        assert edges_of_kind(graph, EdgeKind.MDLINK) == []

    def test_percent_encoded_and_titled_links(self, markdown_detector: MarkdownDetector, known_files):
        text = '[a](docs/setup%20guide.md) [b](<docs/setup guide.md>) [c](docs/guide.md "Guide")'
        graph = markdown_detector.detect(DOC, text, known_files)

        targets = [edge.target for edge in edges_of_kind(graph, EdgeKind.MDLINK)]
        assert targets == ["/ws/docs/setup guide.md", "/ws/docs/setup guide.md", "/ws/docs/guide.md"]

    def test_dangling_link_is_dropped(self, markdown_detector: MarkdownDetector, known_files):
        graph = markdown_detector.detect(DOC, "[gone](docs/missing.md) [x]()", known_files)
        assert edges_of_kind(graph, EdgeKind.MDLINK) == []


class TestMarkdownUrls:
    """Test URL externalization in markdown."""

    def test_url_node_and_edge(self, markdown_detector: MarkdownDetector, known_files):
        graph = markdown_detector.detect(DOC, "Visit http://x.com today.", known_files)

        url_nodes = [node for node in graph.nodes if node.type == NodeType.URL]
        assert len(url_nodes) == 1
        assert url_nodes[0].id == "url:http://x.com"
        assert url_nodes[0].label == "http://x.com"
        assert url_nodes[0].file_path is None
        assert url_nodes[0].meta == {"url": "http://x.com"}
        assert edges_of_kind(graph, EdgeKind.URL) == [
            Edge(source=DOC, target="url:http://x.com", kind=EdgeKind.URL)
        ]

    def test_url_inside_inline_link(self, markdown_detector: MarkdownDetector, known_files):
        graph = markdown_detector.detect(DOC, "[docs](https://example.com/a_(b))", known_files)
        assert [edge.target for edge in graph.edges] == ["url:https://example.com/a_(b)"]

    def test_emphasis_around_url_is_trimmed(self, markdown_detector: MarkdownDetector, known_files):
        text = "See **https://x.com** now, _https://x.com/a_b_ and ~~https://x.com~~."
        graph = markdown_detector.detect(DOC, text, known_files)

        assert [edge.target for edge in graph.edges] == [
            "url:https://x.com", "url:https://x.com/a_b", "url:https://x.com",
        ]
        assert {node.id for node in graph.nodes if node.type == NodeType.URL} == {
            "url:https://x.com", "url:https://x.com/a_b",
        }

    def test_all_scans_run(self, markdown_detector: MarkdownDetector, known_files):
        text = "[[guide]] [app](src/app.ts) https://example.com/q?a=1&b=2"
        graph = markdown_detector.detect(DOC, text, known_files)

        kinds = sorted(edge.kind.value for edge in graph.edges)
        assert kinds == ["mdlink", "url", "wikilink"]

    def test_repeated_detection_is_identical(self, markdown_detector: MarkdownDetector, known_files):
        text = "[[notes]] [[foo]] [g](docs/guide.md) https://a.io https://b.io/x"
        first = markdown_detector.detect(DOC, text, known_files)
        second = markdown_detector.detect(DOC, text, known_files)

        assert [node.to_dict() for node in first.nodes] == [node.to_dict() for node in second.nodes]
        assert first.edges == second.edges

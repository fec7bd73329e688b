"""
Unit tests for the Document extraction session and its retry loop.
"""

import pytest

from quarryreader import ConfigError, ParseError
from quarryreader.config import ReadabilityConfig
from quarryreader.extractor import Document, RelaxationLevel, new_document
from quarryreader.observability import METRICS
from tests.helpers import histogram_observes, metric_delta

FERRY_PROSE = """<p>The morning ferry left the harbour twenty minutes late because fog had settled over the narrow channel.</p>
<p>Passengers waited on the pier with coffee from the kiosk while the crew checked the radar twice more.</p>
<p>Once the fog lifted the crossing was smooth and the boat reached the island shortly before noon.</p>"""

FERRY_PAGE = f"""<html><head><title>Ferry</title></head><body>
<div class="extra">
{FERRY_PROSE}
</div>
</body></html>"""

BLOCKS_PAGE = """<html><head><title>title!</title></head>
          <body>
            <div>
              <p>a<br>b<hr>c<address>d</address>f</p>
            </div>
          </body>
        </html>"""


class CapturingLogger:
    """Minimal structlog-style logger recording (level, event, fields)."""

    def __init__(self):
        self.events = []

    def bind(self, **kwargs):
        return self

    def _record(self, level, event, /, **kwargs):
        self.events.append((level, event, kwargs))

    def debug(self, event, **kwargs):
        self._record("debug", event, **kwargs)

    def info(self, event, **kwargs):
        self._record("info", event, **kwargs)

    def messages(self):
        return [event for _, event, _ in self.events]


class RejectingProvider:
    """Tree provider that refuses every input."""

    def parse(self, text):
        raise ParseError("rejected")


class TestDocumentBasics:
    """Test cases for extraction on small documents."""

    def test_general_functionality(self):
        html = "<html><head><title>title!</title></head><body><div><p>Some content</p></div></body>"
        doc = new_document(html, min_text_length=0, retry_length=1)

        content = doc.content()

        assert content == "<head><title>title!</title></head><div><div><p>Some content</p></div></div>"
        assert doc.text() == "Some content"
        assert doc.title() == "title!"
        assert doc.attempts == 1
        assert doc.best_candidate.node.name == "div"
        assert doc.best_candidate.score == 7

    def test_ignores_sidebars(self):
        html = (
            "html><head><title>title!</title></head><body><div><p>Some content</p></div>"
            "<div class='sidebar'><p>sidebar<p></div></body>"
        )
        logger = CapturingLogger()
        doc = new_document(html, logger=logger, min_text_length=0, retry_length=1)

        content = doc.content()

        assert "Some content" in content
        assert "sidebar" not in content
        assert "Removing unlikely candidate" in logger.messages()

    def test_block_elements_keep_words_apart(self):
        doc = Document(BLOCKS_PAGE)

        assert "a b c d f" not in doc.content()
        assert doc.text() == "a\nb\nc\nd\nf"

    def test_script_and_style_never_reach_output(self):
        html = (
            "<html><head><style>p { color: red; }</style></head><body><div>"
            "<script>var beacon = 1;</script><p>Some content</p></div></body></html>"
        )
        content = new_document(html, min_text_length=0, retry_length=1).content()

        assert "beacon" not in content
        assert "color: red" not in content
        assert "Some content" in content


class TestRetryLoop:
    """Test cases for progressive relaxation."""

    def test_strict_run_that_is_long_enough_stops(self):
        doc = Document(FERRY_PAGE, ReadabilityConfig(remove_unlikely_candidates=False))

        result = doc.extract()

        assert result.attempts == 1
        assert result.relaxation_level == RelaxationLevel.RELAX_UNLIKELY
        assert "morning ferry" in result.text

    def test_relaxes_unlikely_filter_first(self):
        doc = Document(FERRY_PAGE)

        text = doc.text()

        assert "morning ferry" in text
        assert "island shortly before noon" in text
        assert doc.attempts == 2
        assert doc.relaxation_level == RelaxationLevel.RELAX_UNLIKELY
        assert doc.config.remove_unlikely_candidates is False
        assert doc.config.weight_classes is True
        assert doc.config.clean_conditionally is True

    def test_runs_at_most_four_times(self):
        doc = Document(BLOCKS_PAGE)
        doc.content()

        assert doc.attempts == 4
        assert doc.relaxation_level == RelaxationLevel.RELAX_CONDITIONAL
        assert not doc.config.remove_unlikely_candidates
        assert not doc.config.weight_classes
        assert not doc.config.clean_conditionally

    def test_retry_logs_each_relaxation(self):
        logger = CapturingLogger()
        Document(BLOCKS_PAGE, logger=logger).content()

        levels = [fields["level"] for _, event, fields in logger.events if event == "Article too short, relaxing"]
        assert levels == ["relax_unlikely", "relax_weight", "relax_conditional"]

    def test_retry_length_zero_never_relaxes(self):
        doc = new_document(BLOCKS_PAGE, retry_length=0)
        doc.content()

        assert doc.attempts == 1
        assert doc.relaxation_level == RelaxationLevel.STRICT

    def test_caller_config_is_not_mutated(self):
        config = ReadabilityConfig()
        Document(BLOCKS_PAGE, config).content()

        assert config.remove_unlikely_candidates is True
        assert config.weight_classes is True
        assert config.clean_conditionally is True

    def test_content_is_memoized(self):
        doc = Document(BLOCKS_PAGE)

        first = doc.content()
        second = doc.content()

        assert first == second
        assert doc.attempts == 4

    def test_config_can_be_tuned_before_first_content(self):
        doc = Document("<html><body><div><p>Some content</p></div></body></html>")
        doc.config.min_text_length = 0
        doc.config.retry_length = 1

        assert doc.content().endswith("<div><div><p>Some content</p></div></div>")
        assert doc.attempts == 1


class TestMissingBody:
    """Test cases for input without a body element."""

    def test_document_without_body(self):
        doc = Document("<html><head><title>Nothing</title></head></html>")

        assert doc.content() == "<head><title>Nothing</title></head><div><div></div></div>"
        assert doc.text() == ""
        assert doc.title() == "Nothing"
        assert doc.attempts == 4

    def test_empty_string(self):
        logger = CapturingLogger()
        doc = Document("", logger=logger)

        assert doc.text() == ""
        assert doc.title() == ""
        assert "Document has no body, using an empty one" in logger.messages()

    def test_extract_result_without_title(self):
        result = Document("").extract("https://example.com/empty")

        assert result.url == "https://example.com/empty"
        assert result.title is None
        assert result.text == ""
        assert result.attempts == 4

    def test_html_without_body_tag(self):
        doc = Document(f'<html><head><title>Ferry</title></head><div class="post">{FERRY_PROSE}</div></html>')

        text = doc.text()

        assert "morning ferry" in text
        assert "island shortly before noon" in text
        assert doc.title() == "Ferry"
        assert doc.attempts == 1
        assert doc.best_candidate.node.get("class") == ["post"]

    def test_bare_fragment(self):
        doc = Document(f'<div class="post">{FERRY_PROSE}</div>')

        assert "island shortly before noon" in doc.text()
        assert doc.attempts == 1
        assert doc.relaxation_level == RelaxationLevel.STRICT


class TestErrors:
    """Test cases for construction failures."""

    def test_non_string_input(self):
        with pytest.raises(ParseError):
            Document(b"<p>bytes</p>")

    def test_rejecting_tree_provider(self):
        with pytest.raises(ParseError, match="rejected"):
            Document("<p>x</p>", tree_provider=RejectingProvider())

    def test_unknown_parser(self):
        with pytest.raises(ConfigError):
            new_document("<p>x</p>", parser="no-such-parser")


class TestMetrics:
    """Test cases for extraction metrics."""

    def test_counts_documents_and_attempts(self):
        with metric_delta(METRICS["documents_extracted"]):
            with metric_delta(METRICS["extraction_attempts"], 1, level="strict"):
                with metric_delta(METRICS["extraction_attempts"], 1, level="relax_conditional"):
                    Document(BLOCKS_PAGE).content()

    def test_records_duration(self):
        with histogram_observes(METRICS["extraction_duration_seconds"]):
            Document(FERRY_PAGE).content()

    def test_counts_removed_nodes(self):
        with metric_delta(METRICS["nodes_removed"], 1, reason="unlikely"):
            Document(FERRY_PAGE).content()

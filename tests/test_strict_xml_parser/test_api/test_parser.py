"""Tests for the public parsing API."""

import logging
import threading

import pytest

from strict_xml_parser import (
    ParserConfig,
    ParseResult,
    StrictXMLParser,
    XMLElement,
    XMLSyntaxError,
    parse,
    parse_file,
    parse_string,
)
from strict_xml_parser.shared import DiagnosticSeverity


class TestParseFunctions:
    """Test the Level 1 module functions."""

    def test_parse_simple_document(self) -> None:
        """Test parsing a small document."""
        root = parse('<a x="1" y="2">hi</a>')
        assert root.tag == "a"
        assert root.attributes == {"x": "1", "y": "2"}
        assert root.value == "hi"
        assert root.children == []

    def test_parse_string_matches_parse(self) -> None:
        text = "<r><a>1</a><b>2</b></r>"
        assert parse_string(text) == parse(text)

    def test_parse_rejects_malformed_input(self) -> None:
        with pytest.raises(XMLSyntaxError, match="Closing tag doesn't match"):
            parse("<a>x</b>")

    def test_syntax_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse("")

    def test_parse_rejects_trailing_garbage_by_default(self) -> None:
        with pytest.raises(XMLSyntaxError, match="Unexpected character"):
            parse("<a>x</a> trailing")

    def test_parse_lenient_config(self) -> None:
        root = parse("<a>x</a> trailing", config=ParserConfig.lenient())
        assert root == XMLElement("a", value="x")

    def test_parse_file(self, tmp_path) -> None:
        """Test reading and parsing a file."""
        path = tmp_path / "doc.xml"
        path.write_text('<doc lang="é"><p>caf&eacute;</p></doc>', encoding="utf-8")
        root = parse_file(path)
        assert root.get_attribute("lang") == "é"
        assert root.find_child("p").value == "caf&eacute;"

    def test_parse_file_accepts_str_path(self, tmp_path) -> None:
        path = tmp_path / "doc.xml"
        path.write_text("<a/>", encoding="latin-1")
        assert parse_file(str(path), encoding="latin-1") == XMLElement("a")

    def test_parse_file_missing(self, tmp_path) -> None:
        with pytest.raises(OSError):
            parse_file(tmp_path / "missing.xml")


class TestStrictXMLParser:
    """Test the Level 2 configured parser."""

    def test_parse_detailed(self) -> None:
        """Test the detailed result carries tokens and metrics."""
        parser = StrictXMLParser(correlation_id="req-7")
        result = parser.parse_detailed("<r><a>1</a><b/></r>")

        assert isinstance(result, ParseResult)
        assert result.root.tag == "r"
        assert result.element_count == 3
        assert not result.truncated
        assert result.correlation_id == "req-7"
        assert result.performance.tokens_generated == result.tokenization.token_count
        assert result.performance.elements_built == 3
        assert result.performance.characters_processed == 19
        assert result.performance.processing_time_ms >= 0

    def test_parse_detailed_lenient_diagnostics(self) -> None:
        parser = StrictXMLParser(ParserConfig.lenient())
        result = parser.parse_detailed("<a>x</a>?")

        assert result.truncated
        assert [d.severity for d in result.diagnostics] == [DiagnosticSeverity.WARNING]
        data = result.to_dict()
        assert data["truncated"] is True
        assert data["root"] == {"tag": "a", "attributes": {}, "value": "x"}
        assert data["diagnostics"][0]["details"] == {"dropped_characters": 1}

    def test_tokenize_only(self) -> None:
        result = StrictXMLParser().tokenize("<a/>")
        assert result.token_count == 4

    def test_non_string_input(self) -> None:
        with pytest.raises(TypeError, match="Expected str input"):
            StrictXMLParser().parse(b"<a/>")  # type: ignore[arg-type]

    def test_rejection_is_logged(self, caplog) -> None:
        caplog.set_level(logging.INFO, logger="strict_xml_parser")
        with pytest.raises(XMLSyntaxError):
            StrictXMLParser().parse("<a>")
        assert "Parse rejected malformed input" in caplog.text

    def test_tree_config_is_applied(self) -> None:
        parser = StrictXMLParser(ParserConfig().override(tree__max_depth=1))
        assert parser.parse("<a>x</a>").value == "x"
        with pytest.raises(XMLSyntaxError, match="Maximum nesting depth"):
            parser.parse("<a><b>x</b></a>")

    def test_shared_parser_across_threads(self) -> None:
        """Test concurrent calls on one parser do not interfere."""
        parser = StrictXMLParser()
        results = {}
        errors = []

        def worker(index: int) -> None:
            try:
                for _ in range(20):
                    root = parser.parse(f'<r n="{index}"><v>{index}</v></r>')
                    assert root.find_child("v").value == str(index)
                results[index] = root.get_attribute("n")
            except AssertionError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert results == {i: str(i) for i in range(8)}

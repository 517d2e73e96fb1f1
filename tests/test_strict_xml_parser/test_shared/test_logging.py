"""Tests for correlation-aware logging."""

import logging

from strict_xml_parser import StrictXMLParser
from strict_xml_parser.shared import get_logger


class TestCorrelationLogger:
    """Test structured fields on emitted records."""

    def test_records_carry_component_and_correlation_id(self, caplog) -> None:
        """Test every record is stamped with component and correlation ID."""
        caplog.set_level(logging.DEBUG, logger="strict_xml_parser.test")
        logger = get_logger("strict_xml_parser.test", "req-1", "unit")
        logger.info("hello", extra={"count": 3})

        record = caplog.records[-1]
        assert record.getMessage() == "hello"
        assert record.component == "unit"
        assert record.correlation_id == "req-1"
        assert record.count == 3

    def test_component_defaults_to_module_name(self) -> None:
        assert get_logger("strict_xml_parser.tree.builder").component == "builder"

    def test_disabled_levels_emit_nothing(self, caplog) -> None:
        caplog.set_level(logging.WARNING, logger="strict_xml_parser.quiet")
        get_logger("strict_xml_parser.quiet").debug("hidden")
        assert caplog.records == []

    def test_parser_records_share_correlation_id(self, caplog) -> None:
        caplog.set_level(logging.DEBUG, logger="strict_xml_parser")
        StrictXMLParser(correlation_id="job-9").parse("<a>x</a>")

        records = [r for r in caplog.records if r.name.startswith("strict_xml_parser")]
        assert records
        assert {r.correlation_id for r in records} == {"job-9"}
        assert "xml_tokenizer" in {r.component for r in records}

"""Public parsing API.

Level 1 is the module functions ``parse``, ``parse_string`` and
``parse_file``, which return the root ``XMLElement``. Level 2 is
``StrictXMLParser``, a configured parser that can also return a
``ParseResult`` with tokens, diagnostics and timing.

Every call tokenizes and builds in local state only, so the functions and a
shared ``StrictXMLParser`` instance are safe to use from several threads.
"""

import time
from pathlib import Path
from typing import Optional, Union

from strict_xml_parser.shared import (
    ParserConfig,
    PerformanceMetrics,
    XMLSyntaxError,
    get_logger,
)
from strict_xml_parser.tokenization import TokenizationResult, XMLTokenizer
from strict_xml_parser.tree import ParseResult, XMLElement, XMLTreeBuilder

PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000


class StrictXMLParser:
    """Configured parser.

    Examples:
        >>> parser = StrictXMLParser(ParserConfig.lenient())
        >>> parser.parse('<root><item id="1">Hello</item></root>').tag
        'root'
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, "strict_xml_parser")
        self._tokenizer = XMLTokenizer(self.config.tokenization, correlation_id)

    def tokenize(self, text: str) -> TokenizationResult:
        """Run only the lexer over ``text``."""
        return self._tokenizer.tokenize(text)

    def parse(self, text: str) -> XMLElement:
        """Parse ``text`` and return its root element.

        Raises:
            XMLSyntaxError: If ``text`` is not a well-formed document.
        """
        return self.parse_detailed(text).root

    def parse_detailed(self, text: str) -> ParseResult:
        """Parse ``text`` and return the tree with tokens, diagnostics and timing.

        Raises:
            XMLSyntaxError: If ``text`` is not a well-formed document.
        """
        if not isinstance(text, str):
            raise TypeError(f"Expected str input, got {type(text).__name__}")

        start_time = time.time()
        self._logger.info(
            "Starting parse operation",
            extra={
                "content_length": len(text),
                "preview": (
                    text[:PREVIEW_LENGTH] + "..."
                    if len(text) > PREVIEW_LENGTH else text
                ),
            }
        )

        try:
            tokenization = self._tokenizer.tokenize(text)
            builder = XMLTreeBuilder(
                tokenization.tokens, self.config.tree, self.correlation_id
            )
            root = builder.build()
        except XMLSyntaxError as e:
            self._logger.info(
                "Parse rejected malformed input",
                extra={
                    "error": e.message,
                    "position": e.position.to_dict() if e.position else None,
                }
            )
            raise

        result = ParseResult(
            root=root,
            tokenization=tokenization,
            diagnostics=list(tokenization.diagnostics),
            correlation_id=self.correlation_id,
        )
        result.performance = PerformanceMetrics(
            processing_time_ms=(time.time() - start_time) * MS_PER_SECOND,
            characters_processed=tokenization.consumed,
            tokens_generated=tokenization.token_count,
            elements_built=result.element_count,
        )
        self._logger.debug(
            "Parse operation complete",
            extra={
                "root_tag": root.tag,
                "element_count": result.performance.elements_built,
                "processing_time_ms": result.performance.processing_time_ms,
            }
        )
        return result


def parse(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> XMLElement:
    """Parse markup text into an element tree.

    Examples:
        >>> root = parse('<a x="1" y="2">hi</a>')
        >>> root.tag, root.attributes, root.value
        ('a', {'x': '1', 'y': '2'}, 'hi')

    Raises:
        XMLSyntaxError: If ``text`` is not a well-formed document.
    """
    return StrictXMLParser(config, correlation_id).parse(text)


def parse_string(
    xml_string: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> XMLElement:
    """Parse XML from a string; same as ``parse``."""
    return parse(xml_string, config, correlation_id)


def parse_file(
    file_path: Union[str, Path],
    encoding: str = "utf-8",
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> XMLElement:
    """Read ``file_path`` and parse its contents.

    Raises:
        OSError: If the file cannot be read.
        XMLSyntaxError: If the contents are not a well-formed document.
    """
    path = Path(file_path)
    logger = get_logger(__name__, correlation_id, "parse_file")
    logger.debug("Reading XML file", extra={"file_path": str(path), "encoding": encoding})
    text = path.read_text(encoding=encoding)
    return parse(text, config, correlation_id)

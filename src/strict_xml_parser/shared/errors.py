"""Exception raised for malformed markup."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from strict_xml_parser.tokenization.tokenizer import TokenPosition


class XMLSyntaxError(ValueError):
    """Malformed input detected by the tokenizer or the tree builder.

    Attributes:
        message: Human readable description without positional suffix
        position: Position of the offending token or character, if known
        expected: What the parser was looking for, if applicable
        found: What was actually present, if applicable
    """

    def __init__(
        self,
        message: str,
        position: Optional["TokenPosition"] = None,
        expected: Optional[str] = None,
        found: Optional[str] = None,
    ) -> None:
        self.message = message
        self.position = position
        self.expected = expected
        self.found = found
        super().__init__(self._format())

    def _format(self) -> str:
        if self.position is None:
            return self.message
        return (
            f"{self.message} (line {self.position.line}, "
            f"column {self.position.column})"
        )

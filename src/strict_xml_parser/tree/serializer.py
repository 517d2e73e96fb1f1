"""Serialization of element trees back to markup text."""

from typing import TYPE_CHECKING, List, Optional

from strict_xml_parser.character import encode

if TYPE_CHECKING:
    from .builder import XMLElement


def serialize(element: "XMLElement", indent: Optional[int] = None) -> str:
    """Render ``element`` and its subtree as markup.

    Attribute values and text are entity-encoded. Elements with neither a
    value nor children are written in the ``<tag/>`` form.

    Args:
        element: Root of the subtree to render
        indent: Number of spaces per nesting level; None keeps everything
            on a single line

    Returns:
        Markup text that parses back to an equal tree, provided no text
        value starts with whitespace
    """
    parts: List[str] = []
    _write(element, parts, indent, 0)
    return "".join(parts)


def _start_tag(element: "XMLElement") -> str:
    attributes = "".join(
        f' {name}="{encode(value)}"' for name, value in element.attributes.items()
    )
    return f"<{element.tag}{attributes}"


def _write(element: "XMLElement", parts: List[str], indent: Optional[int], level: int) -> None:
    pad = " " * (indent * level) if indent else ""
    parts.append(pad)
    parts.append(_start_tag(element))

    if element.children:
        parts.append(">")
        for child in element.children:
            if indent:
                parts.append("\n")
            _write(child, parts, indent, level + 1)
        if indent:
            parts.append("\n" + pad)
        parts.append(f"</{element.tag}>")
    elif element.value:
        parts.append(f">{encode(element.value)}</{element.tag}>")
    else:
        parts.append("/>")

#!/usr/bin/env python3
"""
Quick Start Guide for the Strict XML Parser.

This example walks through parsing, navigating, serializing and handling
syntax errors with the public API.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from strict_xml_parser import (
    ParserConfig,
    StrictXMLParser,
    XMLSyntaxError,
    encode,
    parse,
)
from strict_xml_parser.api.adapters import get_adapter

CATALOG = """
<!-- sample catalog -->
<catalog>
  <book id="123" genre="fiction">
    <title>My Book</title>
    <author>John Doe</author>
    <price currency="USD">19.99</price>
  </book>
  <book id="456" genre="reference">
    <title>Tom &amp; Jerry&apos;s Guide</title>
    <author>Jane Roe</author>
    <price currency="EUR">5.00</price>
  </book>
</catalog>
"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("QUICK START - Strict XML Parser")
    print("=" * 45)

    # Step 1: Parse a document
    print("\nStep 1: Parsing")
    print("-" * 30)

    root = parse(CATALOG)
    print(f"Root element: <{root.tag}> with {len(root.children)} children")

    # Step 2: Navigate the tree
    print("\nStep 2: Navigation")
    print("-" * 30)

    for book in root.find_children("book"):
        price = book.find_child("price")
        print(
            f"  {book.get_attribute('id')}: {book.find_child('title').value!r} "
            f"({price.value} {price.get_attribute('currency')})"
        )

    # Step 3: Serialize back to markup
    print("\nStep 3: Serialization")
    print("-" * 30)

    first_book = root.find("book")
    print(first_book.to_xml(indent=2))
    print(f"Encoded text: {encode('Tom & Jerry')}")

    # Step 4: Detailed results
    print("\nStep 4: Detailed Parse")
    print("-" * 30)

    result = StrictXMLParser(correlation_id="quick-start").parse_detailed(CATALOG)
    print(f"Tokens: {result.tokenization.token_count}")
    print(f"Elements: {result.element_count}")
    print(f"Processing time: {result.performance.processing_time_ms:.2f}ms")

    return root


def error_handling_example():
    """Show how malformed input is reported."""

    print("\nError Handling")
    print("-" * 30)

    for text in ["<a>x</b>", "<a><b>x</b>", "<a>x</a> tail", ""]:
        try:
            parse(text)
        except XMLSyntaxError as e:
            print(f"  {text!r:16} -> {e}")

    lenient = parse("<a>x</a> tail", config=ParserConfig.lenient())
    print(f"  Lenient parse kept <{lenient.tag}> = {lenient.value!r}")


def adapter_example(root):
    """Convert the parsed tree to xml.etree.ElementTree."""

    print("\nElementTree Adapter")
    print("-" * 30)

    adapter = get_adapter("elementtree")
    result = adapter.to_target(root)
    if result.success:
        print(f"  Converted {result.metadata['element_count']} elements "
              f"in {result.conversion_time_ms:.2f}ms")
    else:
        print(f"  Conversion failed: {result.errors}")


if __name__ == "__main__":
    parsed_root = quick_start_example()
    error_handling_example()
    adapter_example(parsed_root)

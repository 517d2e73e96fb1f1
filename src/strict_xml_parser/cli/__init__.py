"""Command-line interface for Strict XML Parser.

Provides the ``strict-xml`` tool for parsing, validating and tokenizing XML
files.
"""

from .main import main

__all__ = ["main"]

"""Command-line interface module for SML Parser.

This module provides the ``sml`` tool for parsing, validating and reformatting
SML documents.
"""

from .main import main

__all__ = ["main"]

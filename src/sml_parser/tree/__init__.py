"""Tree building and serialization for SML documents.

Key Components:
    SMLTreeBuilder: Assembles tokenized rows into a single rooted element tree
    SMLWriter: Renders an element tree back into SML text
    SMLElement: Named node with attributes and ordered children
    SMLAttribute: Named list of optional string values
    SMLDocument: Root element plus detected end keyword and statistics
"""

from .builder import SMLTreeBuilder, build_tree, detect_end_keyword, is_end_keyword
from .elements import SMLAttribute, SMLDocument, SMLElement
from .writer import SMLWriter, encode_end_keyword, write

__all__ = [
    "SMLAttribute",
    "SMLDocument",
    "SMLElement",
    "SMLTreeBuilder",
    "SMLWriter",
    "build_tree",
    "detect_end_keyword",
    "encode_end_keyword",
    "is_end_keyword",
    "write",
]

"""Element tree types for SML documents.

An SML tree is made of :class:`SMLElement` nodes. Each element has a name, an
ordered list of :class:`SMLAttribute` entries and ordered child elements.
Attribute values keep three states: ``None`` (null), ``""`` (empty) and
non-empty strings.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass
class SMLAttribute:
    """A named, ordered list of optional string values.

    An attribute always has at least one value; a row holding only a name is
    read as an element.
    """

    name: str
    values: List[Optional[str]]

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise TypeError("Attribute name must be a string")
        if not self.values:
            raise ValueError(f"Attribute {self.name!r} must have at least one value")
        if any(value is not None and not isinstance(value, str) for value in self.values):
            raise TypeError("Attribute values must be strings or None")

    @property
    def value(self) -> Optional[str]:
        """First value."""
        return self.values[0]

    def to_row(self) -> List[Optional[str]]:
        """Row form used by the WSV writer: name followed by values."""
        return [self.name, *self.values]

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "values": list(self.values)}


@dataclass
class SMLElement:
    """A named tree node with attributes and ordered children.

    Equality compares name, attributes and children over the whole subtree
    without recursion, so a tree read back after writing compares equal to
    the tree it was written from at any depth.
    """

    name: str
    attributes: List[SMLAttribute] = field(default_factory=list)
    children: List["SMLElement"] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str):
            raise TypeError("Element name must be a string")

    def add_child(self, child: "SMLElement") -> "SMLElement":
        """Append a child element and return it."""
        if not isinstance(child, SMLElement):
            raise TypeError("Child must be an SMLElement instance")
        self.children.append(child)
        return child

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SMLElement):
            return NotImplemented
        pairs: List[Tuple[SMLElement, SMLElement]] = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if (
                left.name != right.name
                or left.attributes != right.attributes
                or len(left.children) != len(right.children)
            ):
                return False
            pairs.extend(zip(left.children, right.children))
        return True

    def add_attribute(self, name: str, value: Optional[str], *values: Optional[str]) -> SMLAttribute:
        """Append an attribute built from ``name`` and its values and return it."""
        attribute = SMLAttribute(name=name, values=[value, *values])
        self.attributes.append(attribute)
        return attribute

    def get_attribute(self, name: str) -> Optional[SMLAttribute]:
        """First attribute with a matching name."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None

    def get_values(
        self, name: str, default: Optional[List[Optional[str]]] = None
    ) -> Optional[List[Optional[str]]]:
        """Values of the first attribute named ``name``, or ``default``."""
        attribute = self.get_attribute(name)
        if attribute is None:
            return default
        return list(attribute.values)

    def has_attribute(self, name: str) -> bool:
        return self.get_attribute(name) is not None

    def find_child(self, name: str) -> Optional["SMLElement"]:
        """Find first direct child with matching name."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def find_children(self, name: str) -> List["SMLElement"]:
        """Find all direct children with matching name."""
        return [child for child in self.children if child.name == name]

    def find(self, name: str) -> Optional["SMLElement"]:
        """Find first descendant (pre-order, excluding self) with matching name."""
        return next(
            (element for element in self.iter_descendants() if element.name == name),
            None,
        )

    def find_all(self, name: str) -> List["SMLElement"]:
        """Find all descendants (pre-order, excluding self) with matching name."""
        return [element for element in self.iter_descendants() if element.name == name]

    def iter_with_depth(self) -> Iterator[Tuple["SMLElement", int]]:
        """Depth-first pre-order walk yielding ``(element, depth)`` pairs.

        Uses an explicit stack, so arbitrarily deep trees are safe to walk.
        """
        stack: List[Tuple[SMLElement, int]] = [(self, 0)]
        while stack:
            element, depth = stack.pop()
            yield element, depth
            for child in reversed(element.children):
                stack.append((child, depth + 1))

    def iter_elements(self) -> Iterator["SMLElement"]:
        """Depth-first pre-order walk starting with this element."""
        for element, _ in self.iter_with_depth():
            yield element

    def iter_descendants(self) -> Iterator["SMLElement"]:
        walk = self.iter_elements()
        next(walk)
        yield from walk

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result = self._node_dict()
        stack: List[Tuple[SMLElement, Dict[str, Any]]] = [(self, result)]
        while stack:
            element, node = stack.pop()
            if not element.children:
                continue
            node["children"] = []
            for child in element.children:
                child_node = child._node_dict()
                node["children"].append(child_node)
                stack.append((child, child_node))
        return result

    def _node_dict(self) -> Dict[str, Any]:
        node: Dict[str, Any] = {"name": self.name}
        if self.attributes:
            node["attributes"] = [attribute.to_dict() for attribute in self.attributes]
        return node

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SMLElement":
        """Rebuild an element from :meth:`to_dict` output.

        Raises:
            KeyError: If a node or attribute lacks its name or values.
            ValueError: If an attribute has an empty value list.
        """
        root = cls._from_node(data)
        stack: List[Tuple[SMLElement, Dict[str, Any]]] = [(root, data)]
        while stack:
            element, node = stack.pop()
            for child_node in node.get("children", []):
                child = cls._from_node(child_node)
                element.children.append(child)
                stack.append((child, child_node))
        return root

    @classmethod
    def _from_node(cls, node: Dict[str, Any]) -> "SMLElement":
        return cls(
            name=node["name"],
            attributes=[
                SMLAttribute(name=attribute["name"], values=list(attribute["values"]))
                for attribute in node.get("attributes", [])
            ],
        )


@dataclass
class SMLDocument:
    """Parsed document: the single root element plus document-level metadata.

    ``end_keyword`` holds the lowercased closer detected while parsing, or
    ``None`` when the document closes elements with the null value ``-``.
    """

    root: SMLElement
    end_keyword: Optional[str] = None

    total_elements: int = field(default=0, init=False)
    total_attributes: int = field(default=0, init=False)
    max_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.refresh_statistics()

    def refresh_statistics(self) -> None:
        """Recalculate counts after the tree has been modified."""
        self.total_elements = 0
        self.total_attributes = 0
        self.max_depth = 0
        for element, depth in self.root.iter_with_depth():
            self.total_elements += 1
            self.total_attributes += len(element.attributes)
            self.max_depth = max(self.max_depth, depth)

    def iter_elements(self) -> Iterator[SMLElement]:
        return self.root.iter_elements()

    def find(self, name: str) -> Optional[SMLElement]:
        """Find first element (root included) with matching name."""
        if self.root.name == name:
            return self.root
        return self.root.find(name)

    def find_all(self, name: str) -> List[SMLElement]:
        """Find all elements (root included) with matching name."""
        return [element for element in self.root.iter_elements() if element.name == name]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "end_keyword": self.end_keyword,
            "total_elements": self.total_elements,
            "total_attributes": self.total_attributes,
            "max_depth": self.max_depth,
            "root": self.root.to_dict(),
        }

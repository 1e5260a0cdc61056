"""Hierarchical configuration trees and their merge algorithm."""
from __future__ import annotations

import copy
import xml.etree.ElementTree as ElementTree
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

__all__ = ["ConfigTree", "effective", "merge"]

ATTRIBUTE_PREFIX = "@"
TEXT_KEY = "#text"


def _render_scalar(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(slots=True)
class ConfigTree:
    """A named node with an optional value, attributes and ordered children."""

    name: str
    value: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["ConfigTree"] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Return ``True`` when the node carries neither children nor a value."""

        return not self.children and not self.value

    def child(self, name: str) -> Optional["ConfigTree"]:
        """Return the first child called *name*."""

        for node in self.children:
            if node.name == name:
                return node
        return None

    def add_child(self, node: "ConfigTree") -> "ConfigTree":
        self.children.append(node)
        return node

    def copy(self) -> "ConfigTree":
        return copy.deepcopy(self)

    @classmethod
    def from_flat_mapping(
        cls, mapping: Mapping[str, Any], name: str = "configuration"
    ) -> "ConfigTree":
        """Build a one-level tree from a flat key/value map."""

        root = cls(name)
        for key, value in mapping.items():
            root.add_child(cls(str(key), value=_render_scalar(value)))
        return root

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], name: str = "configuration") -> "ConfigTree":
        """Build a tree from nested mappings.

        Keys starting with ``@`` become attributes and ``#text`` holds the node
        value. A list under a key produces one sibling per item, all sharing
        that key as their name.
        """

        root = cls(name)
        _fill(root, mapping)
        return root

    def to_mapping(self) -> Dict[str, Any]:
        """Inverse of :meth:`from_mapping` for the content below this node."""

        payload: Dict[str, Any] = {
            f"{ATTRIBUTE_PREFIX}{key}": value for key, value in self.attributes.items()
        }
        if self.value is not None:
            payload[TEXT_KEY] = self.value
        for node in self.children:
            rendered: Any
            if node.children or node.attributes:
                rendered = node.to_mapping()
            else:
                rendered = node.value
            if node.name in payload:
                existing = payload[node.name]
                if isinstance(existing, list):
                    existing.append(rendered)
                else:
                    payload[node.name] = [existing, rendered]
            else:
                payload[node.name] = rendered
        return payload

    @classmethod
    def from_element(cls, element: ElementTree.Element) -> "ConfigTree":
        text = element.text.strip() if element.text else ""
        node = cls(element.tag, value=text or None, attributes=dict(element.attrib))
        for child in element:
            node.add_child(cls.from_element(child))
        return node

    @classmethod
    def from_xml(cls, text: str) -> "ConfigTree":
        """Parse an XML fragment with a single root element."""

        return cls.from_element(ElementTree.fromstring(text))

    def to_element(self) -> ElementTree.Element:
        element = ElementTree.Element(self.name, dict(self.attributes))
        if self.value is not None:
            element.text = self.value
        for node in self.children:
            element.append(node.to_element())
        return element

    def to_xml(self) -> str:
        return ElementTree.tostring(self.to_element(), encoding="unicode")

    def __str__(self) -> str:
        return self.to_xml()


def _fill(node: ConfigTree, mapping: Mapping[str, Any]) -> None:
    for raw_key, value in mapping.items():
        key = str(raw_key)
        if key == TEXT_KEY:
            node.value = _render_scalar(value)
        elif key.startswith(ATTRIBUTE_PREFIX):
            node.attributes[key[len(ATTRIBUTE_PREFIX):]] = _render_scalar(value) or ""
        elif isinstance(value, (list, tuple)):
            for item in value:
                _append(node, key, item)
        else:
            _append(node, key, value)


def _append(node: ConfigTree, key: str, value: Any) -> None:
    if isinstance(value, Mapping):
        child = node.add_child(ConfigTree(key))
        _fill(child, value)
    else:
        node.add_child(ConfigTree(key, value=_render_scalar(value)))


def merge(override: Optional[ConfigTree], base: Optional[ConfigTree]) -> Optional[ConfigTree]:
    """Merge *override* on top of *base* and return a new tree.

    Children pair up by name, each override child taking the first unpaired
    base child of the same name. Override children keep their order and
    unpaired base children follow them in their original order.
    """

    if override is None:
        return base
    if base is None:
        return override
    return _merge_nodes(override, base)


def _merge_nodes(override: ConfigTree, base: ConfigTree) -> ConfigTree:
    attributes = dict(base.attributes)
    attributes.update(override.attributes)
    merged = ConfigTree(
        override.name,
        value=override.value if override.value else base.value,
        attributes=attributes,
    )
    paired = [False] * len(base.children)
    for child in override.children:
        match = None
        for position, candidate in enumerate(base.children):
            if not paired[position] and candidate.name == child.name:
                paired[position] = True
                match = candidate
                break
        if match is None:
            merged.add_child(child.copy())
        else:
            merged.add_child(_merge_nodes(child, match))
    for position, candidate in enumerate(base.children):
        if not paired[position]:
            merged.add_child(candidate.copy())
    return merged


def effective(tree: Optional[ConfigTree]) -> Optional[ConfigTree]:
    """Return *tree* unless it is absent or empty."""

    if tree is None or tree.is_empty:
        return None
    return tree

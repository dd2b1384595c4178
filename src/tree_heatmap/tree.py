"""Build TreeNode hierarchies from nested mappings and JSON files.

Input structure::

    {
        "label": "Company",
        "label_short": "Co",
        "values": [1200, 0.4],
        "children": [
            {"label": "Sales", "values": [700, 0.2]},
            {"label": "R&D", "values": 500}
        ]
    }

``label_long`` may be given instead of ``label``. A scalar ``values`` is read
as a single-element list. Parent back-references are wired while building.
"""

from __future__ import annotations

import json
import numbers
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional, Sequence, Union

from .exceptions import MalformedTreeError, TreeFileError
from .models import TreeNode


def build_tree(data: Mapping[str, Any]) -> TreeNode:
    """Convert a nested mapping into a TreeNode hierarchy.

    Raises:
        MalformedTreeError: If a node is not a mapping, has no label, or
            carries non-numeric values.
    """
    root = _make_node(data, "")
    # (mapping, node, location) frames; explicit stack keeps deep trees safe
    stack = [(data, root, root.label_long)]
    while stack:
        mapping, node, location = stack.pop()
        raw_children = mapping.get("children")
        if raw_children is None:
            continue
        if not isinstance(raw_children, Sequence) or isinstance(raw_children, str):
            raise MalformedTreeError(location, "'children' must be a list")
        node.children = []
        for raw_child in raw_children:
            child = node.add_child(_make_node(raw_child, location))
            stack.append((raw_child, child, f"{location}/{child.label_long}"))
    return root


def load_tree(path: Union[str, Path]) -> TreeNode:
    """Read a JSON tree file.

    Raises:
        TreeFileError: If the file cannot be read or decoded as UTF-8 JSON.
        MalformedTreeError: If the decoded document is not a valid tree.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TreeFileError(path, str(e))
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise TreeFileError(path, f"invalid JSON: {e}")
    return build_tree(data)


def _make_node(data: Any, parent_location: str) -> TreeNode:
    if not isinstance(data, Mapping):
        raise MalformedTreeError(parent_location, "node must be an object")

    label = data.get("label_long", data.get("label"))
    if not isinstance(label, str) or not label:
        raise MalformedTreeError(parent_location, "node needs a non-empty 'label'")
    location = f"{parent_location}/{label}" if parent_location else label

    raw_values = data.get("values", [])
    if _is_number(raw_values):
        raw_values = [raw_values]
    if not isinstance(raw_values, Sequence) or isinstance(raw_values, str):
        raise MalformedTreeError(location, "'values' must be a number or a list of numbers")
    if not all(_is_number(v) for v in raw_values):
        raise MalformedTreeError(location, "'values' must only contain numbers")

    short = data.get("label_short", "")
    if not isinstance(short, str):
        raise MalformedTreeError(location, "'label_short' must be a string")

    return TreeNode(label_long=label, label_short=short, values=list(raw_values))


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def walk(root: TreeNode) -> Iterator[tuple[TreeNode, int]]:
    """Yield ``(node, level)`` depth first, top to bottom, left to right."""
    stack = [(root, 0)]
    while stack:
        node, level = stack.pop()
        yield node, level
        if node.children:
            for child in reversed(node.children):
                stack.append((child, level + 1))


def structural_depth(node: TreeNode) -> int:
    """Edges on the longest downward path; 0 for a node without children."""
    return max(level for _node, level in walk(node))


def count_nodes(root: TreeNode) -> int:
    return sum(1 for _ in walk(root))


def find_node(root: TreeNode, path: str) -> Optional[TreeNode]:
    """Resolve a ``/``-separated label path below ``root``.

    Each segment matches a child's long or short label. An empty path
    returns ``root``.
    """
    node = root
    for segment in (s for s in path.split("/") if s):
        match = None
        for child in node.children or []:
            if segment in (child.label_long, child.label_short):
                match = child
                break
        if match is None:
            return None
        node = match
    return node

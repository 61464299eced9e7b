"""Render BTT trees to the indented box-drawing outline."""

from pathlib import Path
from typing import List

from .tree_builder import Branch, Leaf, Root, TreeNode

LAST_CONNECTOR = "└── "
MID_CONNECTOR = "├── "
LAST_INDENT = "    "
MID_INDENT = "│   "


def render(tree: TreeNode) -> str:
    """Render a tree to a string in BTT format."""
    lines: List[str] = []
    _render_node(tree, lines, "", True)
    return "".join(lines)


def _render_node(node: TreeNode, out: List[str], prefix: str, is_last: bool):
    if isinstance(node, Root):
        out.append(f"{node.name}\n")
        _render_children(node.children, out, "")
        return

    connector = LAST_CONNECTOR if is_last else MID_CONNECTOR
    out.append(f"{prefix}{connector}{node.label}\n")

    if isinstance(node, Branch):
        child_prefix = prefix + (LAST_INDENT if is_last else MID_INDENT)
        _render_children(node.children, out, child_prefix)
    elif not isinstance(node, Leaf):
        raise TypeError(f"Not a tree node: {node!r}")


def _render_children(children, out: List[str], prefix: str):
    for i, child in enumerate(children):
        _render_node(child, out, prefix, i == len(children) - 1)


def write_tree(content: str, output_path: Path) -> Path:
    """Write rendered tree text, creating parent directories."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    return output_path

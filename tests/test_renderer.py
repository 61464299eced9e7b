"""Tests for BTT rendering."""

from bttgen.renderer import render, write_tree
from bttgen.tree_builder import Branch, Leaf, Root


def test_simple_tree_rendering():
    tree = Root("increment", (
        Branch("when msg.sender is not owner", (Leaf("it should revert"),)),
        Branch("when msg.sender is owner", (Leaf("it should succeed"),)),
    ))

    expected = (
        "increment\n"
        "├── when msg.sender is not owner\n"
        "│   └── it should revert\n"
        "└── when msg.sender is owner\n"
        "    └── it should succeed\n"
    )
    assert render(tree) == expected


def test_nested_middle_sibling_keeps_bar():
    tree = Root("f", (
        Branch("a", (
            Branch("b", (Leaf("x"),)),
            Leaf("y"),
        )),
        Leaf("z"),
    ))

    assert render(tree) == (
        "f\n"
        "├── a\n"
        "│   ├── b\n"
        "│   │   └── x\n"
        "│   └── y\n"
        "└── z\n"
    )


def test_render_subtree_without_root():
    assert render(Branch("when x", (Leaf("it should revert"),))) == (
        "└── when x\n"
        "    └── it should revert\n"
    )


def test_write_tree_creates_directories(tmp_path):
    path = write_tree("f\n└── it should succeed\n", tmp_path / "test" / "trees" / "A.f.tree")
    assert path.read_text(encoding="utf-8") == "f\n└── it should succeed\n"

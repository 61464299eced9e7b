"""BTT (Branching Tree Technique) tree generator for Solidity functions."""

__version__ = "0.1.0"

from .conditions import (  # noqa: E402
    And,
    Binary,
    BinaryOp,
    BranchPoint,
    ConditionContext,
    ExternalCall,
    Ident,
    Not,
    Or,
)
from .extractor import extract  # noqa: E402
from .renderer import render  # noqa: E402
from .tree_builder import build  # noqa: E402

__all__ = [
    "And",
    "Binary",
    "BinaryOp",
    "BranchPoint",
    "ConditionContext",
    "ExternalCall",
    "Ident",
    "Not",
    "Or",
    "build",
    "extract",
    "render",
]

"""
Condition model for branch extraction.

A guard condition is kept as a small tree of frozen dataclasses so the
labeler can invert compound expressions without re-parsing source text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class BinaryOp(Enum):
    """Comparison operators that map to English templates."""
    EQ = "=="
    NEQ = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="

    @classmethod
    def from_symbol(cls, symbol: str) -> "BinaryOp":
        return cls(symbol)

    def __str__(self) -> str:
        return self.value


class ConditionContext(Enum):
    """Where the truth of a condition comes from."""
    STORAGE = "storage"    # contract state -> "given"
    EXTERNAL = "external"  # params, msg/block/tx, call results -> "when"

    @property
    def prefix(self) -> str:
        return "given" if self is ConditionContext.STORAGE else "when"


@dataclass(frozen=True)
class Binary:
    """Comparison between two rendered operands."""
    left: str
    op: BinaryOp
    right: str

    def __str__(self) -> str:
        return f"{self.left} {self.op} {self.right}"


@dataclass(frozen=True)
class Not:
    inner: "ConditionExpr"

    def __str__(self) -> str:
        return f"!({self.inner})"


@dataclass(frozen=True)
class And:
    left: "ConditionExpr"
    right: "ConditionExpr"

    def __str__(self) -> str:
        return f"({self.left}) && ({self.right})"


@dataclass(frozen=True)
class Or:
    left: "ConditionExpr"
    right: "ConditionExpr"

    def __str__(self) -> str:
        return f"({self.left}) || ({self.right})"


@dataclass(frozen=True)
class Ident:
    """Opaque boolean-valued expression (identifier, member, call...)."""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ExternalCall:
    """Implicit "the call succeeded" condition of a try / reverting call."""
    name: str

    def __str__(self) -> str:
        return self.name


ConditionExpr = Union[Binary, Not, And, Or, Ident, ExternalCall]

CONDITION_TYPES = (Binary, Not, And, Or, Ident, ExternalCall)


@dataclass(frozen=True)
class BranchPoint:
    """A guard that can make the function revert.

    is_if_revert distinguishes the two source idioms: False for
    require/assert (the condition failing reverts), True for
    ``if (cond) revert`` (the condition holding reverts).
    """
    condition: ConditionExpr
    context: ConditionContext
    is_loop: bool = False
    is_external_call: bool = False
    is_if_revert: bool = False

    def __str__(self) -> str:
        flags = []
        if self.is_loop:
            flags.append("loop")
        if self.is_external_call:
            flags.append("external")
        if self.is_if_revert:
            flags.append("if-revert")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        return f"{self.context.prefix} {self.condition}{suffix}"

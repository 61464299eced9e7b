"""Classify guard conditions as storage ("given") or external ("when")."""

from typing import Iterable

from .conditions import (
    And,
    Binary,
    ConditionContext,
    ConditionExpr,
    ExternalCall,
    Ident,
    Not,
    Or,
)

EXTERNAL_PREFIXES = ("msg.", "block.", "tx.")


def is_storage_ref(operand: str, storage_names: Iterable[str],
                   parameter_names: Iterable[str] = ()) -> bool:
    """Check whether a rendered operand reads contract storage."""
    for name in storage_names:
        if operand == name or operand.startswith(f"{name}.") or operand.startswith(f"{name}["):
            return True

    if operand.startswith(EXTERNAL_PREFIXES):
        return False

    for name in parameter_names:
        if operand == name or operand.startswith(f"{name}."):
            return False

    # Unknown operands (locals, calls, literals) count as external
    return False


def classify(condition: ConditionExpr, storage_names: Iterable[str],
             parameter_names: Iterable[str] = ()) -> ConditionContext:
    """
    Classify a condition by where its operands come from.

    A compound condition is STORAGE as soon as one operand is; this decides
    the "given"/"when" wording only and is not a data-dependency proof.
    """
    storage_names = tuple(storage_names)
    parameter_names = tuple(parameter_names)

    def _is_storage(expr: ConditionExpr) -> bool:
        if isinstance(expr, Binary):
            return (is_storage_ref(expr.left, storage_names, parameter_names)
                    or is_storage_ref(expr.right, storage_names, parameter_names))
        if isinstance(expr, Not):
            return _is_storage(expr.inner)
        if isinstance(expr, (And, Or)):
            return _is_storage(expr.left) or _is_storage(expr.right)
        if isinstance(expr, Ident):
            return is_storage_ref(expr.name, storage_names, parameter_names)
        if isinstance(expr, ExternalCall):
            return False
        raise TypeError(f"Not a condition expression: {expr!r}")

    return ConditionContext.STORAGE if _is_storage(condition) else ConditionContext.EXTERNAL

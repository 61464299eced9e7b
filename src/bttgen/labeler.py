"""Turn condition expressions into English BTT labels."""

from typing import NamedTuple, Tuple

from .conditions import (
    And,
    Binary,
    BinaryOp,
    BranchPoint,
    ConditionContext,
    ConditionExpr,
    ExternalCall,
    Ident,
    Not,
    Or,
)

# (holds, does not hold) templates per comparison operator
BINARY_TEMPLATES = {
    BinaryOp.EQ: ("{left} is {right}", "{left} is not {right}"),
    BinaryOp.NEQ: ("{left} is not {right}", "{left} is {right}"),
    BinaryOp.GT: ("{left} is greater than {right}", "{left} is at most {right}"),
    BinaryOp.GTE: ("{left} is at least {right}", "{left} is less than {right}"),
    BinaryOp.LT: ("{left} is less than {right}", "{left} is at least {right}"),
    BinaryOp.LTE: ("{left} is at most {right}", "{left} is greater than {right}"),
}

HUMANIZED_VALUES = {
    "0": "zero",
    "address(0)": "zero address",
}


class LabelPair(NamedTuple):
    """English description of a condition holding and not holding."""
    true_case: str
    false_case: str

    def swapped(self) -> "LabelPair":
        return LabelPair(self.false_case, self.true_case)


class ConditionLabeler:
    """Converts conditions to human-readable labels."""

    def humanize(self, value: str) -> str:
        """Make an operand more readable (0 -> zero, address(0) -> zero address)."""
        return HUMANIZED_VALUES.get(value, value)

    def labels(self, condition: ConditionExpr) -> LabelPair:
        """
        Describe a condition as (true_case, false_case).

        Negation swaps the pair and And/Or follow De Morgan's laws, so
        labels(Not(c)) is always labels(c) swapped.
        """
        if isinstance(condition, Binary):
            true_tpl, false_tpl = BINARY_TEMPLATES[condition.op]
            right = self.humanize(condition.right)
            return LabelPair(
                true_tpl.format(left=condition.left, right=right),
                false_tpl.format(left=condition.left, right=right),
            )

        if isinstance(condition, Not):
            return self.labels(condition.inner).swapped()

        if isinstance(condition, And):
            left = self.labels(condition.left)
            right = self.labels(condition.right)
            return LabelPair(
                f"{left.true_case} and {right.true_case}",
                f"{left.false_case} or {right.false_case}",
            )

        if isinstance(condition, Or):
            left = self.labels(condition.left)
            right = self.labels(condition.right)
            return LabelPair(
                f"{left.true_case} or {right.true_case}",
                f"{left.false_case} and {right.false_case}",
            )

        if isinstance(condition, Ident):
            return LabelPair(f"{condition.name} is true", f"{condition.name} is false")

        if isinstance(condition, ExternalCall):
            return LabelPair(f"{condition.name} succeeds", f"{condition.name} fails")

        raise TypeError(f"Not a condition expression: {condition!r}")

    def prefixed(self, phrase: str, context: ConditionContext, is_loop: bool = False) -> str:
        loop = "any " if is_loop else ""
        return f"{context.prefix} {loop}{phrase}"

    def branch_labels(self, branch_point: BranchPoint) -> Tuple[str, str]:
        """Return the final (true_case, false_case) labels for a branch point."""
        pair = self.labels(branch_point.condition)
        return (
            self.prefixed(pair.true_case, branch_point.context, branch_point.is_loop),
            self.prefixed(pair.false_case, branch_point.context, branch_point.is_loop),
        )

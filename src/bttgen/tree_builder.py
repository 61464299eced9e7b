"""Build BTT decision trees from ordered branch points."""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .conditions import CONDITION_TYPES, BranchPoint, ExternalCall
from .errors import TreeBuildError
from .labeler import ConditionLabeler

REVERT_LABEL = "it should revert"
SUCCESS_LABEL = "it should succeed"


@dataclass(frozen=True)
class Leaf:
    label: str


@dataclass(frozen=True)
class Branch:
    label: str
    children: Tuple["TreeNode", ...] = ()


@dataclass(frozen=True)
class Root:
    name: str
    children: Tuple["TreeNode", ...] = ()


TreeNode = Union[Root, Branch, Leaf]


class TreeBuilder:
    """
    Folds branch points into a right-leaning decision list.

    Every branch point contributes a revert branch (always a single leaf)
    and a continue branch that holds the rest of the tree, because each
    guard is only reached once all earlier guards have passed.
    """

    def __init__(self, labeler: Optional[ConditionLabeler] = None):
        self.labeler = labeler or ConditionLabeler()

    def build(self, function_name: str, branch_points: Sequence[BranchPoint]) -> Root:
        """Build the tree for one function."""
        for index, bp in enumerate(branch_points):
            if not isinstance(getattr(bp, "condition", None), CONDITION_TYPES):
                raise TreeBuildError(
                    f"Branch point {index} of '{function_name}' has no condition"
                )

        return Root(name=function_name, children=self._build_branches(branch_points, 0))

    def _build_branches(self, branch_points: Sequence[BranchPoint],
                        index: int) -> Tuple[TreeNode, ...]:
        if index >= len(branch_points):
            return (Leaf(SUCCESS_LABEL),)

        bp = branch_points[index]
        rest = self._build_branches(branch_points, index + 1)

        if bp.is_external_call:
            if isinstance(bp.condition, ExternalCall):
                call_name = bp.condition.name
            else:
                call_name = "external call"
            return (
                Branch(f"when {call_name} fails", (Leaf(REVERT_LABEL),)),
                Branch(f"when {call_name} succeeds", rest),
            )

        true_label, false_label = self.labeler.branch_labels(bp)

        # if-revert: the condition holding reverts; require: failing reverts
        if bp.is_if_revert:
            revert_label, continue_label = true_label, false_label
        else:
            revert_label, continue_label = false_label, true_label

        return (
            Branch(revert_label, (Leaf(REVERT_LABEL),)),
            Branch(continue_label, rest),
        )


def build(function_name: str, branch_points: List[BranchPoint]) -> Root:
    """Build a BTT tree with the default labeler."""
    return TreeBuilder().build(function_name, branch_points)

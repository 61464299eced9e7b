"""
Branch point extraction from Solidity function bodies.

Walks the solc compact JSON AST of a function (modifier bodies first, then
the function body) and collects every guard that can make the call revert,
in the order those guards run.

Recognized patterns:
    require(cond) / assert(cond)      -> branch point, failing reverts
    if (cond) { ... revert ... }      -> branch point, holding reverts
    try call ... / known reverting    -> external call branch point
      external helper calls
    for / while / do-while            -> walk body with the loop flag
    { ... } / unchecked { ... }       -> walk transparently

Any other statement is skipped.
"""

from typing import Callable, Iterable, List, Optional

from .classifier import classify
from .conditions import BranchPoint, ConditionContext, ExternalCall
from .expressions import node_type, render_expression, to_condition
from .logging_utils import get_logger

logger = get_logger(__name__)

GuardResolver = Callable[[str], Optional[dict]]

GUARD_FUNCTIONS = {"require", "assert"}

# Member calls that revert on failure (OpenZeppelin Address/SafeERC20, ETH transfer)
REVERTING_EXTERNAL_MEMBERS = {
    "sendValue",
    "functionCall",
    "functionCallWithValue",
    "functionStaticCall",
    "functionDelegateCall",
    "safeTransfer",
    "safeTransferFrom",
    "safeApprove",
    "safeIncreaseAllowance",
    "safeDecreaseAllowance",
    "forceApprove",
    "transfer",
    "transferFrom",
}

LOOP_STATEMENTS = {"ForStatement", "WhileStatement", "DoWhileStatement"}
BLOCK_STATEMENTS = {"Block", "UncheckedBlock"}


def _called_name(call) -> Optional[str]:
    """Name of a plain identifier callee (``require`` in ``require(x)``)."""
    if node_type(call) != "FunctionCall":
        return None
    callee = call.get("expression")
    if node_type(callee) == "Identifier":
        return callee.get("name")
    return None


def is_revert_terminal(stmt) -> bool:
    """Check whether a statement reverts on every path through it."""
    kind = node_type(stmt)

    if kind == "RevertStatement":
        return True
    if kind == "ExpressionStatement":
        return _called_name(stmt.get("expression")) == "revert"
    if kind in BLOCK_STATEMENTS:
        return any(is_revert_terminal(s) for s in stmt.get("statements") or [])
    if kind == "IfStatement":
        false_body = stmt.get("falseBody")
        return (false_body is not None
                and is_revert_terminal(stmt.get("trueBody"))
                and is_revert_terminal(false_body))
    return False


def reverting_external_call(expression) -> Optional[str]:
    """Return the display name of a known reverting external call, if any."""
    if node_type(expression) != "FunctionCall":
        return None
    if expression.get("kind", "functionCall") != "functionCall":
        return None

    callee = expression.get("expression")
    if node_type(callee) == "FunctionCallOptions":
        callee = callee.get("expression")
    if node_type(callee) != "MemberAccess":
        return None
    if callee.get("memberName") not in REVERTING_EXTERNAL_MEMBERS:
        return None

    base = callee.get("expression")
    if node_type(base) == "Identifier" and base.get("name") == "super":
        return None
    return render_expression(expression)


def modifier_invocation_name(invocation) -> Optional[str]:
    """Last path segment of the modifier named by a ModifierInvocation."""
    if invocation.get("kind") == "baseConstructorSpecifier":
        return None
    name_node = invocation.get("modifierName") or {}
    name = name_node.get("name")
    if not name:
        return None
    return name.split(".")[-1]


class BranchExtractor:
    """Collects ordered branch points for one function."""

    def __init__(self, storage_names: Iterable[str] = (),
                 parameter_names: Iterable[str] = (),
                 resolve_guard_body: Optional[GuardResolver] = None):
        self.storage_names = tuple(storage_names)
        self.parameter_names = tuple(parameter_names)
        self.resolve_guard_body = resolve_guard_body

    def extract(self, function: dict) -> List[BranchPoint]:
        """Extract branch points from a FunctionDefinition node."""
        bodies = []
        for invocation in function.get("modifiers") or []:
            name = modifier_invocation_name(invocation)
            if name is None or self.resolve_guard_body is None:
                continue
            body = self.resolve_guard_body(name)
            if body is None:
                logger.debug("No body for modifier %s, skipping", name)
                continue
            bodies.append(body)

        if function.get("body") is not None:
            bodies.append(function["body"])

        return self.extract_from_bodies(bodies)

    def extract_from_bodies(self, bodies: Iterable[dict]) -> List[BranchPoint]:
        """Extract branch points from guard bodies followed by the main body."""
        points: List[BranchPoint] = []
        for body in bodies:
            self._walk(body, points, in_loop=False)
        return points

    def _walk(self, stmt, points: List[BranchPoint], in_loop: bool):
        kind = node_type(stmt)

        if kind in BLOCK_STATEMENTS:
            for child in stmt.get("statements") or []:
                self._walk(child, points, in_loop)

        elif kind == "ExpressionStatement":
            self._expression_statement(stmt.get("expression"), points, in_loop)

        elif kind == "IfStatement":
            true_body = stmt.get("trueBody")
            if is_revert_terminal(true_body):
                self._add(stmt.get("condition"), points, in_loop, is_if_revert=True)
            else:
                self._walk(true_body, points, in_loop)

            if stmt.get("falseBody") is not None:
                self._walk(stmt["falseBody"], points, in_loop)

        elif kind in LOOP_STATEMENTS:
            self._walk(stmt.get("body"), points, True)

        elif kind == "TryStatement":
            self._add_external_call(render_expression(stmt.get("externalCall")), points, in_loop)

    def _expression_statement(self, expression, points: List[BranchPoint], in_loop: bool):
        if _called_name(expression) in GUARD_FUNCTIONS:
            arguments = expression.get("arguments") or []
            if arguments:
                self._add(arguments[0], points, in_loop, is_if_revert=False)
            return

        call_name = reverting_external_call(expression)
        if call_name is not None:
            self._add_external_call(call_name, points, in_loop)

    def _add(self, condition_node, points: List[BranchPoint], in_loop: bool, is_if_revert: bool):
        condition = to_condition(condition_node)
        points.append(BranchPoint(
            condition=condition,
            context=classify(condition, self.storage_names, self.parameter_names),
            is_loop=in_loop,
            is_external_call=False,
            is_if_revert=is_if_revert,
        ))

    def _add_external_call(self, call_name: str, points: List[BranchPoint], in_loop: bool):
        points.append(BranchPoint(
            condition=ExternalCall(call_name),
            context=ConditionContext.EXTERNAL,
            is_loop=in_loop,
            is_external_call=True,
            is_if_revert=False,
        ))


def extract(function: dict, storage_names: Iterable[str] = (),
            parameter_names: Iterable[str] = (),
            resolve_guard_body: Optional[GuardResolver] = None) -> List[BranchPoint]:
    """Extract the ordered branch points of a FunctionDefinition node."""
    return BranchExtractor(storage_names, parameter_names, resolve_guard_body).extract(function)

"""
Expression helpers over the solc compact JSON AST.

render_expression() gives the short textual form used inside labels
(``balances[...]``, ``address(0)``, ``token.transfer(...)``);
to_condition() turns a boolean expression into a ConditionExpr.
Unknown node shapes degrade to PLACEHOLDER instead of failing.
"""

from typing import Optional

from .conditions import And, Binary, BinaryOp, ConditionExpr, Ident, Not, Or

PLACEHOLDER = "expr"

COMPARISON_OPERATORS = {op.value for op in BinaryOp}


def node_type(node) -> Optional[str]:
    if isinstance(node, dict):
        return node.get("nodeType")
    return None


def unwrap_parentheses(node):
    """Strip ``(x)`` tuples that only group a single expression."""
    while (node_type(node) == "TupleExpression"
           and not node.get("isInlineArray")
           and len(node.get("components") or []) == 1
           and node["components"][0] is not None):
        node = node["components"][0]
    return node


def type_name_to_string(type_name) -> str:
    """Render a type name node (elementary, user-defined, array...)."""
    if isinstance(type_name, str):
        return type_name
    kind = node_type(type_name)

    if kind == "ElementaryTypeName":
        return type_name.get("name", PLACEHOLDER)
    if kind == "UserDefinedTypeName":
        path = type_name.get("pathNode") or {}
        name = path.get("name") or type_name.get("name") or PLACEHOLDER
        return name.split(".")[-1]
    if kind == "ArrayTypeName":
        return f"{type_name_to_string(type_name.get('baseType'))}[]"
    if kind == "FunctionTypeName":
        return "function"
    if kind == "Mapping":
        return "mapping"
    return "unknown"


def _render_literal(node) -> str:
    kind = node.get("kind")
    if kind == "string" or kind == "unicodeString":
        return f'"{node.get("value", "")}"'
    if kind == "hexString":
        return f'hex"{node.get("hexValue", "")}"'

    value = node.get("value")
    if value is None:
        value = node.get("hexValue") or PLACEHOLDER
    subdenomination = node.get("subdenomination")
    if subdenomination:
        return f"{value} {subdenomination}"
    return value


def _render_type_expression(node) -> str:
    type_name = node.get("typeName")
    if isinstance(type_name, dict) and type_name.get("stateMutability") == "payable":
        return "payable"
    return type_name_to_string(type_name)


def _is_type_conversion(call) -> bool:
    if call.get("kind") == "typeConversion":
        return True
    return node_type(call.get("expression")) == "ElementaryTypeNameExpression"


def render_expression(node) -> str:
    """Render an expression node to its short textual form."""
    kind = node_type(node)

    if kind in ("Identifier", "IdentifierPath"):
        return node.get("name", PLACEHOLDER)

    if kind == "Literal":
        return _render_literal(node)

    if kind == "MemberAccess":
        return f"{render_expression(node.get('expression'))}.{node.get('memberName', PLACEHOLDER)}"

    if kind == "IndexAccess":
        return f"{render_expression(node.get('baseExpression'))}[...]"

    if kind == "FunctionCall":
        callee = render_expression(node.get("expression"))
        if _is_type_conversion(node):
            args = ", ".join(render_expression(arg) for arg in node.get("arguments") or [])
            return f"{callee}({args})"
        return f"{callee}(...)"

    if kind == "FunctionCallOptions":
        return render_expression(node.get("expression"))

    if kind == "ElementaryTypeNameExpression":
        return _render_type_expression(node)

    if kind == "BinaryOperation":
        return (f"{render_expression(node.get('leftExpression'))} "
                f"{node.get('operator', '?')} "
                f"{render_expression(node.get('rightExpression'))}")

    if kind == "UnaryOperation":
        operator = node.get("operator", "")
        operand = render_expression(node.get("subExpression"))
        if operator == "delete":
            return f"delete {operand}"
        if node.get("prefix", True):
            return f"{operator}{operand}"
        return f"{operand}{operator}"

    if kind == "TupleExpression":
        parts = [render_expression(c) if c is not None else "" for c in node.get("components") or []]
        if node.get("isInlineArray"):
            return f"[{', '.join(parts)}]"
        return f"({', '.join(parts)})"

    if kind == "Conditional":
        return (f"{render_expression(node.get('condition'))} ? "
                f"{render_expression(node.get('trueExpression'))} : "
                f"{render_expression(node.get('falseExpression'))}")

    return PLACEHOLDER


def to_condition(node) -> ConditionExpr:
    """Translate a boolean expression node into a ConditionExpr."""
    node = unwrap_parentheses(node)
    kind = node_type(node)

    if kind == "BinaryOperation":
        operator = node.get("operator")
        if operator in COMPARISON_OPERATORS:
            return Binary(
                left=render_expression(node.get("leftExpression")),
                op=BinaryOp.from_symbol(operator),
                right=render_expression(node.get("rightExpression")),
            )
        if operator == "&&":
            return And(to_condition(node.get("leftExpression")),
                       to_condition(node.get("rightExpression")))
        if operator == "||":
            return Or(to_condition(node.get("leftExpression")),
                      to_condition(node.get("rightExpression")))

    if kind == "UnaryOperation" and node.get("operator") == "!":
        return Not(to_condition(node.get("subExpression")))

    return Ident(render_expression(node))

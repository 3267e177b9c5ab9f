"""
Label formatting for flowchart nodes.

One pure function per Lua AST kind builds the human-readable label from the
node's source text. Missing source text raises MalformedAstError instead of
producing a partial label. ``sanitize_label`` restricts a label to the
characters Mermaid accepts inside a plain ``[...]`` node declaration.
"""

import re
from typing import Iterable, Optional

from luaflow.exceptions import MalformedAstError
from luaflow.models import (
    AssignmentStatement,
    CallStatement,
    Expression,
    ForGenericStatement,
    ForNumericStatement,
    FunctionDeclaration,
    Identifier,
    IfClause,
    IfStatement,
    LocalStatement,
    LuaNode,
    RepeatStatement,
    ReturnStatement,
    TableConstructorExpression,
    WhileStatement,
)

_UNSAFE_CHARACTERS = re.compile(r"[^a-zA-Z0-9_ ]")


def sanitize_label(label: str) -> str:
    """
    Replace every character outside [A-Za-z0-9_ ] with an underscore.

    Args:
        label: Raw label text

    Returns:
        Sanitized label of the same length
    """
    return _UNSAFE_CHARACTERS.sub("_", label)


def _expression_text(owner: LuaNode, field: str, expression: Optional[Expression]) -> str:
    if expression is None or expression.raw is None:
        raise MalformedAstError(owner.kind, field)
    return expression.raw


def _identifier_text(owner: LuaNode, field: str, identifier: Optional[Identifier]) -> str:
    if identifier is None or identifier.name is None:
        raise MalformedAstError(owner.kind, field)
    return identifier.name


def _join_expressions(owner: LuaNode, field: str, expressions: Iterable[Optional[Expression]]) -> str:
    return ", ".join(_expression_text(owner, field, expr) for expr in expressions)


def _join_identifiers(owner: LuaNode, field: str, identifiers: Iterable[Optional[Identifier]]) -> str:
    return ", ".join(_identifier_text(owner, field, ident) for ident in identifiers)


def if_label(node: IfStatement) -> str:
    # Only the first clause's condition is rendered.
    if not node.clauses:
        raise MalformedAstError(node.kind, "clauses")
    return f"if {_expression_text(node, 'condition', node.clauses[0].condition)}"


def elseif_label(clause: IfClause) -> str:
    return f"elseif {_expression_text(clause, 'condition', clause.condition)}"


def while_label(node: WhileStatement) -> str:
    return f"while {_expression_text(node, 'condition', node.condition)}"


def repeat_label(node: RepeatStatement) -> str:
    return "repeat"


def until_label(node: RepeatStatement) -> str:
    return f"until {_expression_text(node, 'condition', node.condition)}"


def for_numeric_label(node: ForNumericStatement) -> str:
    label = (
        f"for {_identifier_text(node, 'variable', node.variable)} = "
        f"{_expression_text(node, 'start', node.start)}, "
        f"{_expression_text(node, 'end', node.end)}"
    )
    if node.step is not None:
        label += f", {_expression_text(node, 'step', node.step)}"
    return label


def for_generic_label(node: ForGenericStatement) -> str:
    variables = _join_identifiers(node, "variables", node.variables)
    iterators = _join_expressions(node, "iterators", node.iterators)
    return f"for {variables} in {iterators}"


def function_label(node: FunctionDeclaration) -> str:
    name = _identifier_text(node, "identifier", node.identifier)
    params = _join_identifiers(node, "parameters", node.parameters)
    return f"function {name}({params})"


def return_label(node: ReturnStatement) -> str:
    if not node.arguments:
        return "return"
    return f"return {_join_expressions(node, 'arguments', node.arguments)}"


def call_label(node: CallStatement) -> str:
    if node.expression is None:
        raise MalformedAstError(node.kind, "expression")
    callee = _identifier_text(node, "expression.base", node.expression.base)
    args = _join_expressions(node, "expression.arguments", node.expression.arguments)
    return f"call {callee}({args})"


def assignment_label(node: AssignmentStatement) -> str:
    variables = _join_identifiers(node, "variables", node.variables)
    return f"{variables} = {_join_expressions(node, 'init', node.init)}"


def local_label(node: LocalStatement) -> str:
    variables = _join_identifiers(node, "variables", node.variables)
    if not node.init:
        return f"local {variables}"
    return f"local {variables} = {_join_expressions(node, 'init', node.init)}"


def table_label(node: TableConstructorExpression) -> str:
    parts = []
    for field in node.fields:
        value = _expression_text(node, "fields.value", field.value)
        if field.key is None:
            parts.append(value)
        else:
            parts.append(f"{_expression_text(node, 'fields.key', field.key)} = {value}")
    return f"table {{ {', '.join(parts)} }}"


def other_label(node: object) -> str:
    """Label for unrecognized kinds: the raw kind tag itself."""
    kind = getattr(node, "kind", None)
    if kind is None:
        kind = type(node).__name__
    return str(kind)

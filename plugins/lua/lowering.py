"""
Lowering of tree-sitter-lua syntax trees into the Lua AST.

The concrete tree keeps every grammar detail (expression lists, clause
wrappers, attribute lists). Lowering keeps only what the flowchart needs:
statement kinds, their bodies, and the source text of conditions,
identifiers and expressions. Children are located by node type and
position rather than by grammar field names.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from luaflow.models import (
    AssignmentStatement,
    CallExpression,
    CallStatement,
    Chunk,
    Expression,
    ForGenericStatement,
    ForNumericStatement,
    FunctionDeclaration,
    Identifier,
    IfClause,
    IfStatement,
    LocalStatement,
    LuaNode,
    OtherNode,
    RepeatStatement,
    ReturnStatement,
    SyntaxNode,
    TableConstructorExpression,
    TableField,
    WhileStatement,
)

logger = logging.getLogger(__name__)

DEFAULT_IGNORED_STATEMENTS = ("empty_statement", "hash_bang_line", "comment")


def camel_case_kind(node_type: str) -> str:
    """Turn a grammar node type into a kind name: 'do_statement' -> 'DoStatement'."""
    return "".join(part.capitalize() for part in node_type.split("_") if part)


def _expression(node: Optional[SyntaxNode]) -> Optional[Expression]:
    if node is None:
        return None
    return Expression(kind=node.node_type, raw=node.text)


def _identifier(node: Optional[SyntaxNode]) -> Optional[Identifier]:
    if node is None:
        return None
    return Identifier(name=node.text)


class LuaAstLowering:
    """Converts a tree-sitter-lua SyntaxNode tree into Lua AST models."""

    def __init__(
        self,
        statement_kinds: Optional[Dict[str, str]] = None,
        ignored_statements: Optional[Iterable[str]] = None,
    ):
        """
        Initialize the lowering.

        Args:
            statement_kinds: Kind names for statements without a dedicated model
            ignored_statements: Node types dropped from statement lists
        """
        self._statement_kinds = dict(statement_kinds or {})
        self._ignored = set(
            ignored_statements if ignored_statements is not None else DEFAULT_IGNORED_STATEMENTS
        )
        self._statement_handlers: Dict[str, Callable[[SyntaxNode], LuaNode]] = {
            "if_statement": self._lower_if,
            "while_statement": self._lower_while,
            "repeat_statement": self._lower_repeat,
            "for_statement": self._lower_for,
            "function_declaration": self._lower_function,
            "local_function_declaration": self._lower_function,
            "return_statement": self._lower_return,
            "function_call": self._lower_call,
            "assignment_statement": self._lower_assignment,
            "variable_declaration": self._lower_local,
            "table_constructor": self._lower_table,
        }

    def lower(self, root: SyntaxNode) -> Chunk:
        """
        Lower the root of a parsed file.

        Args:
            root: The 'chunk' syntax node

        Returns:
            Chunk with the lowered top-level statements
        """
        return Chunk(body=self.lower_statements(root.children))

    def lower_statements(self, nodes: Iterable[SyntaxNode]) -> List[LuaNode]:
        statements: List[LuaNode] = []
        for node in nodes:
            if node.node_type in self._ignored:
                continue
            if node.node_type == "block":
                statements.extend(self.lower_statements(node.children))
                continue
            statements.append(self.lower_statement(node))
        return statements

    def lower_statement(self, node: SyntaxNode) -> LuaNode:
        handler = self._statement_handlers.get(node.node_type)
        if handler is None:
            kind = self._statement_kinds.get(node.node_type, camel_case_kind(node.node_type))
            logger.debug(f"Lowering '{node.node_type}' at line {node.start_line} to {kind}")
            return OtherNode(kind=kind, children=list(node.children))
        return handler(node)

    def _body(self, node: SyntaxNode) -> List[LuaNode]:
        # Empty bodies have no block node at all.
        block = node.first_child_of_type("block")
        if block is None:
            return []
        return self.lower_statements(block.children)

    def _first_child(self, node: SyntaxNode) -> Optional[SyntaxNode]:
        return node.children[0] if node.children else None

    def _list_items(self, node: SyntaxNode, list_type: str) -> List[SyntaxNode]:
        list_node = node.first_child_of_type(list_type)
        if list_node is None:
            return []
        return list_node.children

    def _lower_if(self, node: SyntaxNode) -> IfStatement:
        clauses = [
            IfClause(
                kind="IfClause",
                condition=_expression(self._first_child(node)),
                body=self._body(node),
            )
        ]
        for child in node.children:
            if child.node_type == "elseif_statement":
                clauses.append(
                    IfClause(
                        kind="ElseifClause",
                        condition=_expression(self._first_child(child)),
                        body=self._body(child),
                    )
                )
            elif child.node_type == "else_statement":
                clauses.append(IfClause(kind="ElseClause", body=self._body(child)))
        return IfStatement(clauses=clauses)

    def _lower_while(self, node: SyntaxNode) -> WhileStatement:
        return WhileStatement(
            condition=_expression(self._first_child(node)),
            body=self._body(node),
        )

    def _lower_repeat(self, node: SyntaxNode) -> RepeatStatement:
        conditions = [child for child in node.children if child.node_type != "block"]
        return RepeatStatement(
            condition=_expression(conditions[-1] if conditions else None),
            body=self._body(node),
        )

    def _lower_for(self, node: SyntaxNode) -> LuaNode:
        numeric = node.first_child_of_type("for_numeric_clause")
        if numeric is not None:
            parts = numeric.children
            return ForNumericStatement(
                variable=_identifier(parts[0] if len(parts) > 0 else None),
                start=_expression(parts[1] if len(parts) > 1 else None),
                end=_expression(parts[2] if len(parts) > 2 else None),
                step=_expression(parts[3]) if len(parts) > 3 else None,
                body=self._body(node),
            )

        generic = node.first_child_of_type("for_generic_clause")
        if generic is not None:
            variables = (
                self._list_items(generic, "variable_list")
                or generic.children_of_type("identifier")
            )
            iterators = self._list_items(generic, "expression_list") or [
                child for child in generic.children
                if child.node_type not in ("identifier", "variable_list")
            ]
            return ForGenericStatement(
                variables=[_identifier(var) for var in variables],
                iterators=[_expression(it) for it in iterators],
                body=self._body(node),
            )

        logger.warning(f"for statement at line {node.start_line} has no recognizable clause")
        return OtherNode(kind="ForStatement", children=list(node.children))

    def _lower_function(self, node: SyntaxNode) -> FunctionDeclaration:
        name = None
        for child in node.children:
            if child.node_type not in ("parameters", "block"):
                name = child
                break

        parameters = self._list_items(node, "parameters")
        return FunctionDeclaration(
            identifier=_identifier(name),
            parameters=[_identifier(param) for param in parameters],
            is_local=(node.text or "").lstrip().startswith("local"),
            body=self._body(node),
        )

    def _lower_return(self, node: SyntaxNode) -> ReturnStatement:
        values = node.first_child_of_type("expression_list")
        items = values.children if values is not None else node.children
        return ReturnStatement(arguments=[_expression(item) for item in items])

    def _lower_call(self, node: SyntaxNode) -> CallStatement:
        callee = None
        for child in node.children:
            if child.node_type != "arguments":
                callee = child
                break

        arguments = self._list_items(node, "arguments")
        return CallStatement(
            expression=CallExpression(
                base=_identifier(callee),
                arguments=[_expression(arg) for arg in arguments],
            )
        )

    def _lower_assignment(self, node: SyntaxNode) -> AssignmentStatement:
        return AssignmentStatement(
            variables=[_identifier(var) for var in self._list_items(node, "variable_list")],
            init=[_expression(value) for value in self._list_items(node, "expression_list")],
        )

    def _lower_local(self, node: SyntaxNode) -> LocalStatement:
        # 'local a = 1' wraps its lists in an assignment_statement; 'local a' does not.
        target = node.first_child_of_type("assignment_statement") or node
        names = (
            self._list_items(target, "variable_list")
            or self._list_items(target, "attribute_name_list")
            or target.children_of_type("identifier")
        )
        values = self._list_items(target, "expression_list")

        # '<const>' / '<close>' attributes are not part of the variable list label.
        return LocalStatement(
            variables=[_identifier(name) for name in names if name.node_type != "attribute"],
            init=[_expression(value) for value in values],
        )

    def _lower_table(self, node: SyntaxNode) -> TableConstructorExpression:
        fields = []
        for field in node.children_of_type("field"):
            key = field.child_by_field("name")
            value = field.child_by_field("value")
            if value is None and field.children:
                value = field.children[-1]
            fields.append(TableField(key=_expression(key), value=_expression(value)))
        return TableConstructorExpression(fields=fields)

"""Data models for the Lua flowchart generator."""

from .diagram import Diagram, DiagramEdge, DiagramNode
from .lua_ast import (
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
    TableConstructorExpression,
    TableField,
    WhileStatement,
)
from .syntax_node import SyntaxNode

__all__ = [
    # Syntax tree models
    "SyntaxNode",
    # Lua AST models
    "LuaNode",
    "Identifier",
    "Expression",
    "CallExpression",
    "TableField",
    "Chunk",
    "IfClause",
    "IfStatement",
    "WhileStatement",
    "RepeatStatement",
    "ForNumericStatement",
    "ForGenericStatement",
    "FunctionDeclaration",
    "ReturnStatement",
    "CallStatement",
    "AssignmentStatement",
    "LocalStatement",
    "TableConstructorExpression",
    "OtherNode",
    # Diagram models
    "DiagramNode",
    "DiagramEdge",
    "Diagram",
]

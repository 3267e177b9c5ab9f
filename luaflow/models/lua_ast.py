"""
Lua abstract syntax tree data models.

Each recognized statement kind is its own model class carrying a constant
``kind`` tag. Anything else is represented by ``OtherNode``, which keeps the
raw kind name and its children without interpreting them. All models are
frozen: the tree is produced once by a language plugin and only read
afterwards.
"""

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class LuaNode(BaseModel):
    """Base class for all Lua AST nodes."""

    model_config = ConfigDict(frozen=True)

    kind: str


class Identifier(LuaNode):
    """A name (variable, parameter, function name) with its source text."""

    kind: Literal["Identifier"] = "Identifier"
    name: Optional[str] = Field(None, description="Identifier source text")


class Expression(LuaNode):
    """Any expression, kept as its literal source text."""

    kind: str = "Expression"
    raw: Optional[str] = Field(None, description="Expression source text")


class CallExpression(LuaNode):
    """Function or method call."""

    kind: Literal["CallExpression"] = "CallExpression"
    base: Optional[Identifier] = Field(None, description="Callee, e.g. 'print' or 'obj:method'")
    arguments: List[Expression] = Field(default_factory=list)


class TableField(LuaNode):
    """One field of a table constructor; positional fields have no key."""

    kind: Literal["TableField"] = "TableField"
    key: Optional[Expression] = None
    value: Optional[Expression] = None


class Chunk(LuaNode):
    """Root of a parsed source file."""

    kind: Literal["Chunk"] = "Chunk"
    body: List[LuaNode] = Field(default_factory=list)


class IfClause(LuaNode):
    """One branch of an if statement: 'if', 'elseif' or 'else'."""

    kind: Literal["IfClause", "ElseifClause", "ElseClause"] = "IfClause"
    condition: Optional[Expression] = None
    body: List[LuaNode] = Field(default_factory=list)


class IfStatement(LuaNode):
    kind: Literal["IfStatement"] = "IfStatement"
    clauses: List[IfClause] = Field(default_factory=list)


class WhileStatement(LuaNode):
    kind: Literal["WhileStatement"] = "WhileStatement"
    condition: Optional[Expression] = None
    body: List[LuaNode] = Field(default_factory=list)


class RepeatStatement(LuaNode):
    kind: Literal["RepeatStatement"] = "RepeatStatement"
    condition: Optional[Expression] = None
    body: List[LuaNode] = Field(default_factory=list)


class ForNumericStatement(LuaNode):
    kind: Literal["ForNumericStatement"] = "ForNumericStatement"
    variable: Optional[Identifier] = None
    start: Optional[Expression] = None
    end: Optional[Expression] = None
    step: Optional[Expression] = None
    body: List[LuaNode] = Field(default_factory=list)


class ForGenericStatement(LuaNode):
    kind: Literal["ForGenericStatement"] = "ForGenericStatement"
    variables: List[Identifier] = Field(default_factory=list)
    iterators: List[Expression] = Field(default_factory=list)
    body: List[LuaNode] = Field(default_factory=list)


class FunctionDeclaration(LuaNode):
    kind: Literal["FunctionDeclaration"] = "FunctionDeclaration"
    identifier: Optional[Identifier] = None
    parameters: List[Identifier] = Field(default_factory=list)
    is_local: bool = False
    body: List[LuaNode] = Field(default_factory=list)


class ReturnStatement(LuaNode):
    kind: Literal["ReturnStatement"] = "ReturnStatement"
    arguments: List[Expression] = Field(default_factory=list)


class CallStatement(LuaNode):
    kind: Literal["CallStatement"] = "CallStatement"
    expression: Optional[CallExpression] = None


class AssignmentStatement(LuaNode):
    kind: Literal["AssignmentStatement"] = "AssignmentStatement"
    variables: List[Identifier] = Field(default_factory=list)
    init: List[Expression] = Field(default_factory=list)


class LocalStatement(LuaNode):
    kind: Literal["LocalStatement"] = "LocalStatement"
    variables: List[Identifier] = Field(default_factory=list)
    init: List[Expression] = Field(default_factory=list)


class TableConstructorExpression(LuaNode):
    kind: Literal["TableConstructorExpression"] = "TableConstructorExpression"
    fields: List[TableField] = Field(default_factory=list)


class OtherNode(LuaNode):
    """Catch-all for kinds without a dedicated model."""

    children: List[Any] = Field(default_factory=list, description="Opaque, never traversed")

"""
Exception hierarchy for the Lua flowchart generator.
"""

from typing import Optional


class LuaFlowError(Exception):
    """Base class for errors raised while turning source into a diagram."""
    pass


class SourceReadError(LuaFlowError):
    """Raised when the input file cannot be read."""
    pass


class LuaParseError(LuaFlowError):
    """Raised when the parser rejects the source text."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


class MalformedAstError(LuaFlowError):
    """Raised when a recognized AST node lacks a field needed for its label."""

    def __init__(self, kind: str, field: str):
        super().__init__(f"Malformed AST: {kind} is missing '{field}'")
        self.kind = kind
        self.field = field


class OutputWriteError(LuaFlowError):
    """Raised when the diagram cannot be written to disk."""
    pass

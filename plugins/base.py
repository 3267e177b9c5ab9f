"""
Base interface for language parsing plugins.

This module defines the abstract base class that all language plugins must implement
to turn source text into the AST consumed by the flowchart builder.
"""

from abc import ABC, abstractmethod
from typing import List

from luaflow.models import Chunk, SyntaxNode


class LanguagePlugin(ABC):
    """Base interface for language parsing plugins."""

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the language name (e.g., 'lua')."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> List[str]:
        """Return supported file extensions (e.g., ['.lua'])."""
        pass

    @abstractmethod
    def parse_syntax(self, file_path: str, content: str) -> SyntaxNode:
        """
        Parse file content into a concrete syntax tree.

        Args:
            file_path: Path to the file being parsed
            content: File content as string

        Returns:
            SyntaxNode representing the root of the parsed tree

        Raises:
            LuaParseError: If the file cannot be parsed
        """
        pass

    @abstractmethod
    def build_ast(self, syntax: SyntaxNode) -> Chunk:
        """
        Lower a concrete syntax tree into the Lua AST.

        Args:
            syntax: Root of the concrete syntax tree

        Returns:
            Chunk holding the top-level statements
        """
        pass

    def parse_file(self, file_path: str, content: str) -> Chunk:
        """
        Parse file content straight into the Lua AST.

        Args:
            file_path: Path to the file being parsed
            content: File content as string

        Returns:
            Chunk holding the top-level statements
        """
        return self.build_ast(self.parse_syntax(file_path, content))

"""
Lua Language Plugin for source parsing.

This plugin parses Lua source with tree-sitter-lua, converts the tree into
SyntaxNode models and lowers them into the Lua AST used by the flowchart
builder.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional

import tree_sitter
import tree_sitter_lua

from luaflow.exceptions import LuaParseError
from luaflow.models import Chunk, SyntaxNode
from plugins.base import LanguagePlugin
from plugins.lua.lowering import LuaAstLowering
from plugins.manager import PluginManager

logger = logging.getLogger(__name__)

PLUGIN_DIR = Path(__file__).parent

LUA_LANGUAGE = tree_sitter.Language(tree_sitter_lua.language())

# Extras that carry no control flow.
SKIPPED_NODE_TYPES = {"comment"}


class LuaPlugin(LanguagePlugin):
    """Lua language parsing plugin using tree-sitter."""

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize the Lua plugin.

        Args:
            config: Validated plugin configuration. If None, the bundled
                config.yaml is loaded through the PluginManager.
        """
        if config is None:
            config = PluginManager().load_plugin_config(PLUGIN_DIR)

        self._config = config

        self._parser = tree_sitter.Parser(LUA_LANGUAGE)
        self._lowering = LuaAstLowering(
            statement_kinds=self._config.get('statement_kinds'),
            ignored_statements=self._config.get('ignored_statements'),
        )

        logger.info("Lua plugin initialized successfully")

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "lua"

    @property
    def file_extensions(self) -> List[str]:
        """Return supported file extensions."""
        return self._config['file_extensions']

    def parse_syntax(self, file_path: str, content: str) -> SyntaxNode:
        """
        Parse Lua source using tree-sitter-lua.

        Args:
            file_path: Path to the file being parsed
            content: File content as string

        Returns:
            SyntaxNode for the 'chunk' root

        Raises:
            LuaParseError: If the source contains syntax errors
        """
        source = content.encode("utf8")
        tree = self._parser.parse(source)
        root = tree.root_node

        if root.has_error:
            error_node = self._find_error_node(root)
            line = error_node.start_point[0] + 1
            column = error_node.start_point[1] + 1
            logger.error(f"Syntax error in {file_path} at line {line}, column {column}")
            raise LuaParseError(
                f"Syntax error in {file_path} at line {line}, column {column}",
                line=line,
                column=column,
            )

        syntax = self._convert_to_syntax_node(root, source)
        logger.debug(f"Successfully parsed Lua file: {file_path}")
        return syntax

    def build_ast(self, syntax: SyntaxNode) -> Chunk:
        """Lower the syntax tree into the Lua AST."""
        return self._lowering.lower(syntax)

    def _find_error_node(self, ts_node: tree_sitter.Node) -> tree_sitter.Node:
        """
        Find the first ERROR or MISSING node below a node that has errors.

        Args:
            ts_node: tree-sitter Node with has_error set

        Returns:
            The innermost offending node, or ts_node itself if none is found
        """
        if ts_node.is_error or ts_node.is_missing:
            return ts_node

        for child in ts_node.children:
            if child.has_error or child.is_missing:
                return self._find_error_node(child)

        return ts_node

    def _convert_to_syntax_node(
        self,
        ts_node: tree_sitter.Node,
        source: bytes,
        field_name: Optional[str] = None,
    ) -> SyntaxNode:
        """
        Convert tree-sitter Node to SyntaxNode model.

        Only named children are kept; punctuation and keywords are dropped.

        Args:
            ts_node: tree-sitter Node
            source: Original file content as bytes
            field_name: Grammar field the node is attached under, if any

        Returns:
            SyntaxNode model instance
        """
        children = []
        cursor = ts_node.walk()
        if cursor.goto_first_child():
            while True:
                child = cursor.node
                if child.is_named and child.type not in SKIPPED_NODE_TYPES:
                    children.append(
                        self._convert_to_syntax_node(child, source, cursor.field_name)
                    )
                if not cursor.goto_next_sibling():
                    break

        return SyntaxNode(
            node_type=ts_node.type,
            field_name=field_name,
            start_line=ts_node.start_point[0] + 1,  # Convert to 1-indexed
            end_line=ts_node.end_point[0] + 1,
            start_column=ts_node.start_point[1],
            end_column=ts_node.end_point[1],
            children=children,
            text=source[ts_node.start_byte:ts_node.end_byte].decode("utf8"),
        )

"""
Diagram generation service.

This module provides the DiagramService class that reads a source file,
parses it through the matching language plugin, builds the flowchart and
renders/writes the Mermaid markup.
"""

import uuid
from pathlib import Path
from typing import Optional, Union

from luaflow.builders import FlowchartBuilder, NodeAllocator
from luaflow.exceptions import LuaFlowError, OutputWriteError, SourceReadError
from luaflow.models import Chunk, Diagram
from luaflow.renderers import MermaidRenderer
from luaflow.utils.logging import LogContext, get_logger, log_error_with_context, log_stage
from plugins.base import LanguagePlugin
from plugins.manager import PluginManager

logger = get_logger(__name__)

PathLike = Union[str, Path]


class DiagramService:
    """
    Source-to-flowchart pipeline.

    Every call builds the diagram with a fresh FlowchartBuilder, so one
    service instance can process any number of files.
    """

    def __init__(self, plugin_manager: PluginManager, settings=None):
        """
        Initialize the diagram service.

        Args:
            plugin_manager: PluginManager used to pick a parser per file
            settings: Optional Settings instance (global settings if omitted)
        """
        if settings is None:
            from luaflow.config import settings as app_settings
            settings = app_settings

        self.plugin_manager = plugin_manager
        self.settings = settings
        self.renderer = MermaidRenderer(
            direction=settings.graph_direction,
            include_branch_labels=settings.render_branch_labels,
        )

    def select_plugin(self, source_path: PathLike) -> LanguagePlugin:
        """
        Pick the plugin for a file, falling back to the default language.

        Raises:
            LuaFlowError: If neither the extension nor the default language has a plugin
        """
        plugin = self.plugin_manager.get_plugin_for_file(str(source_path))
        if plugin is not None:
            return plugin

        plugin = self.plugin_manager.get_plugin(self.settings.default_language)
        if plugin is None:
            raise LuaFlowError(f"No plugin found for file: {source_path}")

        logger.warning(
            f"No plugin registered for {source_path}, "
            f"parsing it as '{self.settings.default_language}'"
        )
        return plugin

    def load_ast(self, source_path: PathLike) -> Chunk:
        """
        Read and parse a source file.

        Args:
            source_path: Path to the source file

        Returns:
            Chunk for the parsed file

        Raises:
            SourceReadError: If the file cannot be read
            LuaParseError: If the parser rejects the source
        """
        path = Path(source_path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            log_error_with_context(logger, f"Failed to read {path}", e, source_path=str(path))
            raise SourceReadError(f"Cannot read {path}: {e}") from e

        plugin = self.select_plugin(path)
        log_stage(logger, str(path), "parse", "started", language=plugin.language_name)
        ast = plugin.parse_file(str(path), content)
        log_stage(logger, str(path), "parse", "completed", statements=len(ast.body))
        return ast

    def build_diagram(self, source_path: PathLike) -> Diagram:
        """
        Parse a file and build its flowchart.

        Args:
            source_path: Path to the source file

        Returns:
            Diagram for the file
        """
        ast = self.load_ast(source_path)

        run_logger = logger.with_context(run_id=uuid.uuid4().hex[:8])
        log_stage(run_logger, str(source_path), "build", "started")
        builder = FlowchartBuilder(
            allocator=NodeAllocator(prefix=self.settings.node_id_prefix),
            label_elseif_conditions=self.settings.label_elseif_conditions,
        )
        diagram = builder.build(ast)
        log_stage(
            run_logger,
            str(source_path),
            "build",
            "completed",
            nodes=len(diagram.nodes),
            edges=len(diagram.edges),
        )
        return diagram

    def generate(self, source_path: PathLike) -> str:
        """Return the Mermaid markup for a source file."""
        diagram = self.build_diagram(source_path)
        markup = self.renderer.render(diagram)
        log_stage(logger, str(source_path), "render", "completed")
        return markup

    def write(
        self,
        source_path: PathLike,
        output_path: Optional[PathLike] = None,
        write_markdown: Optional[bool] = None,
    ) -> Path:
        """
        Generate the diagram for a file and write it to disk.

        Args:
            source_path: Path to the source file
            output_path: Markup file path (settings.output_file if omitted)
            write_markdown: Also write '<output_path>.md' with a fenced block
                (settings.write_markdown if omitted)

        Returns:
            Path of the written markup file
        """
        output = Path(output_path if output_path is not None else self.settings.output_file)
        if write_markdown is None:
            write_markdown = self.settings.write_markdown

        diagram = self.build_diagram(source_path)
        markup = self.renderer.render(diagram)

        with LogContext(logger, output_path=str(output)):
            log_stage(logger, str(source_path), "write", "started")
            self._write_file(output, markup)
            if write_markdown:
                self._write_file(
                    output.with_name(output.name + ".md"),
                    self.renderer.render_markdown(
                        diagram, fence_language=self.settings.markdown_fence_language
                    ),
                )
            log_stage(logger, str(source_path), "write", "completed")
        return output

    @staticmethod
    def _write_file(path: Path, text: str) -> None:
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            log_error_with_context(logger, f"Failed to write {path}", e, target_path=str(path))
            raise OutputWriteError(f"Cannot write {path}: {e}") from e

"""Diagram markup renderers."""

from luaflow.renderers.mermaid import MermaidRenderer

__all__ = ["MermaidRenderer"]

"""AST-to-flowchart builders package."""

from luaflow.builders.graph_builder import FlowchartBuilder, NodeAllocator
from luaflow.builders.labels import sanitize_label

__all__ = ["FlowchartBuilder", "NodeAllocator", "sanitize_label"]

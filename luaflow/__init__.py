"""Lua control-flow to Mermaid flowchart generator."""

__version__ = "0.1.0"

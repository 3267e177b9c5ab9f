"""
Services for the Lua flowchart generator.
"""

from luaflow.services.diagram_service import DiagramService

__all__ = ["DiagramService"]

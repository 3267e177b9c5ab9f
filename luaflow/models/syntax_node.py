"""Concrete syntax tree node data model."""

from typing import List, Optional

from pydantic import BaseModel


class SyntaxNode(BaseModel):
    """Parser-agnostic concrete syntax tree node representation."""

    node_type: str
    field_name: Optional[str] = None
    start_line: int
    end_line: int
    start_column: int
    end_column: int
    children: List['SyntaxNode'] = []
    text: Optional[str] = None

    def child_by_field(self, field_name: str) -> Optional['SyntaxNode']:
        """Return the first child attached under the given grammar field."""
        for child in self.children:
            if child.field_name == field_name:
                return child
        return None

    def children_of_type(self, node_type: str) -> List['SyntaxNode']:
        """Return all direct children of the given node type."""
        return [child for child in self.children if child.node_type == node_type]

    def first_child_of_type(self, node_type: str) -> Optional['SyntaxNode']:
        for child in self.children:
            if child.node_type == node_type:
                return child
        return None


# Enable forward references for recursive model
SyntaxNode.model_rebuild()

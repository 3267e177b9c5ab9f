"""Flowchart diagram data models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DiagramNode(BaseModel):
    """A flowchart vertex."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Identifier unique within one traversal run")
    label: str = Field(..., description="Sanitized label, safe to embed in diagram markup")
    raw_label: str = Field(..., description="Label before sanitization")


class DiagramEdge(BaseModel):
    """A directed flowchart arc."""

    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Id of the originating node")
    target: str = Field(..., description="Id of the destination node")
    branch_label: Optional[str] = Field(None, description="Branch tag such as 'No' or 'Else'")


class Diagram(BaseModel):
    """Nodes and edges of one traversal run, in creation order."""

    nodes: List[DiagramNode] = []
    edges: List[DiagramEdge] = []

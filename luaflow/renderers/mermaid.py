"""
Mermaid flowchart renderer.

Serializes a Diagram into Mermaid ``graph`` markup: node declarations in
creation order followed by edges in creation order.
"""

from luaflow.models import Diagram, DiagramEdge


class MermaidRenderer:
    """Renders diagrams as Mermaid flowchart markup."""

    def __init__(self, direction: str = "TD", include_branch_labels: bool = True):
        """
        Initialize the renderer.

        Args:
            direction: Mermaid graph direction (TD, LR, BT, RL)
            include_branch_labels: Annotate branch edges with their label
        """
        self.direction = direction
        self.include_branch_labels = include_branch_labels

    def render(self, diagram: Diagram) -> str:
        """
        Render the diagram as Mermaid markup.

        Args:
            diagram: Diagram to serialize

        Returns:
            Markup text ending with a newline
        """
        lines = [f"graph {self.direction};"]
        for node in diagram.nodes:
            lines.append(f"  {node.id}[{node.label}];")
        for edge in diagram.edges:
            lines.append(f"  {self._format_edge(edge)};")
        return "\n".join(lines) + "\n"

    def render_markdown(self, diagram: Diagram, fence_language: str = "mermaid") -> str:
        """Render the diagram inside a fenced markdown code block."""
        return f"```{fence_language}\n{self.render(diagram)}\n```"

    def _format_edge(self, edge: DiagramEdge) -> str:
        if self.include_branch_labels and edge.branch_label:
            return f"{edge.source}-->|{edge.branch_label}|{edge.target}"
        return f"{edge.source}-->{edge.target}"

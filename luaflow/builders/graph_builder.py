"""
Flowchart builder for Lua abstract syntax trees.

This module provides:
- NodeAllocator, which hands out sequential node ids for one traversal run
- FlowchartBuilder, which walks a Lua AST depth-first and records diagram
  nodes and parent/child edges

Every run owns its own allocator and edge list; builders are never shared
between runs.
"""

import logging
from typing import Callable, Dict, List, Optional, Sequence, Type

from luaflow.builders import labels
from luaflow.exceptions import MalformedAstError
from luaflow.models import (
    AssignmentStatement,
    CallStatement,
    Chunk,
    Diagram,
    DiagramEdge,
    DiagramNode,
    ForGenericStatement,
    ForNumericStatement,
    FunctionDeclaration,
    IfStatement,
    LocalStatement,
    LuaNode,
    RepeatStatement,
    ReturnStatement,
    TableConstructorExpression,
    WhileStatement,
)

logger = logging.getLogger(__name__)

# Branch label for the first alternative clause, then for every later one.
FIRST_ALTERNATIVE_LABEL = "No"
LATER_ALTERNATIVE_LABEL = "Else"


class NodeAllocator:
    """Creates diagram nodes with ids unique within one traversal run."""

    def __init__(self, prefix: str = "node"):
        """
        Initialize the allocator.

        Args:
            prefix: Text prepended to the sequential counter to form node ids
        """
        self._prefix = prefix
        self._counter = 0
        self.nodes: List[DiagramNode] = []

    def create_node(self, label: str) -> str:
        """
        Sanitize the label, record a new node and return its id.

        Args:
            label: Raw node label

        Returns:
            Id of the created node
        """
        node_id = f"{self._prefix}{self._counter}"
        self._counter += 1
        self.nodes.append(
            DiagramNode(id=node_id, label=labels.sanitize_label(label), raw_label=label)
        )
        return node_id


class FlowchartBuilder:
    """
    Recursive AST-to-flowchart traversal.

    Dispatches on the AST model class. Container kinds (Chunk and plain
    statement lists) create no node and forward their parent id; every other
    kind creates exactly one node (repeat loops add a trailing "until" node)
    and links it from its parent.
    """

    def __init__(
        self,
        allocator: Optional[NodeAllocator] = None,
        label_elseif_conditions: bool = False,
    ):
        """
        Initialize the builder.

        Args:
            allocator: Node allocator for this run (a fresh one if omitted)
            label_elseif_conditions: Give each elseif clause its own condition node
        """
        self.allocator = allocator if allocator is not None else NodeAllocator()
        self.edges: List[DiagramEdge] = []
        self.label_elseif_conditions = label_elseif_conditions
        self._handlers: Dict[Type[LuaNode], Callable[..., Optional[str]]] = {
            Chunk: self._visit_chunk,
            IfStatement: self._visit_if,
            WhileStatement: self._visit_while,
            RepeatStatement: self._visit_repeat,
            ForNumericStatement: self._visit_for_numeric,
            ForGenericStatement: self._visit_for_generic,
            FunctionDeclaration: self._visit_function,
            ReturnStatement: self._visit_return,
            CallStatement: self._visit_call,
            AssignmentStatement: self._visit_assignment,
            LocalStatement: self._visit_local,
            TableConstructorExpression: self._visit_table,
        }

    @property
    def nodes(self) -> List[DiagramNode]:
        return self.allocator.nodes

    def build(self, root) -> Diagram:
        """
        Traverse a whole tree and return the resulting diagram.

        Args:
            root: Chunk (or any AST node / statement list) to start from

        Returns:
            Diagram with nodes and edges in creation order

        Raises:
            MalformedAstError: If a recognized node lacks label source text
        """
        try:
            self.traverse(root)
        except MalformedAstError as e:
            logger.error(f"Cannot build flowchart: {e}")
            raise

        logger.debug(
            f"Built flowchart with {len(self.nodes)} nodes and {len(self.edges)} edges"
        )
        return Diagram(nodes=list(self.nodes), edges=list(self.edges))

    def traverse(
        self,
        node,
        parent_id: Optional[str] = None,
        branch_label: Optional[str] = None,
    ) -> Optional[str]:
        """
        Emit the sub-graph for one AST node.

        Args:
            node: AST node or ordered list of AST nodes
            parent_id: Id of the diagram node to link from, if any
            branch_label: Label for the edge from the parent, if any

        Returns:
            Id of the node representing ``node``; for lists, the id of the
            first node produced; None when nothing was produced
        """
        if isinstance(node, (list, tuple)):
            return self._visit_block(node, parent_id, branch_label)

        handler = self._handlers.get(type(node))
        if handler is None:
            return self._visit_other(node, parent_id, branch_label)
        return handler(node, parent_id, branch_label)

    def _link(self, parent_id: Optional[str], child_id: str, branch_label: Optional[str] = None) -> None:
        if parent_id is not None:
            self.edges.append(
                DiagramEdge(source=parent_id, target=child_id, branch_label=branch_label)
            )

    def _emit(self, label: str, parent_id: Optional[str], branch_label: Optional[str]) -> str:
        node_id = self.allocator.create_node(label)
        self._link(parent_id, node_id, branch_label)
        return node_id

    def _visit_block(
        self,
        statements: Sequence,
        parent_id: Optional[str],
        branch_label: Optional[str],
    ) -> Optional[str]:
        # The branch label belongs to the edge into the block's entry node only.
        entry_id = None
        for statement in statements:
            child_id = self.traverse(
                statement,
                parent_id,
                branch_label if entry_id is None else None,
            )
            if entry_id is None:
                entry_id = child_id
        return entry_id

    def _visit_chunk(self, node: Chunk, parent_id, branch_label) -> None:
        for statement in node.body:
            self.traverse(statement, parent_id)
        return None

    def _visit_if(self, node: IfStatement, parent_id, branch_label) -> str:
        condition_id = self._emit(labels.if_label(node), parent_id, branch_label)

        for index, clause in enumerate(node.clauses):
            if index == 0:
                clause_label = None
            elif index == 1:
                clause_label = FIRST_ALTERNATIVE_LABEL
            else:
                clause_label = LATER_ALTERNATIVE_LABEL

            if self.label_elseif_conditions and clause.kind == "ElseifClause":
                elseif_id = self._emit(labels.elseif_label(clause), condition_id, clause_label)
                self.traverse(clause.body, elseif_id)
            else:
                self.traverse(clause.body, condition_id, clause_label)

        return condition_id

    def _visit_while(self, node: WhileStatement, parent_id, branch_label) -> str:
        while_id = self._emit(labels.while_label(node), parent_id, branch_label)
        self.traverse(node.body, while_id)
        return while_id

    def _visit_repeat(self, node: RepeatStatement, parent_id, branch_label) -> str:
        # Validate before emitting anything so a bad condition leaves no partial output.
        until_text = labels.until_label(node)
        repeat_id = self._emit(labels.repeat_label(node), parent_id, branch_label)
        self.traverse(node.body, repeat_id)
        until_id = self.allocator.create_node(until_text)
        self._link(repeat_id, until_id)
        return repeat_id

    def _visit_for_numeric(self, node: ForNumericStatement, parent_id, branch_label) -> str:
        for_id = self._emit(labels.for_numeric_label(node), parent_id, branch_label)
        self.traverse(node.body, for_id)
        return for_id

    def _visit_for_generic(self, node: ForGenericStatement, parent_id, branch_label) -> str:
        for_id = self._emit(labels.for_generic_label(node), parent_id, branch_label)
        self.traverse(node.body, for_id)
        return for_id

    def _visit_function(self, node: FunctionDeclaration, parent_id, branch_label) -> str:
        function_id = self._emit(labels.function_label(node), parent_id, branch_label)
        self.traverse(node.body, function_id)
        return function_id

    def _visit_return(self, node: ReturnStatement, parent_id, branch_label) -> str:
        return self._emit(labels.return_label(node), parent_id, branch_label)

    def _visit_call(self, node: CallStatement, parent_id, branch_label) -> str:
        return self._emit(labels.call_label(node), parent_id, branch_label)

    def _visit_assignment(self, node: AssignmentStatement, parent_id, branch_label) -> str:
        return self._emit(labels.assignment_label(node), parent_id, branch_label)

    def _visit_local(self, node: LocalStatement, parent_id, branch_label) -> str:
        return self._emit(labels.local_label(node), parent_id, branch_label)

    def _visit_table(self, node: TableConstructorExpression, parent_id, branch_label) -> str:
        return self._emit(labels.table_label(node), parent_id, branch_label)

    def _visit_other(self, node, parent_id, branch_label) -> str:
        # Unknown kinds are not assumed to contain traversable children.
        kind = labels.other_label(node)
        logger.debug(f"No dedicated handler for '{kind}', emitting placeholder node")
        return self._emit(kind, parent_id, branch_label)

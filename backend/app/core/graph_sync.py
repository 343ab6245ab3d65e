"""Graph synchronizer - translates between the dialogue document and the editor graph.

The document (node id -> record with choices) is the source of truth. The
graph (nodes + labelled edges) is rebuilt from it once per session and turned
back into a document before every save. The two directions are plain
functions over plain data; neither mutates its inputs.
"""

import logging

from app.core.errors import NodeNotFoundError, StructureError
from app.schemas.dialogue import START_NODE, Choice, DialogueNode, Document, Position
from app.schemas.graph import Graph, GraphEdge, GraphNode, GraphNodeData, edge_id

logger = logging.getLogger(__name__)

# Placeholder layout for nodes without a stored position
X_STEP = 400  # per hop from start
Y_STEP = 200  # per row / choice index

DEFAULT_CHOICE_TEXT = "Continue"
DEFAULT_CHOICE_SPEAKER = "Player"


def _graph_node(node_id: str, record: DialogueNode, position: Position) -> GraphNode:
    return GraphNode(
        id=node_id,
        position=position.model_copy(),
        data=GraphNodeData(
            speaker=record.speaker or "",
            text=record.text,
            label=record.text,
        ),
    )


def build_graph(document: Document) -> Graph:
    """Build the editor graph from a dialogue document.

    Walks the document depth-first from ``start`` and materialises every
    reachable node exactly once. Choices without text or target, or whose
    target is not in the document, are skipped without error.

    Raises:
        StructureError: ``start`` is missing, or a reachable record has no text.
    """
    if START_NODE not in document:
        raise StructureError(f'Dialogue document has no "{START_NODE}" node')

    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []
    visited: set[str] = set()
    # Keyed on the endpoint pair: ids like "a-b-c" are ambiguous
    pairs: set[tuple[str, str]] = set()

    # (node id, depth, index of the choice it was discovered through)
    stack: list[tuple[str, int, int]] = [(START_NODE, 0, 0)]
    while stack:
        node_id, depth, index = stack.pop()
        if node_id in visited:
            continue
        visited.add(node_id)

        record = document[node_id]
        if record.text is None:
            raise StructureError(f"Node {node_id!r} has no text")

        position = record.position or Position(
            x=depth * X_STEP, y=(len(nodes) + index) * Y_STEP
        )
        nodes.append(_graph_node(node_id, record, position))

        children: list[tuple[str, int, int]] = []
        for i, choice in record.parsed_choices():
            if not choice.text or not choice.next:
                logger.debug("Skipping incomplete choice %d on node %s", i, node_id)
                continue
            if choice.next not in document:
                logger.debug(
                    "Skipping choice %d on node %s: unknown target %s",
                    i, node_id, choice.next,
                )
                continue

            pair = (node_id, choice.next)
            if pair in pairs:
                # Only one edge per (source, target); the first choice owns it
                continue
            pairs.add(pair)
            edges.append(
                GraphEdge(
                    id=edge_id(node_id, choice.next),
                    source=node_id,
                    target=choice.next,
                    label=choice.text,
                )
            )
            children.append((choice.next, depth + 1, i))

        # Reverse so the first choice is visited first
        stack.extend(reversed(children))

    logger.info("Built graph with %d nodes and %d edges", len(nodes), len(edges))
    return Graph(nodes=nodes, edges=edges)


def _merge_outgoing_edges(record: DialogueNode, outgoing: list[GraphEdge]) -> None:
    """Update or append the choice behind each outgoing edge. Never removes."""
    for edge in outgoing:
        label = edge.label or DEFAULT_CHOICE_TEXT
        existing = next(
            (c for _, c in record.parsed_choices() if c.next == edge.target), None
        )
        if existing is not None:
            existing.text = label
            continue
        if not isinstance(record.choices, list):
            record.choices = []
        record.choices.append(
            Choice(speaker=DEFAULT_CHOICE_SPEAKER, text=label, next=edge.target)
        )


def reconcile(graph: Graph, prior: Document) -> Document:
    """Fold the editor graph back into a copy of the prior document.

    Each graph node's speaker, text and position are merged into its record;
    each outgoing edge updates the matching choice (by target) or appends a
    new one. Choices whose edge disappeared are left alone: removing them is
    the job of the explicit delete operations.
    """
    document = {node_id: record.model_copy(deep=True) for node_id, record in prior.items()}

    for node in graph.nodes:
        record = document.get(node.id)
        if record is None:
            record = document[node.id] = DialogueNode()
        record.speaker = node.data.speaker
        record.text = node.data.text
        record.position = node.position.model_copy()

        outgoing = [e for e in graph.edges if e.source == node.id]
        _merge_outgoing_edges(record, outgoing)

    return document


def reconcile_node(graph: Graph, prior: Document, node_id: str) -> Document:
    """Like ``reconcile`` but for a single node, leaving its position untouched."""
    node = next((n for n in graph.nodes if n.id == node_id), None)
    if node is None:
        raise NodeNotFoundError(node_id)

    document = {nid: record.model_copy(deep=True) for nid, record in prior.items()}
    record = document.get(node_id)
    if record is None:
        record = document[node_id] = DialogueNode()
    record.speaker = node.data.speaker
    record.text = node.data.text

    _merge_outgoing_edges(record, [e for e in graph.edges if e.source == node_id])
    return document

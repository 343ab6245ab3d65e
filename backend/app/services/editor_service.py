"""Editor service - the in-memory editing session over one dialogue document.

The session keeps the document and the graph side by side. Drag and connect
only touch the graph; every other edit updates both and ends with a save of
the freshly reconciled document. Storage failures never escape a session
operation: they come back as ``OperationResult(success=False)``, with the
in-memory state already changed.
"""

import logging
import time

from app.config import settings
from app.core.errors import (
    EdgeNotFoundError,
    NodeNotFoundError,
    StorageError,
    StructureError,
)
from app.core.graph_sync import (
    DEFAULT_CHOICE_SPEAKER,
    DEFAULT_CHOICE_TEXT,
    X_STEP,
    Y_STEP,
    build_graph,
    reconcile,
    reconcile_node,
)
from app.schemas.dialogue import (
    START_NODE,
    Choice,
    DialogueNode,
    Document,
    Position,
    choice_target,
)
from app.schemas.graph import (
    Graph,
    GraphEdge,
    GraphNode,
    GraphNodeData,
    OperationResult,
    edge_id,
)
from app.services.dialogue_store import DialogueStore

logger = logging.getLogger(__name__)


class EditorSession:
    def __init__(self, store: DialogueStore):
        self.store = store
        self.document: Document = {}
        self.graph: Graph | None = None
        self.error: str | None = None

    @property
    def is_loaded(self) -> bool:
        return self.graph is not None

    # --- Loading / saving ---

    def load(self) -> OperationResult:
        """(Re)load the document and rebuild the graph. Safe to retry."""
        try:
            document = self.store.load()
            graph = build_graph(document)
        except (StorageError, StructureError) as e:
            logger.error("Error loading dialogue data: %s", e)
            self.graph = None
            self.error = str(e)
            return OperationResult(success=False, error=self.error)

        self.document = document
        self.graph = graph
        self.error = None
        return OperationResult(success=True)

    def _persist(self, document: Document, **ids: str) -> OperationResult:
        """Adopt ``document`` in memory and write it out."""
        self.document = document
        try:
            self.store.save(document)
        except StorageError as e:
            logger.error("Error saving dialogue: %s", e)
            return OperationResult(success=False, error=str(e), **ids)
        return OperationResult(success=True, **ids)

    def save_all(self) -> OperationResult:
        """Reconcile the whole graph into the document and save it."""
        return self._persist(reconcile(self._graph(), self.document))

    # --- Lookups ---

    def _graph(self) -> Graph:
        if self.graph is None:
            raise StructureError(self.error or "Dialogue is not loaded")
        return self.graph

    def get_node(self, node_id: str) -> GraphNode:
        for node in self._graph().nodes:
            if node.id == node_id:
                return node
        raise NodeNotFoundError(node_id)

    def get_edge(self, eid: str) -> GraphEdge:
        for edge in self._graph().edges:
            if edge.id == eid:
                return edge
        raise EdgeNotFoundError(eid)

    def _new_node_id(self) -> str:
        """``node_<millis>``, bumped until it collides with nothing."""
        taken = set(self.document) | {n.id for n in self._graph().nodes}
        stamp = int(time.time() * 1000)
        while f"node_{stamp}" in taken:
            stamp += 1
        return f"node_{stamp}"

    # --- Graph-only edits (persisted by the next save_all) ---

    def move_node(self, node_id: str, x: float, y: float) -> GraphNode:
        node = self.get_node(node_id)
        node.position = Position(x=x, y=y)
        return node

    def connect(self, source_id: str, target_id: str, label: str = "") -> GraphEdge:
        """Draw an edge between two existing nodes.

        An ordered pair can only be connected once; connecting it again
        returns the existing edge unchanged.
        """
        self.get_node(source_id)
        self.get_node(target_id)
        for edge in self._graph().edges:
            if (edge.source, edge.target) == (source_id, target_id):
                return edge
        edge = GraphEdge(
            id=edge_id(source_id, target_id), source=source_id, target=target_id, label=label
        )
        self._graph().edges.append(edge)
        return edge

    # --- Persisted edits ---

    def create_connected_node(
        self, source_id: str, text: str, speaker: str = "", label: str = ""
    ) -> OperationResult | None:
        """Add a new node linked from ``source_id``. Returns None if text is blank."""
        if not text.strip():
            return None

        source = self.get_node(source_id)
        graph = self._graph()
        new_id = self._new_node_id()
        choice_text = label or DEFAULT_CHOICE_TEXT

        graph.nodes.append(
            GraphNode(
                id=new_id,
                position=Position(
                    x=source.position.x + X_STEP, y=source.position.y + Y_STEP
                ),
                data=GraphNodeData(speaker=speaker, text=text, label=text),
            )
        )
        edge = GraphEdge(
            id=edge_id(source_id, new_id), source=source_id, target=new_id, label=choice_text
        )
        graph.edges.append(edge)

        self.document[new_id] = DialogueNode(speaker=speaker, text=text, choices=[])
        source_record = self.document[source_id]
        if not isinstance(source_record.choices, list):
            source_record.choices = []
        source_record.choices.append(
            Choice(speaker=DEFAULT_CHOICE_SPEAKER, text=choice_text, next=new_id)
        )

        logger.info("Created node %s connected from %s", new_id, source_id)
        return self._persist(
            reconcile(graph, self.document), node_id=new_id, edge_id=edge.id
        )

    def update_node(
        self, node_id: str, speaker: str | None = None, text: str | None = None
    ) -> OperationResult:
        """Edit a node's speaker and/or text and save that node."""
        node = self.get_node(node_id)
        if speaker is not None:
            node.data.speaker = speaker
        if text is not None:
            node.data.text = text
            node.data.label = text
        return self._persist(
            reconcile_node(self._graph(), self.document, node_id), node_id=node_id
        )

    def edit_edge_label(self, eid: str, label: str) -> OperationResult:
        edge = self.get_edge(eid)
        edge.label = label
        return self._persist(reconcile(self._graph(), self.document), edge_id=eid)

    def delete_edge(self, eid: str) -> OperationResult:
        """Remove an edge and the choice behind it. The target node is kept."""
        edge = self.get_edge(eid)
        graph = self._graph()
        graph.edges = [e for e in graph.edges if e is not edge]

        record = self.document.get(edge.source)
        if record is not None and isinstance(record.choices, list):
            record.choices = [
                c for c in record.choices if choice_target(c) != edge.target
            ]

        logger.info("Deleted edge %s", eid)
        return self._persist(reconcile(graph, self.document), edge_id=eid)

    def delete_node(self, node_id: str) -> OperationResult:
        """Remove a node, its edges, its record and every choice pointing at it."""
        if node_id == START_NODE:
            raise StructureError(f'The "{START_NODE}" node cannot be deleted')
        self.get_node(node_id)

        graph = self._graph()
        graph.nodes = [n for n in graph.nodes if n.id != node_id]
        graph.edges = [
            e for e in graph.edges if e.source != node_id and e.target != node_id
        ]

        self.document.pop(node_id, None)
        for record in self.document.values():
            if isinstance(record.choices, list):
                record.choices = [
                    c for c in record.choices if choice_target(c) != node_id
                ]

        logger.info("Deleted node %s", node_id)
        return self._persist(reconcile(graph, self.document), node_id=node_id)


_session: EditorSession | None = None


def get_editor_session() -> EditorSession:
    """FastAPI dependency returning the process-wide editing session (lazy init)."""
    global _session
    if _session is None:
        _session = EditorSession(DialogueStore(settings.DIALOGUE_FILE))
    return _session

"""Visual graph Pydantic schemas (React Flow node/edge format) and editor requests."""

from pydantic import BaseModel

from app.schemas.dialogue import Position


def edge_id(source: str, target: str) -> str:
    """Edge identity is derived from its endpoints; one edge per ordered pair."""
    return f"{source}-{target}"


class GraphNodeData(BaseModel):
    speaker: str = ""
    text: str = ""
    label: str = ""  # display copy of text


class GraphNode(BaseModel):
    """A dialogue node as drawn in the editor."""
    id: str
    position: Position
    data: GraphNodeData


class GraphEdge(BaseModel):
    """A choice drawn as a labelled arrow from source to target."""
    id: str
    source: str
    target: str
    label: str = ""


class Graph(BaseModel):
    """Complete editor graph. Derived from the document, never persisted."""
    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []


# --- Editor requests / responses ---


class CreateNodeRequest(BaseModel):
    source_id: str
    text: str
    speaker: str = ""
    label: str = ""  # choice text on the new edge


class NodeUpdate(BaseModel):
    speaker: str | None = None
    text: str | None = None
    position: Position | None = None


class ConnectRequest(BaseModel):
    source: str
    target: str
    label: str = ""


class EdgeLabelUpdate(BaseModel):
    label: str = ""


class OperationResult(BaseModel):
    """Outcome of a load or a persisted edit."""
    success: bool
    error: str | None = None
    node_id: str | None = None
    edge_id: str | None = None

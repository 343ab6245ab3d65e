"""Editor graph endpoints - view the graph and apply edits to the session."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from app.core.errors import EdgeNotFoundError, NodeNotFoundError, StructureError
from app.schemas.graph import (
    ConnectRequest,
    CreateNodeRequest,
    EdgeLabelUpdate,
    Graph,
    GraphEdge,
    NodeUpdate,
    OperationResult,
)
from app.services.editor_service import EditorSession, get_editor_session

router = APIRouter()


def _loaded_session(session: EditorSession) -> EditorSession:
    """Load the session on first use; 500 if the dialogue can't be loaded."""
    if not session.is_loaded:
        result = session.load()
        if not result.success:
            raise HTTPException(status_code=500, detail=result.error)
    return session


def _result_response(result: OperationResult):
    """Failed saves are reported as 500 with the result body."""
    if not result.success:
        return JSONResponse(status_code=500, content=result.model_dump())
    return result


@router.get("/", response_model=Graph)
async def get_graph(session: EditorSession = Depends(get_editor_session)):
    """Current editor graph, loading the dialogue on first access."""
    return _loaded_session(session).graph


@router.post("/reload", response_model=Graph)
async def reload_graph(session: EditorSession = Depends(get_editor_session)):
    """Discard unsaved edits and rebuild the graph from storage."""
    result = session.load()
    if not result.success:
        raise HTTPException(status_code=500, detail=result.error)
    return session.graph


@router.post("/save", response_model=OperationResult)
async def save_graph(session: EditorSession = Depends(get_editor_session)):
    return _result_response(_loaded_session(session).save_all())


@router.post("/nodes", response_model=OperationResult, status_code=201)
async def create_node(req: CreateNodeRequest, session: EditorSession = Depends(get_editor_session)):
    """Create a node connected from an existing one."""
    session = _loaded_session(session)
    try:
        result = session.create_connected_node(
            req.source_id, req.text, speaker=req.speaker, label=req.label
        )
    except NodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    if result is None:
        raise HTTPException(status_code=400, detail="Node text must not be empty")
    return _result_response(result)


@router.patch("/nodes/{node_id}", response_model=OperationResult)
async def update_node(
    node_id: str, data: NodeUpdate, session: EditorSession = Depends(get_editor_session)
):
    """Move a node (in memory) and/or edit its speaker and text (saved)."""
    session = _loaded_session(session)
    try:
        if data.position is not None:
            session.move_node(node_id, data.position.x, data.position.y)
        if data.speaker is None and data.text is None:
            return OperationResult(success=True, node_id=node_id)
        result = session.update_node(node_id, speaker=data.speaker, text=data.text)
    except NodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _result_response(result)


@router.delete("/nodes/{node_id}", response_model=OperationResult)
async def delete_node(node_id: str, session: EditorSession = Depends(get_editor_session)):
    session = _loaded_session(session)
    try:
        result = session.delete_node(node_id)
    except NodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StructureError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _result_response(result)


@router.post("/edges", response_model=GraphEdge, status_code=201)
async def connect_nodes(req: ConnectRequest, session: EditorSession = Depends(get_editor_session)):
    """Connect two nodes. Kept in memory until the next save."""
    session = _loaded_session(session)
    try:
        return session.connect(req.source, req.target, label=req.label)
    except NodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/edges/{edge_id}", response_model=OperationResult)
async def edit_edge(
    edge_id: str, data: EdgeLabelUpdate, session: EditorSession = Depends(get_editor_session)
):
    session = _loaded_session(session)
    try:
        result = session.edit_edge_label(edge_id, data.label)
    except EdgeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _result_response(result)


@router.delete("/edges/{edge_id}", response_model=OperationResult)
async def delete_edge(edge_id: str, session: EditorSession = Depends(get_editor_session)):
    session = _loaded_session(session)
    try:
        result = session.delete_edge(edge_id)
    except EdgeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _result_response(result)

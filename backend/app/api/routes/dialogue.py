"""Dialogue document endpoints - whole-document load and save."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.errors import StorageError
from app.schemas.dialogue import DialogueNode, dump_document
from app.services.dialogue_store import DialogueStore, get_dialogue_store

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def load_dialogue(store: DialogueStore = Depends(get_dialogue_store)):
    """Return the full dialogue document."""
    try:
        document = store.load()
    except StorageError as e:
        logger.error("Error reading dialogue file: %s", e)
        return JSONResponse(status_code=500, content={"error": "Failed to read dialogue file"})
    return dump_document(document)


@router.post("/")
async def save_dialogue(
    document: dict[str, DialogueNode],
    store: DialogueStore = Depends(get_dialogue_store),
):
    """Overwrite the stored dialogue with the request body."""
    try:
        store.save(document)
    except StorageError as e:
        logger.error("Error saving dialogue: %s", e)
        return JSONResponse(status_code=500, content={"error": "Failed to save dialogue"})
    return {"success": True}

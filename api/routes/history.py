"""API routes for saved documents and the send log"""

from fastapi import APIRouter, Depends, HTTPException
import logging

from api.state import AppState, get_app_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/history", tags=["history"])


@router.get("")
async def list_saved_documents(state: AppState = Depends(get_app_state)):
    documents = state.history.saved_documents
    return {
        "count": len(documents),
        "documents": [d.model_dump(mode="json") for d in documents],
    }


@router.get("/logs")
async def list_logs(state: AppState = Depends(get_app_state)):
    logs = state.history.logs
    return {"count": len(logs), "logs": [entry.model_dump(mode="json") for entry in logs]}


@router.get("/{saved_id}")
async def get_saved_document(saved_id: str, state: AppState = Depends(get_app_state)):
    saved = state.history.get_saved(saved_id)
    if saved is None:
        raise HTTPException(status_code=404, detail=f"Saved document {saved_id} not found")
    return saved.model_dump(mode="json")

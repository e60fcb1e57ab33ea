"""API routes for panel visibility and UI preferences"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Optional
import logging

from invoice_creator.models.history import SendChannel
from api.state import AppState, get_app_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/presentation", tags=["presentation"])


class PresentationUpdateRequest(BaseModel):
    show_contacts: Optional[bool] = None
    show_send_dialog: Optional[bool] = None
    show_history: Optional[bool] = None
    show_parts_lookup: Optional[bool] = None
    show_options: Optional[bool] = None
    tutorial_step: Optional[int] = None
    send_method: Optional[SendChannel] = None
    save_to_device: Optional[bool] = None
    share_enabled: Optional[bool] = None
    selected_item_id: Optional[int] = None


@router.get("")
async def get_presentation(state: AppState = Depends(get_app_state)):
    return state.presentation.model_dump(mode="json")


@router.patch("")
async def update_presentation(
    request: PresentationUpdateRequest,
    state: AppState = Depends(get_app_state)
):
    state.presentation = state.presentation.model_copy(
        update=request.model_dump(exclude_unset=True)
    )
    return state.presentation.model_dump(mode="json")


@router.post("/tutorial/dismiss")
async def dismiss_tutorial(state: AppState = Depends(get_app_state)):
    """Hide the tutorial for good"""
    await state.dismiss_tutorial()
    return state.presentation.model_dump(mode="json")

"""API route for sending the working document"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Optional
import logging

from invoice_creator.models.history import SendChannel
from api.state import AppState, get_app_state

logger = logging.getLogger(__name__)

router = APIRouter(tags=["send"])


class SendRequest(BaseModel):
    """Channel and export preferences; omitted preferences come from presentation state"""
    channel: Optional[SendChannel] = None
    save_to_device: Optional[bool] = None
    share_enabled: Optional[bool] = None


@router.post("/send")
async def send_document(request: SendRequest, state: AppState = Depends(get_app_state)):
    """
    Save the document to history and hand it to the chosen channel

    For message and mail the response carries the URI for the client to
    open. A clipboard failure comes back with close_dialog false.
    """
    presentation = state.presentation
    channel = request.channel or presentation.send_method
    save_to_device = (
        presentation.save_to_device if request.save_to_device is None else request.save_to_device
    )
    share_enabled = (
        presentation.share_enabled if request.share_enabled is None else request.share_enabled
    )

    result = await state.dispatcher.send(
        channel,
        save_to_device=save_to_device,
        share_enabled=share_enabled,
    )
    state.presentation = presentation.model_copy(
        update={"show_send_dialog": not result.close_dialog}
    )
    return result.model_dump(mode="json")

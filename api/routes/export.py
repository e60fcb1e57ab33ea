"""API routes for rendering and exporting the working document"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from urllib.parse import quote
import logging

from invoice_creator.export.export_service import CONTENT_TYPES
from invoice_creator.export.renderers import ExportFormat, artifact_file_names
from api.state import AppState, get_app_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])


def content_disposition(file_name: str) -> str:
    """Attachment header that survives non-Latin-1 document numbers"""
    fallback = file_name.encode("ascii", "replace").decode("ascii")
    fallback = fallback.replace("?", "_").replace('"', "_").replace("\\", "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name)}"


@router.post("/device")
async def export_to_device(state: AppState = Depends(get_app_state)):
    """Write all four artifacts to the export directory"""
    try:
        outcome = state.export_service.export_to_device(state.editor.snapshot())
    except OSError as e:
        logger.error(f"Error exporting to device: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Could not save files: {str(e)}")
    return outcome.model_dump(mode="json")


@router.post("/share")
async def share(state: AppState = Depends(get_app_state)):
    """
    Share the text and CSV artifacts

    The server has no native share sheet, so this always takes the
    device-export fallback.
    """
    try:
        outcome = await state.export_service.share(state.editor.snapshot())
    except OSError as e:
        logger.error(f"Error sharing files: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Could not save files: {str(e)}")
    return outcome.model_dump(mode="json")


@router.get("/{export_format}")
async def render_document(export_format: ExportFormat, state: AppState = Depends(get_app_state)):
    """Rendered artifact as a file download"""
    document = state.editor.snapshot()
    content = state.export_service.render(document, export_format)
    file_name = artifact_file_names(document)[export_format]
    return Response(
        content=content,
        media_type=CONTENT_TYPES[export_format],
        headers={"Content-Disposition": content_disposition(file_name)},
    )

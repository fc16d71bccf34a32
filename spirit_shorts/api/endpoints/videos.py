import logging
import traceback
from typing import List, Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from spirit_shorts.crud.videos import delete_video, list_videos
from spirit_shorts.models.base import get_session
from spirit_shorts.schemas.process import ErrorResponse
from spirit_shorts.schemas.videos import DeleteVideoRequest, DeleteVideoResponse, HistoryRecord

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/videos", response_model=List[HistoryRecord], responses={500: {"model": ErrorResponse}})
def get_videos(limit: Optional[int] = Query(None, ge=1, description="Número máximo de registros")):
    """Historial de videos procesados, del más reciente al más antiguo."""
    try:
        db = get_session()
        try:
            return [HistoryRecord.model_validate(video) for video in list_videos(db, limit=limit)]
        finally:
            db.close()
    except Exception as e:
        logger.error(f"Failed to fetch videos: {str(e)}\n{traceback.format_exc()}")
        return JSONResponse(status_code=500, content={"error": "Failed to fetch videos"})

@router.delete(
    "/videos",
    response_model=DeleteVideoResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
def remove_video(request: DeleteVideoRequest):
    """Elimina un video del historial."""
    if not request.id:
        return JSONResponse(status_code=400, content={"error": "ID is required"})

    try:
        db = get_session()
        try:
            deleted = delete_video(db, request.id)
        finally:
            db.close()
    except Exception as e:
        logger.error(f"Failed to delete video {request.id}: {str(e)}\n{traceback.format_exc()}")
        return JSONResponse(status_code=500, content={"error": "Failed to delete video"})

    if not deleted:
        return JSONResponse(status_code=404, content={"error": "Video not found"})
    return {"success": True}

import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from spirit_shorts.schemas.process import ErrorResponse, GenerationConfig, ProcessRequest, ProcessResponse
from spirit_shorts.services.generation import process_video

logger = logging.getLogger(__name__)

router = APIRouter()

def _parse_style_config(raw: Any) -> Optional[Dict[str, Any]]:
    """Las opciones de estilo no se usan todavía; si no son válidas se descartan."""
    if raw is None:
        return None
    try:
        return GenerationConfig.model_validate(raw).model_dump(exclude_none=True) or None
    except ValidationError as e:
        logger.warning(f"Opciones de estilo no válidas, se ignoran: {raw!r} ({e.error_count()} errores)")
        return None

@router.post(
    "/process",
    response_model=ProcessResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def process(request: ProcessRequest):
    """
    Procesa un video de YouTube y genera su contenido.

    - Obtiene metadatos y transcripción
    - Genera resumen, esencia, cita y prompt de imagen en paralelo
    - Genera la imagen de fondo y guarda el resultado en el historial
    """
    if not isinstance(request.url, str) or not request.url.strip():
        return JSONResponse(status_code=400, content={"error": "URL is required"})

    try:
        config = _parse_style_config(request.config)
        return await process_video(request.url.strip(), config=config)
    except Exception as e:
        logger.error(f"Error processing video: {str(e)}\n{traceback.format_exc()}")
        return JSONResponse(status_code=500, content={"error": "Failed to process video"})

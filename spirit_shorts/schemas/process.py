from pydantic import BaseModel, Field
from typing import Any, Literal, Optional

class GenerationConfig(BaseModel):
    # Opciones de estilo que envía la interfaz; todavía no influyen en los prompts
    vibe: Optional[Literal["ethereal", "grounded", "cosmic", "zen"]] = None
    length: Optional[Literal["balanced", "insightful"]] = None
    depth: Optional[int] = Field(default=None, ge=0, le=100)

class ProcessRequest(BaseModel):
    # Sin tipos estrictos: la validación la hace el endpoint para responder siempre con {"error": ...}
    url: Optional[Any] = None
    config: Optional[Any] = None

class VideoMetadata(BaseModel):
    title: str
    thumbnail_url: str
    author_name: str
    description: str = ""

class SummarySet(BaseModel):
    structured: str
    spiritual: str
    quote: str
    image_prompt: str
    image_url: str

class ProcessResponse(BaseModel):
    metadata: VideoMetadata
    transcript: str
    summaries: SummarySet

class ErrorResponse(BaseModel):
    error: str

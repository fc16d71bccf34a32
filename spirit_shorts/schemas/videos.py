from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional

class HistoryRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    video_url: str
    title: str
    channel_name: Optional[str] = ""
    transcript: Optional[str] = ""
    structured: str
    spiritual: str
    quote: str
    image_prompt: str
    image_url: str
    created_at: datetime

class DeleteVideoRequest(BaseModel):
    id: Optional[str] = None

class DeleteVideoResponse(BaseModel):
    success: bool

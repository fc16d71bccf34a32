from sqlalchemy import Column, DateTime, String, Text, func

from spirit_shorts.models.base import Base

class Video(Base):
    """Video procesado junto con todo el contenido generado."""
    __tablename__ = "videos"

    id = Column(String, primary_key=True)
    video_url = Column(String, index=True, nullable=False)
    title = Column(String, nullable=False, default="")
    channel_name = Column(String, default="")
    transcript = Column(Text)  # Truncada
    structured = Column(Text)
    spiritual = Column(Text)
    quote = Column(Text)
    image_prompt = Column(Text)
    image_url = Column(Text)  # URL o data URI
    created_at = Column(DateTime(timezone=True), default=func.now(), index=True)

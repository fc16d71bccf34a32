import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from spirit_shorts.models.videos import Video

# Longitud máxima de la transcripción guardada en el historial
HISTORY_TRANSCRIPT_LIMIT = 10000

def create_video(db: Session, video_data: Dict[str, Any]) -> Video:
    """
    Crea un nuevo registro de historial en la base de datos.
    """
    transcript = video_data.get('transcript') or ''

    db_video = Video(
        id=video_data.get('id') or str(uuid.uuid4()),
        video_url=video_data['video_url'],
        title=video_data.get('title') or '',
        channel_name=video_data.get('channel_name') or '',
        transcript=transcript[:HISTORY_TRANSCRIPT_LIMIT],
        structured=video_data.get('structured', ''),
        spiritual=video_data.get('spiritual', ''),
        quote=video_data.get('quote', ''),
        image_prompt=video_data.get('image_prompt', ''),
        image_url=video_data.get('image_url', ''),
        created_at=video_data.get('created_at') or datetime.now(timezone.utc)
    )

    db.add(db_video)
    db.commit()
    db.refresh(db_video)
    return db_video

def list_videos(db: Session, limit: Optional[int] = None) -> List[Video]:
    """
    Obtiene el historial, del más reciente al más antiguo.
    """
    query = db.query(Video).order_by(Video.created_at.desc())
    if limit:
        query = query.limit(limit)
    return query.all()

def get_video(db: Session, video_id: str) -> Optional[Video]:
    return db.query(Video).filter(Video.id == video_id).first()

def delete_video(db: Session, video_id: str) -> bool:
    """
    Elimina un registro del historial. Devuelve False si no existía.
    """
    db_video = get_video(db, video_id)
    if not db_video:
        return False

    db.delete(db_video)
    db.commit()
    return True

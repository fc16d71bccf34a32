import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional
from urllib.parse import parse_qs, urlparse

import requests
from youtube_transcript_api import YouTubeTranscriptApi

from spirit_shorts import config

logger = logging.getLogger(__name__)

OEMBED_URL = "https://www.youtube.com/oembed"
DEFAULT_LANGUAGES = ["en", "es"]

executor = ThreadPoolExecutor(max_workers=4)

_YOUTUBE_HOSTS = ('youtube.com', 'www.youtube.com', 'm.youtube.com', 'music.youtube.com')
_SHORT_HOSTS = ('youtu.be', 'www.youtu.be')
_PATH_PREFIXES = ('/shorts/', '/embed/', '/live/', '/v/')


class VideoMetadataError(Exception):
    """No se pudieron obtener los metadatos del video."""


def get_video_id(url: str) -> str:
    """Extrae el ID del video de una URL de YouTube."""
    parsed_url = urlparse(url.strip())
    if parsed_url.hostname in _SHORT_HOSTS:
        video_id = parsed_url.path[1:].split('/')[0]
        if video_id:
            return video_id
    if parsed_url.hostname in _YOUTUBE_HOSTS:
        if parsed_url.path == '/watch':
            ids = parse_qs(parsed_url.query).get('v')
            if ids and ids[0]:
                return ids[0]
        for prefix in _PATH_PREFIXES:
            if parsed_url.path.startswith(prefix):
                video_id = parsed_url.path[len(prefix):].split('/')[0]
                if video_id:
                    return video_id
    raise ValueError("Invalid YouTube URL")


def get_video_metadata(url: str) -> Dict[str, str]:
    """
    Obtiene título, miniatura y autor a través de oEmbed.
    oEmbed no devuelve descripción, así que siempre queda vacía.
    """
    try:
        response = requests.get(
            OEMBED_URL,
            params={"url": url, "format": "json"},
            timeout=config.PROVIDER_TIMEOUT
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        raise VideoMetadataError(f"Failed to fetch video metadata: {str(e)}") from e

    return {
        "title": data.get("title") or "",
        "thumbnail_url": data.get("thumbnail_url") or "",
        "author_name": data.get("author_name") or "",
        "description": "",
    }


def _snippet_text(entry) -> str:
    # Las versiones de la librería devuelven diccionarios u objetos
    if isinstance(entry, dict):
        return entry.get('text', '')
    return getattr(entry, 'text', '')


def get_video_transcript(url: str, languages: Optional[List[str]] = None) -> Optional[str]:
    """
    Obtiene la transcripción completa como un único texto.

    Prueba los idiomas indicados, luego cualquier transcripción auto-generada
    y por último la primera disponible. Devuelve None si algo falla.
    """
    languages = languages or DEFAULT_LANGUAGES
    try:
        video_id = get_video_id(url)
        transcript_list = YouTubeTranscriptApi().list(video_id)

        transcript = None
        try:
            transcript = transcript_list.find_transcript(languages)
        except Exception as e:
            logger.info(f"No se encontró transcripción en {languages}, buscando alternativas: {str(e)}")

        if not transcript:
            available_transcripts = list(transcript_list)
            for t in available_transcripts:
                if t.is_generated:
                    transcript = t
                    logger.info(f"Usando transcripción auto-generada en {t.language_code}")
                    break
            if not transcript and available_transcripts:
                transcript = available_transcripts[0]
                logger.info(f"Usando la primera transcripción disponible en {transcript.language_code}")

        if not transcript:
            logger.warning(f"No se encontraron transcripciones para el video {video_id}")
            return None

        text = " ".join(_snippet_text(entry) for entry in transcript.fetch())
        return text.strip() or None
    except Exception as e:
        logger.error(f"Error al obtener la transcripción de {url}: {str(e)}")
        return None


async def get_video_metadata_async(url: str) -> Dict[str, str]:
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(executor, get_video_metadata, url)


async def get_video_transcript_async(url: str, languages: Optional[List[str]] = None) -> Optional[str]:
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(executor, get_video_transcript, url, languages)

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from spirit_shorts.crud.videos import create_video
from spirit_shorts.models.base import get_session
from spirit_shorts.services.defaults import (
    FALLBACK_IMAGE_URL,
    MOCK_SUMMARIES,
    PLACEHOLDER_TRANSCRIPT,
)
from spirit_shorts.services.providers import (
    ImageProvider,
    ProviderError,
    TextProvider,
    get_image_providers,
    get_text_provider,
)
from spirit_shorts.services.text_cleaning import MODE_STRICT, MODE_SUMMARY, normalize
from spirit_shorts.services.youtube import (
    get_video_metadata_async,
    get_video_transcript_async,
)

logger = logging.getLogger(__name__)

# Caracteres de la transcripción que se envían en cada prompt
TRANSCRIPT_PROMPT_LIMIT = 20000

IMAGE_STYLE_PREFIX = "Vertical 9:16 aspect ratio. Spiritual, ethereal, cinematic, 8k resolution."

# Una llamada al modelo por faceta; se lanzan todas a la vez
FACETS = [
    {
        "name": "structured",
        "system": "Output ONLY a bulleted list of 3 points. NO intro. NO outro. NO citations.",
        "prompt": "Summarize this text into 3 bullet points:\n\n{transcript}",
        "mode": MODE_SUMMARY,
    },
    {
        "name": "spiritual",
        "system": "Output ONLY the spiritual essence text. NO intro. NO outro. NO citations.",
        "prompt": "Rewrite the soul of this message into a poetic spiritual essence:\n\n{transcript}",
        "mode": MODE_STRICT,
    },
    {
        "name": "quote",
        "system": "Output ONLY the quote text. NO intro. NO outro. NO citations.",
        "prompt": "Extract the single best short quote from this text:\n\n{transcript}",
        "mode": MODE_STRICT,
    },
    {
        "name": "image_prompt",
        "system": "Output ONLY the image description. NO intro. NO outro. NO citations.",
        "prompt": "Describe an abstract, cinematic, spiritual background image (9:16) based on this text:\n\n{transcript}",
        "mode": MODE_STRICT,
    },
]

executor = ThreadPoolExecutor(max_workers=len(FACETS))


def _generate_facet(provider: TextProvider, facet: Dict[str, str], transcript: str) -> str:
    raw = provider.generate_text(facet["prompt"].format(transcript=transcript), facet["system"])
    cleaned = normalize(raw, facet["mode"])
    if not cleaned:
        raise ProviderError(f"El modelo devolvió una respuesta vacía para '{facet['name']}'")
    logger.info(f"Faceta '{facet['name']}' generada")
    return cleaned


async def generate_text_facets(transcript: str, provider: Optional[TextProvider] = None) -> Dict[str, str]:
    """
    Genera las cuatro facetas de texto en paralelo.
    Si cualquiera falla, la excepción se propaga y se descarta el lote entero.
    """
    provider = provider or get_text_provider()
    excerpt = transcript[:TRANSCRIPT_PROMPT_LIMIT]

    loop = asyncio.get_event_loop()
    tasks = [
        loop.run_in_executor(executor, _generate_facet, provider, facet, excerpt)
        for facet in FACETS
    ]
    results = await asyncio.gather(*tasks)
    return {facet["name"]: text for facet, text in zip(FACETS, results)}


def generate_image(image_prompt: str, providers: Optional[List[ImageProvider]] = None) -> str:
    """
    Recorre la cadena de proveedores de imagen hasta que uno responda.

    Raises:
        ProviderError: si no hay proveedores o fallan todos
    """
    if providers is None:
        providers = get_image_providers()
    if not providers:
        raise ProviderError("No hay proveedores de imagen configurados")

    prompt = f"{IMAGE_STYLE_PREFIX} {image_prompt}"
    errors = []
    for provider in providers:
        try:
            image_url = provider.generate_image(prompt)
            logger.info(f"Imagen generada con {provider.name}")
            return image_url
        except ProviderError as e:
            logger.warning(f"Fallo del proveedor de imagen {provider.name}: {str(e)}")
            errors.append(f"{provider.name}: {str(e)}")
    raise ProviderError(f"Fallaron todos los proveedores de imagen ({'; '.join(errors)})")


async def generate_image_async(image_prompt: str, providers: Optional[List[ImageProvider]] = None) -> str:
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(executor, generate_image, image_prompt, providers)


async def generate_summaries(transcript: str) -> Dict[str, str]:
    """
    Produce el conjunto completo de resúmenes. Nunca falla: cada etapa
    sustituye su resultado por el contenido fijo correspondiente.
    """
    try:
        logger.info("Iniciando generación de texto...")
        summaries = await generate_text_facets(transcript)
    except Exception as e:
        logger.error(f"Falló la generación de texto, usando contenido simulado: {str(e)}")
        summaries = dict(MOCK_SUMMARIES)
        summaries["image_url"] = FALLBACK_IMAGE_URL
        return summaries

    try:
        logger.info("Generación de texto completa. Iniciando generación de imagen...")
        summaries["image_url"] = await generate_image_async(summaries["image_prompt"])
    except Exception as e:
        logger.error(f"Falló la generación de imagen, usando imagen de respaldo: {str(e)}")
        summaries["image_url"] = FALLBACK_IMAGE_URL

    return summaries


def save_history_record(video_url: str, metadata: Dict[str, str], transcript: str,
                        summaries: Dict[str, str]) -> Optional[str]:
    """
    Guarda el resultado en el historial. Los errores solo se registran.
    Devuelve el ID del registro o None si no se pudo guardar.
    """
    try:
        db = get_session()
        try:
            video = create_video(db, {
                "video_url": video_url,
                "title": metadata.get("title", ""),
                "channel_name": metadata.get("author_name", ""),
                "transcript": transcript,
                **summaries
            })
            logger.info(f"Video guardado en el historial con ID {video.id}")
            return video.id
        finally:
            db.close()
    except Exception as e:
        logger.error(f"No se pudo guardar el video {video_url} en el historial: {str(e)}")
        return None


async def process_video(video_url: str, config: Optional[Dict[str, Any]] = None,
                        save: bool = True) -> Dict[str, Any]:
    """
    Procesa un video de principio a fin.

    Args:
        video_url: URL del video de YouTube
        config: Opciones de estilo enviadas por la interfaz (no se aplican)
        save: Si se guarda el resultado en el historial

    Returns:
        Diccionario con metadata, transcript y summaries

    Raises:
        VideoMetadataError: si no se pueden obtener los metadatos
    """
    if config:
        logger.info(f"Opciones de estilo recibidas (sin efecto en los prompts): {config}")

    metadata = await get_video_metadata_async(video_url)

    transcript = await get_video_transcript_async(video_url)
    if not transcript:
        logger.info("Transcripción no encontrada, usando transcripción simulada")
        transcript = PLACEHOLDER_TRANSCRIPT

    summaries = await generate_summaries(transcript)

    if save:
        loop = asyncio.get_event_loop()
        await loop.run_in_executor(executor, save_history_record, video_url, metadata, transcript, summaries)

    return {
        "metadata": metadata,
        "transcript": transcript,
        "summaries": summaries
    }

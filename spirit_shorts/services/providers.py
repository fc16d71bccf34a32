import logging
from typing import Any, Dict, List, Optional

import requests

from spirit_shorts import config

logger = logging.getLogger(__name__)

# Modelos por defecto de cada proveedor
DEFAULT_TEXT_MODELS = {
    "gateway": "perplexity/sonar-pro",
    "perplexity": "sonar-pro",
    "openai": "gpt-4o-mini",
    "gemini": "gemini-1.5-flash",
}
DEFAULT_IMAGE_MODELS = {
    "openai": "dall-e-3",
    "gateway": "openai/dall-e-3",
    "imagen": "imagen-3.0-generate-002",
}

# Formato vertical 9:16 para las historias
IMAGE_SIZE = "1024x1792"
IMAGE_ASPECT_RATIO = "9:16"

ROUTING_HEADER = "X-Vercel-AI-Provider"


class ProviderError(Exception):
    """Fallo de un proveedor de texto o imagen (red, estado HTTP o respuesta inesperada)."""


def _post_json(url: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None,
               params: Optional[Dict[str, str]] = None, timeout: Optional[float] = None) -> Dict[str, Any]:
    """POST con JSON que convierte cualquier fallo en ProviderError."""
    request_headers = {"Content-Type": "application/json"}
    request_headers.update(headers or {})
    try:
        response = requests.post(
            url,
            headers=request_headers,
            params=params,
            json=payload,
            timeout=timeout if timeout is not None else config.PROVIDER_TIMEOUT
        )
    except requests.RequestException as e:
        raise ProviderError(f"Error de conexión con {url}: {str(e)}") from e

    if response.status_code != 200:
        raise ProviderError(f"Código de error {response.status_code} de {url}: {response.text[:500]}")

    try:
        return response.json()
    except ValueError as e:
        raise ProviderError(f"Respuesta no JSON de {url}") from e


class TextProvider:
    """Genera texto a partir de un prompt y una instrucción de sistema."""

    name = "text"

    def generate_text(self, prompt: str, system_instruction: str) -> str:
        raise NotImplementedError


class ImageProvider:
    """Genera una imagen y devuelve su URL o un data URI."""

    name = "image"

    def generate_image(self, prompt: str) -> str:
        raise NotImplementedError


class OpenAICompatibleTextProvider(TextProvider):
    """
    Cliente de chat completions con la forma de la API de OpenAI.
    Sirve para el gateway (con cabecera de enrutado), Perplexity y OpenAI.
    """

    def __init__(self, name: str, base_url: str, api_key: Optional[str], model: str,
                 routing_provider: Optional[str] = None):
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.routing_provider = routing_provider

    def generate_text(self, prompt: str, system_instruction: str) -> str:
        headers = {"Authorization": f"Bearer {self.api_key or ''}"}
        if self.routing_provider:
            headers[ROUTING_HEADER] = self.routing_provider

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": prompt}
            ]
        }
        result = _post_json(f"{self.base_url}/chat/completions", payload, headers=headers)
        try:
            return result["choices"][0]["message"].get("content") or ""
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ProviderError(f"Estructura de respuesta inesperada de {self.name}: {result}") from e


class GeminiTextProvider(TextProvider):
    """Cliente de Google Gemini (generateContent)."""

    name = "gemini"

    def __init__(self, api_key: Optional[str], model: str, base_url: str = config.GEMINI_API_URL):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")

    def generate_text(self, prompt: str, system_instruction: str) -> str:
        payload = {
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}]
        }
        result = _post_json(
            f"{self.base_url}/models/{self.model}:generateContent",
            payload,
            params={"key": self.api_key or ""}
        )
        try:
            parts = result["candidates"][0]["content"]["parts"]
            return "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ProviderError(f"Estructura de respuesta inesperada de gemini: {result}") from e


class OpenAIImageProvider(ImageProvider):
    """images/generations de OpenAI, directo o a través del gateway."""

    def __init__(self, name: str, base_url: str, api_key: Optional[str], model: str,
                 size: str = IMAGE_SIZE, routing_provider: Optional[str] = None):
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.model = model
        self.size = size
        self.routing_provider = routing_provider

    def generate_image(self, prompt: str) -> str:
        headers = {"Authorization": f"Bearer {self.api_key or ''}"}
        if self.routing_provider:
            headers[ROUTING_HEADER] = self.routing_provider

        payload = {"model": self.model, "prompt": prompt, "n": 1, "size": self.size}
        result = _post_json(f"{self.base_url}/images/generations", payload, headers=headers)
        try:
            image = result["data"][0]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Estructura de respuesta inesperada de {self.name}: {result}") from e

        if image.get("url"):
            return image["url"]
        if image.get("b64_json"):
            return f"data:image/png;base64,{image['b64_json']}"
        raise ProviderError(f"{self.name} no devolvió ninguna imagen")


class ImagenImageProvider(ImageProvider):
    """Google Imagen (predict); la imagen llega en base64 y se devuelve como data URI."""

    name = "imagen"

    def __init__(self, api_key: Optional[str], model: str, base_url: str = config.GEMINI_API_URL):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")

    def generate_image(self, prompt: str) -> str:
        payload = {
            "instances": [{"prompt": prompt}],
            "parameters": {"sampleCount": 1, "aspectRatio": IMAGE_ASPECT_RATIO}
        }
        result = _post_json(
            f"{self.base_url}/models/{self.model}:predict",
            payload,
            params={"key": self.api_key or ""}
        )
        try:
            prediction = result["predictions"][0]
            encoded = prediction["bytesBase64Encoded"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderError(f"Estructura de respuesta inesperada de imagen: {result}") from e
        mime_type = prediction.get("mimeType") or "image/png"
        return f"data:{mime_type};base64,{encoded}"


def build_text_provider(name: str) -> TextProvider:
    """Construye el proveedor de texto indicado a partir de la configuración."""
    name = (name or "").lower()
    model = config.TEXT_MODEL or DEFAULT_TEXT_MODELS.get(name)

    if name == "gateway":
        return OpenAICompatibleTextProvider(
            name,
            config.AI_GATEWAY_URL,
            config.AI_GATEWAY_TOKEN or config.OPENAI_API_KEY,
            model,
            routing_provider=config.TEXT_ROUTING_PROVIDER
        )
    if name == "perplexity":
        return OpenAICompatibleTextProvider(name, config.PERPLEXITY_API_URL, config.PERPLEXITY_API_KEY, model)
    if name == "openai":
        return OpenAICompatibleTextProvider(name, config.OPENAI_API_URL, config.OPENAI_API_KEY, model)
    if name == "gemini":
        return GeminiTextProvider(config.GEMINI_API_KEY, model)
    raise ValueError(f"Proveedor de texto no soportado: {name}")


def build_image_provider(name: str) -> Optional[ImageProvider]:
    """
    Construye un proveedor de imagen. Devuelve None si faltan sus credenciales,
    para que quede fuera de la cadena de respaldo.
    """
    name = (name or "").lower()
    model = config.IMAGE_MODEL or DEFAULT_IMAGE_MODELS.get(name)

    if name == "openai":
        if not config.OPENAI_API_KEY:
            return None
        return OpenAIImageProvider(name, config.OPENAI_API_URL, config.OPENAI_API_KEY, model)
    if name == "gateway":
        if not config.AI_GATEWAY_TOKEN:
            return None
        return OpenAIImageProvider(name, config.AI_GATEWAY_URL, config.AI_GATEWAY_TOKEN, model)
    if name == "imagen":
        if not config.GEMINI_API_KEY:
            return None
        return ImagenImageProvider(config.GEMINI_API_KEY, model)
    raise ValueError(f"Proveedor de imagen no soportado: {name}")


# Clientes compartidos por todo el proceso, se crean bajo demanda
_text_provider: Optional[TextProvider] = None
_image_providers: Optional[List[ImageProvider]] = None


def get_text_provider() -> TextProvider:
    global _text_provider
    if _text_provider is None:
        _text_provider = build_text_provider(config.TEXT_PROVIDER)
        logger.info(
            f"Proveedor de texto: {_text_provider.name} "
            f"(gateway token: {'presente' if config.AI_GATEWAY_TOKEN else 'ausente'}, "
            f"OpenAI key: {'presente' if config.OPENAI_API_KEY else 'ausente'})"
        )
    return _text_provider


def get_image_providers() -> List[ImageProvider]:
    global _image_providers
    if _image_providers is None:
        providers = []
        for name in config.IMAGE_PROVIDERS:
            provider = build_image_provider(name)
            if provider is None:
                logger.warning(f"Proveedor de imagen '{name}' sin credenciales, se omite")
                continue
            providers.append(provider)
        _image_providers = providers
        logger.info(f"Cadena de proveedores de imagen: {[p.name for p in providers]}")
    return _image_providers


def reset_providers():
    """Descarta los clientes creados (p. ej. tras cambiar la configuración)."""
    global _text_provider, _image_providers
    _text_provider = None
    _image_providers = None

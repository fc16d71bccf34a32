import pytest
import requests

from spirit_shorts import config
from spirit_shorts.services import providers
from spirit_shorts.services.providers import (
    GeminiTextProvider,
    ImagenImageProvider,
    OpenAICompatibleTextProvider,
    OpenAIImageProvider,
    ProviderError,
    build_image_provider,
    build_text_provider,
    get_image_providers,
    get_text_provider,
)


class FakeResponse:

    def __init__(self, status_code=200, data=None, text=""):
        self.status_code = status_code
        self._data = data
        self.text = text

    def json(self):
        if self._data is None:
            raise ValueError("no json")
        return self._data


@pytest.fixture
def post(monkeypatch):
    """Sustituye requests.post y guarda las peticiones enviadas."""
    state = {"calls": [], "response": FakeResponse(data={})}

    def fake_post(url, headers=None, params=None, json=None, timeout=None):
        state["calls"].append({"url": url, "headers": headers, "params": params, "json": json, "timeout": timeout})
        if isinstance(state["response"], Exception):
            raise state["response"]
        return state["response"]

    monkeypatch.setattr(providers.requests, "post", fake_post)
    return state


def test_gateway_text_request(post):
    post["response"] = FakeResponse(data={"choices": [{"message": {"content": "- a\n- b"}}]})
    provider = OpenAICompatibleTextProvider(
        "gateway", "https://gateway.example.com/v1/", "token", "perplexity/sonar-pro",
        routing_provider="perplexity"
    )

    assert provider.generate_text("Summarize this", "Output ONLY bullets") == "- a\n- b"

    call = post["calls"][0]
    assert call["url"] == "https://gateway.example.com/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer token"
    assert call["headers"]["X-Vercel-AI-Provider"] == "perplexity"
    assert call["json"] == {
        "model": "perplexity/sonar-pro",
        "messages": [
            {"role": "system", "content": "Output ONLY bullets"},
            {"role": "user", "content": "Summarize this"},
        ],
    }
    assert call["timeout"] == config.PROVIDER_TIMEOUT


def test_direct_text_request_has_no_routing_header(post):
    post["response"] = FakeResponse(data={"choices": [{"message": {"content": "ok"}}]})
    provider = OpenAICompatibleTextProvider("perplexity", "https://api.perplexity.ai", "key", "sonar-pro")

    provider.generate_text("p", "s")

    assert "X-Vercel-AI-Provider" not in post["calls"][0]["headers"]


def test_null_content_becomes_empty_string(post):
    post["response"] = FakeResponse(data={"choices": [{"message": {"content": None}}]})
    provider = OpenAICompatibleTextProvider("openai", "https://api.openai.com/v1", "key", "gpt-4o-mini")

    assert provider.generate_text("p", "s") == ""


@pytest.mark.parametrize("response", [
    FakeResponse(status_code=404, text="model not found"),
    FakeResponse(data={"choices": []}),
    FakeResponse(data=None),
    requests.Timeout("read timed out"),
])
def test_text_failures_raise_provider_error(post, response):
    post["response"] = response
    provider = OpenAICompatibleTextProvider("gateway", "https://gateway.example.com/v1", "token", "m")

    with pytest.raises(ProviderError):
        provider.generate_text("p", "s")


def test_gemini_text_request(post):
    post["response"] = FakeResponse(data={
        "candidates": [{"content": {"parts": [{"text": "You are "}, {"text": "the sky."}]}}]
    })
    provider = GeminiTextProvider("g-key", "gemini-1.5-flash", base_url="https://gemini.example.com/v1beta")

    assert provider.generate_text("Rewrite", "Output ONLY essence") == "You are the sky."

    call = post["calls"][0]
    assert call["url"] == "https://gemini.example.com/v1beta/models/gemini-1.5-flash:generateContent"
    assert call["params"] == {"key": "g-key"}
    assert call["json"]["systemInstruction"] == {"parts": [{"text": "Output ONLY essence"}]}


def test_openai_image_returns_url(post):
    post["response"] = FakeResponse(data={"data": [{"url": "https://img.example.com/a.png"}]})
    provider = OpenAIImageProvider("openai", "https://api.openai.com/v1", "key", "dall-e-3")

    assert provider.generate_image("misty lake") == "https://img.example.com/a.png"
    assert post["calls"][0]["json"] == {"model": "dall-e-3", "prompt": "misty lake", "n": 1, "size": "1024x1792"}


def test_openai_image_converts_base64(post):
    post["response"] = FakeResponse(data={"data": [{"b64_json": "QUJD"}]})
    provider = OpenAIImageProvider("gateway", "https://gateway.example.com/v1", "token", "openai/dall-e-3")

    assert provider.generate_image("misty lake") == "data:image/png;base64,QUJD"


def test_openai_image_without_image_fails(post):
    post["response"] = FakeResponse(data={"data": [{}]})
    provider = OpenAIImageProvider("openai", "https://api.openai.com/v1", "key", "dall-e-3")

    with pytest.raises(ProviderError):
        provider.generate_image("misty lake")


def test_imagen_returns_data_uri(post):
    post["response"] = FakeResponse(data={
        "predictions": [{"bytesBase64Encoded": "QUJD", "mimeType": "image/jpeg"}]
    })
    provider = ImagenImageProvider("g-key", "imagen-3.0-generate-002", base_url="https://gemini.example.com/v1beta")

    assert provider.generate_image("misty lake") == "data:image/jpeg;base64,QUJD"
    call = post["calls"][0]
    assert call["url"] == "https://gemini.example.com/v1beta/models/imagen-3.0-generate-002:predict"
    assert call["json"]["parameters"]["aspectRatio"] == "9:16"


def test_gateway_text_provider_falls_back_to_openai_key(monkeypatch):
    monkeypatch.setattr(config, "AI_GATEWAY_TOKEN", None)
    monkeypatch.setattr(config, "OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(config, "TEXT_MODEL", None)

    provider = build_text_provider("gateway")

    assert provider.api_key == "sk-test"
    assert provider.model == "perplexity/sonar-pro"
    assert provider.routing_provider == config.TEXT_ROUTING_PROVIDER


def test_text_model_override(monkeypatch):
    monkeypatch.setattr(config, "TEXT_MODEL", "gemini-2.0-flash")

    assert build_text_provider("gemini").model == "gemini-2.0-flash"


def test_unknown_text_provider():
    with pytest.raises(ValueError):
        build_text_provider("carrier-pigeon")


def test_image_provider_without_key_is_skipped(monkeypatch):
    monkeypatch.setattr(config, "OPENAI_API_KEY", None)
    monkeypatch.setattr(config, "AI_GATEWAY_TOKEN", "token")
    monkeypatch.setattr(config, "GEMINI_API_KEY", None)
    monkeypatch.setattr(config, "IMAGE_PROVIDERS", ["openai", "gateway", "imagen"])

    assert build_image_provider("openai") is None
    assert [p.name for p in get_image_providers()] == ["gateway"]


def test_providers_are_built_once(monkeypatch):
    monkeypatch.setattr(config, "TEXT_PROVIDER", "openai")

    first = get_text_provider()

    assert get_text_provider() is first
    providers.reset_providers()
    assert get_text_provider() is not first

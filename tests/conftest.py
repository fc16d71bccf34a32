import threading

import pytest

from spirit_shorts import config
from spirit_shorts.models import base
from spirit_shorts.services import generation, providers
from spirit_shorts.services.providers import ImageProvider, ProviderError, TextProvider
from spirit_shorts.services.youtube import VideoMetadataError

VIDEO_URL = "https://www.youtube.com/watch?v=abc123XYZ00"

METADATA = {
    "title": "The Stillness Within",
    "thumbnail_url": "https://i.ytimg.com/vi/abc123XYZ00/hqdefault.jpg",
    "author_name": "Quiet Mind",
    "description": "",
}

TRANSCRIPT = "Breathe in. Notice the silence between thoughts. You are the awareness behind it all."

# Respuestas "ruidosas" como las que devuelven los modelos reales
RAW_RESPONSES = {
    "bulleted list": "Here is the summary: - Silence is a guide\n- Breath anchors attention\n- Awareness is home",
    "spiritual essence": '"You are the ocean, not the wave." This reflects the unity of all things.',
    "quote text": 'The quote is: "Notice the silence between thoughts."[1]',
    "image description": "Sure: A golden mist rising over still water at dawn",
}


class FakeTextProvider(TextProvider):
    name = "fake-text"

    def __init__(self, fail_on=None, empty_on=None):
        self.fail_on = fail_on
        self.empty_on = empty_on
        self.calls = []
        self._lock = threading.Lock()

    def generate_text(self, prompt, system_instruction):
        with self._lock:
            self.calls.append((prompt, system_instruction))
        for key, response in RAW_RESPONSES.items():
            if key in system_instruction:
                if key == self.fail_on:
                    raise ProviderError(f"forced failure for {key}")
                if key == self.empty_on:
                    return ""
                return response
        raise AssertionError(f"unexpected system instruction: {system_instruction}")


class FakeImageProvider(ImageProvider):

    def __init__(self, name="fake-image", result="https://images.example.com/generated.png", fail=False):
        self.name = name
        self.result = result
        self.fail = fail
        self.prompts = []

    def generate_image(self, prompt):
        self.prompts.append(prompt)
        if self.fail:
            raise ProviderError(f"{self.name} is down")
        return self.result


class Pipeline:
    """Estado de las dependencias externas falsas de un test."""

    def __init__(self):
        self.metadata = dict(METADATA)
        self.metadata_error = None
        self.transcript = TRANSCRIPT
        self.text_provider = FakeTextProvider()
        self.image_providers = [FakeImageProvider()]


@pytest.fixture(autouse=True)
def isolated_store(monkeypatch):
    monkeypatch.setattr(config, "STORE_URL", None)
    monkeypatch.setattr(config, "STORE_KEY", None)
    base.reset_engine()
    yield
    base.reset_engine()


@pytest.fixture(autouse=True)
def fresh_providers():
    providers.reset_providers()
    yield
    providers.reset_providers()


@pytest.fixture
def pipeline(monkeypatch):
    state = Pipeline()

    async def fake_metadata(url):
        if state.metadata_error:
            raise state.metadata_error
        return dict(state.metadata)

    async def fake_transcript(url, languages=None):
        return state.transcript

    monkeypatch.setattr(generation, "get_video_metadata_async", fake_metadata)
    monkeypatch.setattr(generation, "get_video_transcript_async", fake_transcript)
    monkeypatch.setattr(generation, "get_text_provider", lambda: state.text_provider)
    monkeypatch.setattr(generation, "get_image_providers", lambda: state.image_providers)
    return state


@pytest.fixture
def metadata_failure():
    return VideoMetadataError("Failed to fetch video metadata: 404 Not Found")

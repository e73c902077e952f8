from types import SimpleNamespace

import pytest

from svgrelay import create_app
from svgrelay.config.settings import RelayConfig

ANIMATED_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 800 600">'
    '<style>@keyframes spin { to { transform: rotate(360deg); } } .s { animation: spin 2s infinite; }</style>'
    '<circle class="s" cx="400" cy="300" r="50" fill="#f90"/>'
    '</svg>'
)


class FakeModels:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.reply)


class FakeClientFactory:
    """Stands in for `genai.Client`, recording the keys it was built with."""

    def __init__(self, reply=ANIMATED_SVG, error=None):
        self.models = FakeModels(reply, error)
        self.api_keys = []

    def __call__(self, api_key):
        self.api_keys.append(api_key)
        return SimpleNamespace(models=self.models)


@pytest.fixture
def model_factory():
    return FakeClientFactory()


@pytest.fixture
def relay_config():
    return RelayConfig(gemini_api_key="test-key", model_name="test-model", max_upload_mb=1)


@pytest.fixture
def app(relay_config, model_factory):
    app = create_app(relay_config, model_factory)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def animated_svg():
    return ANIMATED_SVG


@pytest.fixture
def make_factory():
    return FakeClientFactory

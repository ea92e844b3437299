import base64
import json
from types import SimpleNamespace

import pytest

import llm.providers.gemini as gemini_module
from errors import ExtractionError
from llm.providers.gemini import GeminiProvider
from llm.providers.openai import OpenAIProvider

PAYLOAD = {
    "card_info": {"card_name": "Bonus", "last_four": "4821"},
    "statement_info": {},
    "transactions": [{"date": "2024-02-01", "description": "A101", "amount": 99.9}],
}

SUMMARY = [
    {
        "date": "2024-02-01T12:00:00+00:00",
        "merchant": "Spotify",
        "amount": 59.99,
        "category": "Abonelik",
    }
]


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _openai_provider(content):
    completions = FakeCompletions(content)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIProvider(api_key="sk-test", client=client), completions


class TestOpenAIProvider:
    """Tests for OpenAIProvider with a fake client."""

    def test_sends_pdf_and_parses_json(self):
        provider, completions = _openai_provider(json.dumps(PAYLOAD))

        result = provider.extract_statement(b"%PDF-1.4", "ekstre.pdf")

        assert result.card_info.last_four == "4821"
        assert completions.kwargs["model"] == "gpt-4o-mini"
        assert completions.kwargs["response_format"] == {"type": "json_object"}
        file_part = completions.kwargs["messages"][1]["content"][0]
        assert file_part["file"]["filename"] == "ekstre.pdf"
        encoded = base64.b64encode(b"%PDF-1.4").decode("ascii")
        assert file_part["file"]["file_data"].endswith(encoded)

    def test_empty_response(self):
        provider, _ = _openai_provider(None)

        with pytest.raises(ExtractionError, match="empty"):
            provider.extract_statement(b"%PDF", "a.pdf")

    def test_invalid_json(self):
        provider, _ = _openai_provider("not json")

        with pytest.raises(ExtractionError):
            provider.extract_statement(b"%PDF", "a.pdf")


    def test_generate_insights(self):
        response = (
            '{"insights": [{"type": "subscription", "title": "Spotify",'
            ' "description": "Aylık abonelik", "amount": 59.99}]}'
        )
        provider, completions = _openai_provider(response)

        [insight] = provider.generate_insights(SUMMARY)

        assert insight.type.value == "subscription"
        assert insight.title == "Spotify"
        assert completions.kwargs["response_format"] == {"type": "json_object"}
        system, user = completions.kwargs["messages"]
        assert "kişisel finans danışmanısın" in system["content"]
        assert "En fazla 5 içgörü" in system["content"]
        assert user["content"].startswith("Son harcamalar:")
        assert '"merchant": "Spotify"' in user["content"]

    def test_generate_insights_empty_response(self):
        provider, _ = _openai_provider("")

        with pytest.raises(ExtractionError, match="empty"):
            provider.generate_insights(SUMMARY)

class FakeGenerativeModel:
    instances = []

    def __init__(self, model_name, system_instruction, generation_config):
        self.model_name = model_name
        self.system_instruction = system_instruction
        self.generation_config = generation_config
        self.response = None
        FakeGenerativeModel.instances.append(self)

    def generate_content(self, parts):
        self.parts = parts
        return self.response


class FakeResponse:
    def __init__(self, text=None, error=None):
        self._text = text
        self._error = error

    @property
    def text(self):
        if self._error is not None:
            raise self._error
        return self._text


@pytest.fixture
def fake_genai(monkeypatch):
    FakeGenerativeModel.instances = []
    fake = SimpleNamespace(configure=lambda api_key: None, GenerativeModel=FakeGenerativeModel)
    monkeypatch.setattr(gemini_module, "genai", fake)
    return fake


def _with_response(monkeypatch, response):
    original = FakeGenerativeModel.__init__

    def init(self, *args, **kwargs):
        original(self, *args, **kwargs)
        self.response = response

    monkeypatch.setattr(FakeGenerativeModel, "__init__", init)


class TestGeminiProvider:
    """Tests for GeminiProvider with a fake SDK."""

    def test_fenced_array_response(self, fake_genai, monkeypatch):
        _with_response(monkeypatch, FakeResponse(f"```json\n[{json.dumps(PAYLOAD)}]\n```"))

        result = GeminiProvider(api_key="g-test").extract_statement(b"%PDF", "a.pdf")

        assert result.card_info.card_name == "Bonus"
        model = FakeGenerativeModel.instances[0]
        assert model.model_name == "gemini-2.0-flash"
        assert model.generation_config["response_mime_type"] == "application/json"
        assert model.parts[0] == {"mime_type": "application/pdf", "data": b"%PDF"}

    def test_blocked_response(self, fake_genai, monkeypatch):
        _with_response(monkeypatch, FakeResponse(error=ValueError("no parts")))

        with pytest.raises(ExtractionError, match="no text"):
            GeminiProvider(api_key="g-test").extract_statement(b"%PDF", "a.pdf")

    def test_generate_insights(self, fake_genai, monkeypatch):
        _with_response(
            monkeypatch,
            FakeResponse('```json\n{"insights": [{"type": "tip", "title": "A", "description": "B"}]}\n```'),
        )

        [insight] = GeminiProvider(api_key="g-test").generate_insights(SUMMARY)

        assert insight.title == "A"
        model = FakeGenerativeModel.instances[0]
        assert "kişisel finans danışmanısın" in model.system_instruction
        assert "Spotify" in model.parts

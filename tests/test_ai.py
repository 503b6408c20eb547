"""
Unit tests for AI providers and the per-run AI content cache.
"""

import json
import logging
import sys
import types
from datetime import datetime
from unittest.mock import Mock

import pytest

from claimform.ai import (
    DISABILITY_CATEGORY,
    DISABILITY_CONTINUED_CATEGORY,
    MEDICAL_DETAILS_CATEGORY,
    AIContentCache,
    GroqProvider,
    MockProvider,
    OpenAIProvider,
    fallback_text,
    get_ai_provider,
)
from claimform.config import Settings
from claimform.errors import MissingCredentialError
from claimform.field_mapping import DISABILITY_CONTINUED_PROMPT, DISABILITY_PROMPT
from claimform.store import DatasetStore

NOW = datetime(2026, 3, 15, 10, 30, 0)


class _FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        message = types.SimpleNamespace(content=self.content)
        return types.SimpleNamespace(choices=[types.SimpleNamespace(message=message)])


def _fake_client_class(content):
    class _FakeClient:
        instances = []

        def __init__(self, api_key=None, **kwargs):
            self.api_key = api_key
            self.chat = types.SimpleNamespace(completions=_FakeCompletions(content))
            _FakeClient.instances.append(self)

    return _FakeClient


@pytest.fixture
def store(tmp_path):
    return DatasetStore(tmp_path)


@pytest.fixture
def dataset(store):
    return store.get_or_create("ai-run", now=NOW)


class TestAIContentCache:

    def test_generates_once_then_serves_cache(self, store, dataset):
        provider = MockProvider()
        cache = AIContentCache(store, provider)
        first = cache.get_or_generate(DISABILITY_CATEGORY, DISABILITY_PROMPT, dataset)
        second = cache.get_or_generate(DISABILITY_CATEGORY, DISABILITY_PROMPT, dataset)
        assert first and first == second
        assert provider.call_count == 1

    def test_generated_text_is_persisted(self, store, dataset):
        cache = AIContentCache(store, MockProvider())
        text = cache.get_or_generate(DISABILITY_CATEGORY, DISABILITY_PROMPT, dataset)
        assert store.load("ai-run").ai_content[DISABILITY_CATEGORY] == text

    def test_cache_survives_new_process(self, store, dataset):
        AIContentCache(store, MockProvider()).get_or_generate(DISABILITY_CATEGORY, DISABILITY_PROMPT, dataset)
        provider = MockProvider()
        reloaded = store.get_or_create("ai-run")
        AIContentCache(store, provider).get_or_generate(DISABILITY_CATEGORY, DISABILITY_PROMPT, reloaded)
        assert provider.call_count == 0

    def test_failure_returns_empty_and_caches_nothing(self, store, dataset, caplog):
        provider = Mock()
        provider.generate.side_effect = RuntimeError("Connection error")
        cache = AIContentCache(store, provider)
        with caplog.at_level(logging.WARNING):
            assert cache.get_or_generate(DISABILITY_CATEGORY, DISABILITY_PROMPT, dataset) == ""
        assert DISABILITY_CATEGORY not in store.load("ai-run").ai_content
        assert any("AI generation failed" in r.message for r in caplog.records)

    def test_blank_response_is_not_cached(self, store, dataset):
        provider = Mock()
        provider.generate.return_value = "   "
        cache = AIContentCache(store, provider)
        assert cache.get_or_generate(DISABILITY_CATEGORY, DISABILITY_PROMPT, dataset) == ""
        assert DISABILITY_CATEGORY not in dataset.ai_content

    def test_structured_pair_fills_both_categories(self, store, dataset):
        provider = MockProvider()
        cache = AIContentCache(store, provider, structured=True)
        first = cache.get_or_generate(DISABILITY_CATEGORY, DISABILITY_PROMPT, dataset)
        second = cache.get_or_generate(DISABILITY_CONTINUED_CATEGORY, DISABILITY_CONTINUED_PROMPT, dataset)
        assert provider.call_count == 1
        assert first in MockProvider.RESPONSES[DISABILITY_CATEGORY]
        assert second in MockProvider.RESPONSES[DISABILITY_CONTINUED_CATEGORY]

    def test_medical_details_cached(self, store, dataset):
        provider = MockProvider()
        cache = AIContentCache(store, provider)
        details = cache.get_medical_details(dataset)
        assert details == MockProvider.MEDICAL_DETAILS
        assert cache.get_medical_details(dataset) == details
        assert provider.call_count == 1
        assert store.load("ai-run").ai_content[MEDICAL_DETAILS_CATEGORY] == details

    def test_medical_details_failure(self, store, dataset):
        provider = Mock()
        provider.generate_medical_details.side_effect = ValueError("bad json")
        assert AIContentCache(store, provider).get_medical_details(dataset) == {}


class TestFallback:

    def test_fallback_lines(self, dataset):
        assert fallback_text(DISABILITY_CATEGORY, dataset) == dataset.disability.description1
        assert fallback_text(DISABILITY_CONTINUED_CATEGORY, dataset) == dataset.disability.description2
        assert fallback_text("something_else", dataset) == ""


class TestProviderFactory:

    def test_mock(self):
        assert isinstance(get_ai_provider("mock", Settings()), MockProvider)

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_ai_provider("anthropic", Settings())

    def test_missing_groq_key(self):
        with pytest.raises(MissingCredentialError):
            get_ai_provider("groq", Settings(groq_api_key=None))

    def test_missing_openai_key(self):
        with pytest.raises(MissingCredentialError):
            get_ai_provider("openai", Settings(openai_api_key=None))

    def test_key_check_is_per_backend(self):
        settings = Settings(groq_api_key="gsk-test", openai_api_key=None)
        assert settings.has_ai_credentials("groq")
        with pytest.raises(MissingCredentialError, match="OPENAI_API_KEY"):
            get_ai_provider("openai", settings)

    def test_defaults_to_configured_provider(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "groq", types.SimpleNamespace(Groq=_fake_client_class("x")))
        provider = get_ai_provider(settings=Settings(ai_provider="groq", groq_api_key="fake-key"))
        assert isinstance(provider, GroqProvider)
        assert provider.model == "llama-3.3-70b-versatile"
        assert provider.client.api_key == "fake-key"


class TestChatProviders:

    def test_groq_generate(self, monkeypatch, dataset):
        client_class = _fake_client_class("  Torn rotator cuff from a fall at home.  ")
        monkeypatch.setitem(sys.modules, "groq", types.SimpleNamespace(Groq=client_class))
        provider = GroqProvider("fake-key")
        assert provider.generate(DISABILITY_PROMPT, dataset) == "Torn rotator cuff from a fall at home."

        call = provider.client.chat.completions.calls[0]
        assert call["model"] == "llama-3.3-70b-versatile"
        assert call["messages"][1] == {"role": "user", "content": DISABILITY_PROMPT}
        assert dataset.claimant.full_name in call["messages"][0]["content"]
        assert "response_format" not in call

    def test_openai_disability_pair_uses_json_mode(self, monkeypatch, dataset):
        content = json.dumps({"description": "Broken ankle.", "continued": "Slipped on stairs."})
        monkeypatch.setitem(sys.modules, "openai", types.SimpleNamespace(OpenAI=_fake_client_class(content)))
        provider = OpenAIProvider("fake-key")
        pair = provider.generate_disability_pair(dataset)
        assert pair == {
            DISABILITY_CATEGORY: "Broken ankle.",
            DISABILITY_CONTINUED_CATEGORY: "Slipped on stairs.",
        }
        call = provider.client.chat.completions.calls[0]
        assert call["model"] == "gpt-4o-mini"
        assert call["response_format"] == {"type": "json_object"}

    def test_medical_details_keeps_known_keys(self, monkeypatch, dataset):
        content = json.dumps({
            "diagnosis_analysis": "Ankle fracture",
            "symptoms": "Swelling",
            "objective_findings": "X-ray positive",
            "icd_code": "S82.891A",
            "extra": "ignored",
        })
        monkeypatch.setitem(sys.modules, "groq", types.SimpleNamespace(Groq=_fake_client_class(content)))
        details = GroqProvider("fake-key").generate_medical_details(dataset)
        assert details == {
            "diagnosis_analysis": "Ankle fracture",
            "symptoms": "Swelling",
            "objective_findings": "X-ray positive",
            "icd_code": "S82.891A",
        }


class TestMockProvider:

    def test_counts_calls_and_picks_category_from_prompt(self, dataset):
        provider = MockProvider()
        first = provider.generate(DISABILITY_PROMPT, dataset)
        continued = provider.generate(DISABILITY_CONTINUED_PROMPT, dataset)
        assert provider.call_count == 2
        assert first in MockProvider.RESPONSES[DISABILITY_CATEGORY]
        assert continued in MockProvider.RESPONSES[DISABILITY_CONTINUED_CATEGORY]

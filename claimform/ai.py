"""
AI-generated prose for free-text fields.

Backends use the Groq or OpenAI chat completion APIs. Generated text is
cached per run in the dataset's ai_content, so a run id is only ever sent to
the backend once per category.
"""

import json
import logging
from typing import Any, Dict, Optional, Protocol

from claimform.errors import MissingCredentialError
from claimform.schema import Dataset

logger = logging.getLogger(__name__)

DISABILITY_CATEGORY = "disability_description"
DISABILITY_CONTINUED_CATEGORY = "disability_description_continued"
DISABILITY_CATEGORIES = (DISABILITY_CATEGORY, DISABILITY_CONTINUED_CATEGORY)
MEDICAL_DETAILS_CATEGORY = "medical_details"
MEDICAL_DETAIL_KEYS = ("diagnosis_analysis", "symptoms", "objective_findings", "icd_code")

DEFAULT_GROQ_MODEL = "llama-3.3-70b-versatile"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

API_KEY_VARS = {"groq": "GROQ_API_KEY", "openai": "OPENAI_API_KEY"}


def build_system_prompt(dataset: Dataset) -> str:
    claimant = dataset.claimant
    return f"""You are generating fake data for testing a disability benefits form.
Generate realistic but fictional medical information. Keep responses concise (1-2 sentences max).
Context about the claimant:
- Name: {claimant.full_name or 'Unknown'}
- Occupation: {claimant.occupation or 'Unknown'}
- Disability Start Date: {dataset.dates.disability_start.isoformat()}"""


def _disability_pair_prompt() -> str:
    return """Describe one non-work-related disability for this claimant as JSON with two keys:

- "description": what the condition or injury is (1-2 sentences)
- "continued": how and when it occurred and the current limitations (1-2 sentences)

Return only valid JSON."""


def _medical_details_prompt(dataset: Dataset) -> str:
    return f"""A claimant reports this disability:
{dataset.disability.description1} {dataset.disability.description2}

Return JSON with the health care provider's findings:
- "diagnosis_analysis": diagnosis (short phrase)
- "symptoms": reported symptoms (short phrase)
- "objective_findings": exam findings (short phrase)
- "icd_code": a plausible ICD-10 code

Return only valid JSON."""


class AIProvider(Protocol):
    """Protocol for AI text backends."""

    def generate(self, prompt: str, dataset: Dataset) -> str:
        """Free text for one field prompt."""
        ...

    def generate_disability_pair(self, dataset: Dataset) -> Dict[str, str]:
        """Both disability description lines from a single call."""
        ...

    def generate_medical_details(self, dataset: Dataset) -> Dict[str, str]:
        """Part B diagnosis, symptoms, findings and ICD code."""
        ...


class _ChatCompletionProvider:
    """Shared chat.completions plumbing; Groq and OpenAI clients expose the same API."""

    provider_name = "llm"

    def __init__(self, client: Any, model: str):
        self.client = client
        self.model = model

    def _complete(self, system: str, prompt: str, json_mode: bool = False, max_tokens: int = 150) -> str:
        kwargs: Dict[str, Any] = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=0.7,
            max_tokens=max_tokens,
            **kwargs,
        )
        return (response.choices[0].message.content or "").strip()

    def generate(self, prompt: str, dataset: Dataset) -> str:
        return self._complete(build_system_prompt(dataset), prompt)

    def generate_disability_pair(self, dataset: Dataset) -> Dict[str, str]:
        result = json.loads(
            self._complete(build_system_prompt(dataset), _disability_pair_prompt(), json_mode=True, max_tokens=300)
        )
        return {
            DISABILITY_CATEGORY: str(result.get("description") or "").strip(),
            DISABILITY_CONTINUED_CATEGORY: str(result.get("continued") or "").strip(),
        }

    def generate_medical_details(self, dataset: Dataset) -> Dict[str, str]:
        result = json.loads(
            self._complete(
                "You are a data generation assistant. Return only valid JSON.",
                _medical_details_prompt(dataset),
                json_mode=True,
                max_tokens=300,
            )
        )
        return {key: str(result[key]).strip() for key in MEDICAL_DETAIL_KEYS if result.get(key)}


class GroqProvider(_ChatCompletionProvider):
    """Groq (fast, free tier)."""

    provider_name = "groq"

    def __init__(self, api_key: str, model: str = DEFAULT_GROQ_MODEL):
        from groq import Groq
        super().__init__(Groq(api_key=api_key), model)


class OpenAIProvider(_ChatCompletionProvider):
    provider_name = "openai"

    def __init__(self, api_key: str, model: str = DEFAULT_OPENAI_MODEL):
        from openai import OpenAI
        super().__init__(OpenAI(api_key=api_key), model)


class MockProvider:
    """
    Deterministic canned responses; no network. Counts calls so tests can
    assert the cache kept the backend from being hit twice.
    """

    provider_name = "mock"

    RESPONSES = {
        DISABILITY_CATEGORY: [
            "Chronic lower back pain with muscle spasms limiting mobility and ability to sit for extended periods.",
            "Post-operative recovery following arthroscopic knee surgery for torn meniscus.",
            "Severe carpal tunnel syndrome requiring surgical intervention and rehabilitation.",
            "Acute anxiety disorder with panic attacks affecting ability to perform work duties.",
            "Herniated disc at L4-L5 causing sciatica and difficulty with standing or walking.",
        ],
        DISABILITY_CONTINUED_CATEGORY: [
            "Condition developed gradually over several months, worsened in the past two weeks.",
            "Surgery performed on the disability start date, expected recovery period of 6-8 weeks.",
            "Symptoms first appeared while performing repetitive tasks, now requiring rest.",
            "Episodes occur unpredictably, making it unsafe to operate machinery or drive.",
            "Physical therapy recommended 3x/week, restricted from lifting over 10 pounds.",
        ],
    }

    MEDICAL_DETAILS = {
        "diagnosis_analysis": "Acute Back Pain (Simulated)",
        "symptoms": "Pain in lower back, limited mobility",
        "objective_findings": "Muscle spasms observed",
        "icd_code": "M54.5",
    }

    def __init__(self):
        self.call_count = 0

    def generate(self, prompt: str, dataset: Dataset) -> str:
        self.call_count += 1
        category = DISABILITY_CONTINUED_CATEGORY if "Continue" in prompt else DISABILITY_CATEGORY
        responses = self.RESPONSES[category]
        return responses[self.call_count % len(responses)]

    def generate_disability_pair(self, dataset: Dataset) -> Dict[str, str]:
        self.call_count += 1
        index = self.call_count % len(self.RESPONSES[DISABILITY_CATEGORY])
        return {category: self.RESPONSES[category][index] for category in DISABILITY_CATEGORIES}

    def generate_medical_details(self, dataset: Dataset) -> Dict[str, str]:
        self.call_count += 1
        return dict(self.MEDICAL_DETAILS)


def get_ai_provider(name: Optional[str] = None, settings=None) -> AIProvider:
    """
    Factory function to get an AI provider by name.

    Args:
        name: "groq", "openai" or "mock" (defaults to settings.ai_provider)
        settings: Settings with API keys and model names (defaults to Settings.from_env())

    Raises:
        MissingCredentialError: the selected backend has no API key
        ValueError: unknown provider name
    """
    if settings is None:
        from claimform.config import Settings
        settings = Settings.from_env()
    name = (name or settings.ai_provider).lower()

    if name in API_KEY_VARS and not settings.has_ai_credentials(name):
        raise MissingCredentialError(f"{API_KEY_VARS[name]} environment variable is required for AI mode")

    if name == "groq":
        return GroqProvider(settings.groq_api_key, settings.groq_model)
    elif name == "openai":
        return OpenAIProvider(settings.openai_api_key, settings.openai_model)
    elif name == "mock":
        return MockProvider()
    else:
        raise ValueError(f"Unknown AI provider: {name}")


def fallback_text(category: str, dataset: Dataset) -> str:
    """Sample description line used when AI is off or returned nothing."""
    if category == DISABILITY_CATEGORY:
        return dataset.disability.description1
    if category == DISABILITY_CONTINUED_CATEGORY:
        return dataset.disability.description2
    return ""


class AIContentCache:
    """
    Per-run cache in front of an AIProvider.

    Args:
        store: DatasetStore that persists each new entry
        provider: AI backend
        structured: generate both disability lines with one JSON-mode call
    """

    def __init__(self, store, provider: AIProvider, structured: bool = False):
        self.store = store
        self.provider = provider
        self.structured = structured

    def _remember(self, dataset: Dataset, category: str, content: Any) -> None:
        dataset.ai_content[category] = content
        self.store.append(dataset.run_id, category, content)

    def get_or_generate(self, category: str, prompt: str, dataset: Dataset) -> str:
        cached = dataset.ai_content.get(category)
        if cached:
            logger.info(f"Using cached AI content for {category}")
            return cached

        try:
            if self.structured and category in DISABILITY_CATEGORIES:
                pair = self.provider.generate_disability_pair(dataset)
                for pair_category, text in pair.items():
                    if text and not dataset.ai_content.get(pair_category):
                        self._remember(dataset, pair_category, text)
                text = pair.get(category, "")
            else:
                text = (self.provider.generate(prompt, dataset) or "").strip()
                if text:
                    self._remember(dataset, category, text)
        except Exception as e:
            logger.warning(f"AI generation failed for {category}: {e}")
            return ""

        logger.info(f"Generated AI content for {category}")
        return text

    def get_medical_details(self, dataset: Dataset) -> Dict[str, str]:
        """Part B medical details; empty dict when generation fails."""
        cached = dataset.ai_content.get(MEDICAL_DETAILS_CATEGORY)
        if cached:
            logger.info("Using cached AI medical details")
            return dict(cached)

        try:
            details = self.provider.generate_medical_details(dataset)
        except Exception as e:
            logger.warning(f"Failed to generate Part B AI details: {e}")
            return {}

        details = {key: details[key] for key in MEDICAL_DETAIL_KEYS if details.get(key)}
        if details:
            self._remember(dataset, MEDICAL_DETAILS_CATEGORY, details)
        return details

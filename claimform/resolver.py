"""
Field resolver: turns one mapping descriptor into the logical value for a field.

AI mappings are not resolved here; the resolver returns an AIRequest and the
orchestrator hands it to the AI content cache.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from claimform import rules
from claimform.builder import checkbox_state
from claimform.errors import UnknownRuleError
from claimform.field_mapping import (
    CHECKBOX_STATE_MAP,
    AIMapping,
    CheckboxMapping,
    ComputedMapping,
    FieldMapping,
    MultiChoiceMapping,
    RandomMapping,
    StaticMapping,
)
from claimform.rng import DeterministicRandom, derive_seed
from claimform.schema import Dataset

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AIRequest:
    """Deferred AI-generated value for one field."""
    field_name: str
    category: str
    prompt: str


class FieldResolver:
    """
    Resolves mapping descriptors against a dataset.

    Args:
        probabilities: Optional per-field overrides for checkbox fields that have
            no entry in CHECKBOX_STATE_MAP (keyed by field name)
    """

    def __init__(self, probabilities: Optional[Mapping[str, float]] = None):
        self.probabilities = dict(probabilities or {})
        # One Faker-backed stream, re-seeded before every draw
        self._rng = DeterministicRandom()

    def resolve(self, field_name: str, mapping: FieldMapping, dataset: Dataset) -> Any:
        if isinstance(mapping, RandomMapping):
            return self._resolve_random(mapping, dataset)
        if isinstance(mapping, ComputedMapping):
            return rules.compute(mapping.rule, dataset, *mapping.args)
        if isinstance(mapping, StaticMapping):
            return mapping.value
        if isinstance(mapping, CheckboxMapping):
            return self._resolve_checkbox(field_name, mapping, dataset)
        if isinstance(mapping, MultiChoiceMapping):
            return rules.compute(mapping.rule, dataset)
        if isinstance(mapping, AIMapping):
            return AIRequest(field_name=field_name, category=mapping.category, prompt=mapping.prompt)
        raise TypeError(f"Unsupported mapping type: {type(mapping).__name__}")

    def _resolve_random(self, mapping: RandomMapping, dataset: Dataset) -> Any:
        self._rng.rebase(dataset.seed)
        try:
            return self._rng.fresh(mapping.method, *mapping.args)
        except UnknownRuleError:
            logger.warning(f"Unknown random method: {mapping.method}")
            raise

    def _resolve_checkbox(self, field_name: str, mapping: CheckboxMapping, dataset: Dataset) -> bool:
        source = CHECKBOX_STATE_MAP.get(field_name)
        if isinstance(source, bool):
            return source
        if isinstance(source, str):
            return checkbox_state(dataset, source)
        if callable(source):
            return bool(source(dataset.checkbox_states))

        # Unmapped checkbox: its own stable draw
        probability = self.probabilities.get(field_name, mapping.probability)
        self._rng.seed(derive_seed(dataset.seed, field_name))
        return self._rng.boolean(probability)

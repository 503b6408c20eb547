"""
Deterministic random facade.

Wraps a seeded Faker instance so every draw is a pure function of the
stream state. The seed for a run comes from hash_string(run_id), so the
same run id always reproduces the same values.
"""

import logging
import string
from typing import Any, Sequence

from faker import Faker

from claimform.errors import UnknownRuleError

logger = logging.getLogger(__name__)

# Named seed offsets for fields that draw from their own stream.
# Changing draw order elsewhere never moves these values.
SEED_OFFSETS = {
    "gender": 17,
    "received_or_claimed": 99999,
}

_PRIMITIVES = frozenset(
    {"integer", "float", "boolean", "pick_one", "numeric_string", "alpha", "alphanumeric"}
)


def hash_string(text: str) -> int:
    """
    Order-sensitive 32-bit string hash (h = h * 31 + code), absolute value.
    Not cryptographic; collisions are acceptable.
    """
    h = 0
    for ch in text:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def derive_seed(base_seed: int, tag: str) -> int:
    """Seed for an independently drawn field: named offset, else hash of the tag."""
    if tag in SEED_OFFSETS:
        return base_seed + SEED_OFFSETS[tag]
    return base_seed + hash_string(tag)


class DeterministicRandom:
    """Seedable draw source. Domain fakes come from Faker (en_US)."""

    def __init__(self, seed: int = 0, locale: str = "en_US"):
        self.base_seed = seed
        self._faker = Faker(locale)
        self.seed(seed)

    def seed(self, n: int) -> None:
        self._faker.seed_instance(n)

    def rebase(self, seed: int) -> None:
        """Point the stream at a new run: fresh() draws re-seed to this value."""
        self.base_seed = seed
        self.seed(seed)

    @property
    def faker(self) -> Faker:
        return self._faker

    def integer(self, min_value: int, max_value: int) -> int:
        return self._faker.random.randint(min_value, max_value)

    def float(self, min_value: float, max_value: float, precision: int = 2) -> float:
        return round(self._faker.random.uniform(min_value, max_value), precision)

    def boolean(self, probability: float = 0.5) -> bool:
        return self._faker.random.random() < probability

    def pick_one(self, options: Sequence[Any]) -> Any:
        if not options:
            raise ValueError("pick_one() needs at least one option")
        return options[self._faker.random.randrange(len(options))]

    def numeric_string(self, length: int) -> str:
        return "".join(str(self._faker.random.randint(0, 9)) for _ in range(length))

    def alpha(self, length: int = 1, upper: bool = True) -> str:
        letters = string.ascii_uppercase if upper else string.ascii_lowercase
        return "".join(self.pick_one(letters) for _ in range(length))

    def alphanumeric(self, length: int) -> str:
        chars = string.ascii_lowercase + string.digits
        return "".join(self.pick_one(chars) for _ in range(length))

    def call(self, method: str, *args: Any) -> Any:
        """
        Draw using a named method: a facade primitive or any Faker provider
        method (e.g. "last_name", "street_address", "numerify").

        Raises:
            UnknownRuleError: if no such method exists
        """
        if method in _PRIMITIVES:
            return getattr(self, method)(*args)
        if method.startswith("_") or method.startswith("seed"):
            raise UnknownRuleError(f"Unknown random method: {method}")
        try:
            fn = getattr(self._faker, method)
        except AttributeError:
            raise UnknownRuleError(f"Unknown random method: {method}") from None
        if not callable(fn):
            raise UnknownRuleError(f"Unknown random method: {method}")
        return fn(*args)

    def fresh(self, method: str, *args: Any) -> Any:
        """Re-seed to the base seed, then draw once. Independent of call order."""
        self.seed(self.base_seed)
        return self.call(method, *args)

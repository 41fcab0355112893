"""Entropy source for cache-busting values (placeholder image seeds)."""

import random
import time
from dataclasses import dataclass
from typing import Protocol


class EntropySource(Protocol):
    def seed(self) -> int: ...

    def nonce(self) -> int: ...


class SystemEntropy:
    """Random seed plus wall-clock milliseconds."""

    def seed(self) -> int:
        return random.randrange(1_000_000_000)

    def nonce(self) -> int:
        return int(time.time() * 1000)


@dataclass(frozen=True)
class FixedEntropy:
    """Deterministic values for tests and reproducible runs."""

    seed_value: int = 42
    nonce_value: int = 0

    def seed(self) -> int:
        return self.seed_value

    def nonce(self) -> int:
        return self.nonce_value

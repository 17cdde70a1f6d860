"""
Helper functions for generating random sample values.
"""

import random
from typing import Sequence, TypeVar

T = TypeVar("T")


def random_id() -> int:
    return random.randint(1, 100)


def random_delta(range_: float) -> float:
    """Uniform value in (-range_, range_)."""
    return (random.random() * 2 - 1) * range_


def random_hex() -> str:
    return format(random.randrange(16), "x")


def random_element(elements: Sequence[T]) -> T:
    if len(elements) == 0:
        raise ValueError("Cannot pick random element from empty sequence")
    return random.choice(elements)

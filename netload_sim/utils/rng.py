"""Seedable random sources for the simulation.

The simulator never touches the global ``random`` or ``numpy.random`` state;
it receives a ``numpy.random.Generator`` so runs can be reproduced and tests
can assert exact outcomes.
"""

from typing import Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create a random generator.

    Args:
        seed: Seed for reproducibility, or None for fresh OS entropy.

    Returns:
        A numpy random Generator.
    """
    return np.random.default_rng(seed)


def choice(rng: np.random.Generator, items: Sequence[T]) -> T:
    """Select an item uniformly at random from a non-empty sequence.

    ``Generator.choice`` would convert strings to numpy scalars, so the index
    is drawn instead and the original object returned.

    Args:
        rng: The random generator to draw from.
        items: The items to choose from.

    Returns:
        A randomly selected item from ``items``.

    Raises:
        ValueError: If the input sequence is empty.
    """
    if not items:
        raise ValueError("Cannot choose from an empty list")
    return items[int(rng.integers(len(items)))]

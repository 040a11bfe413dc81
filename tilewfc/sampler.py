from typing import Iterator, Sequence, Union

import numpy as np

RandomSource = Union[np.random.RandomState, np.random.Generator]


def make_rng(seed=None) -> RandomSource:
    """RandomState for an int seed (or None); generators are passed through"""
    if isinstance(seed, (np.random.RandomState, np.random.Generator)):
        return seed
    return np.random.RandomState(seed)


def weighted_order(candidates: Sequence[int], weights: Sequence[float], rng: RandomSource) -> Iterator[int]:
    """
    Draw candidates without replacement, weighted by frequency.

    Each draw picks one of the not yet drawn candidates with probability
    weight / (sum of weights not yet drawn). Draws happen lazily, so an
    order that is abandoned early only consumes the draws it used.

    Args:
        candidates: Values to order
        weights: Weight of each candidate, aligned with candidates
        rng: numpy random source

    Yields:
        Every candidate exactly once
    """
    remaining = list(candidates)
    remaining_weights = np.maximum(np.array(weights, dtype=np.float64), 0)
    if len(remaining) != len(remaining_weights):
        raise ValueError("candidates and weights must have the same length")

    while remaining:
        total = np.sum(remaining_weights)
        if total > 0:
            probs = remaining_weights / total
        else:
            # No usable weights left, fall back to uniform
            probs = np.full(len(remaining), 1.0 / len(remaining))
        chosen_idx = int(rng.choice(len(remaining), p=probs))

        yield remaining.pop(chosen_idx)
        remaining_weights = np.delete(remaining_weights, chosen_idx)

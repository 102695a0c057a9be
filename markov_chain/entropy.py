"""Pluggable random sources used when sampling transitions.

Sampling only ever needs one primitive: a uniform integer in ``[0, stop)``.
Any object exposing ``randrange(stop)`` satisfies :class:`RandomSource`, which
includes :class:`random.Random`.  :class:`NumpyRandomSource` adapts a NumPy
``Generator`` so callers already managing NumPy seeds can share them with the
chain.

Passing a seeded source into a chain, or into a single ``generate`` call,
makes generation reproducible without touching the global ``random`` state.
"""

from __future__ import annotations

import random
from typing import Optional, Protocol, runtime_checkable

import numpy as np

__all__ = ["RandomSource", "NumpyRandomSource", "make_rng"]


@runtime_checkable
class RandomSource(Protocol):
    """Minimal entropy interface required by :meth:`TransitionTable.sample`."""

    def randrange(self, stop: int) -> int:
        """Return a uniformly distributed integer in ``[0, stop)``."""


class NumpyRandomSource:
    """Adapter exposing ``numpy.random.Generator`` as a :class:`RandomSource`.

    Parameters
    ----------
    seed:
        Seed forwarded to :func:`numpy.random.default_rng`. Ignored when
        ``generator`` is supplied.
    generator:
        Existing NumPy generator to draw from.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        *,
        generator: Optional[np.random.Generator] = None,
    ) -> None:
        self.generator = generator if generator is not None else np.random.default_rng(seed)

    def randrange(self, stop: int) -> int:
        if stop <= 0:
            raise ValueError("randrange() requires a positive stop value")
        return int(self.generator.integers(0, stop))


def make_rng(seed: Optional[int] = None, *, numpy: bool = False) -> RandomSource:
    """Return a fresh random source, optionally seeded.

    Parameters
    ----------
    seed:
        Seed for reproducible output. ``None`` draws entropy from the OS.
    numpy:
        When ``True`` a :class:`NumpyRandomSource` is created instead of a
        :class:`random.Random` instance.
    """

    if numpy:
        return NumpyRandomSource(seed)
    return random.Random(seed)

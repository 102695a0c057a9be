"""Lazy iterators over generated sequences.

:class:`InfiniteChainIterator` calls :meth:`Chain.generate` once per
``next()`` and never stops.  :class:`SizedChainIterator` wraps it with a
countdown and stops after a fixed number of items.  Neither mutates the
chain's table, so any number of iterators may share one chain.

An empty chain produces an empty result on every pull; the infinite iterator
keeps yielding those empty results rather than stopping early so its
"never exhausted" contract holds for every chain.

Both iterators accept an optional ``render`` callable applied to each
generated list, which is how the text variants produce strings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Hashable, List, Optional

from .entropy import RandomSource
from .utils import validate_count

if TYPE_CHECKING:  # pragma: no cover - imported for annotations only
    from .chain import Chain

__all__ = ["InfiniteChainIterator", "SizedChainIterator"]

Render = Callable[[List[Hashable]], Any]


class InfiniteChainIterator:
    """Yield one generated sequence per pull, forever."""

    def __init__(
        self,
        chain: "Chain",
        rng: Optional[RandomSource] = None,
        render: Optional[Render] = None,
    ) -> None:
        self.chain = chain
        self.rng = rng
        self.render = render

    def __iter__(self) -> "InfiniteChainIterator":
        return self

    def __next__(self) -> Any:
        result = self.chain.generate(rng=self.rng)
        if self.render is not None:
            return self.render(result)
        return result


class SizedChainIterator:
    """Yield exactly ``count`` generated sequences, then stop."""

    def __init__(
        self,
        chain: "Chain",
        count: int,
        rng: Optional[RandomSource] = None,
        render: Optional[Render] = None,
    ) -> None:
        self.remaining = validate_count(count)
        self._inner = InfiniteChainIterator(chain, rng, render)

    @property
    def chain(self) -> "Chain":
        return self._inner.chain

    def __iter__(self) -> "SizedChainIterator":
        return self

    def __next__(self) -> Any:
        if self.remaining <= 0:
            raise StopIteration
        self.remaining -= 1
        return next(self._inner)

    def __len__(self) -> int:
        return self.remaining

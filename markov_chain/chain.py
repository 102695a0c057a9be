"""Generic order-N Markov chain.

A :class:`Chain` learns which token tends to follow each window of ``order``
tokens and replays those frequencies to produce new sequences.

Underlying Algorithm
--------------------
Feeding wraps the input in sentinels and records every window of
``order + 1`` tokens::

    path = [START] * order + tokens + [END]
    for i in range(len(path) - order):
        table.record(Context(path[i:i + order]), path[i + order])

Generation walks the table from ``START * order``::

    context = Context.new(order)
    while iterations < max_iterations:
        token = table.sample(context, rng)
        if token is END or token is MISSING:
            break
        output.append(token)
        context = context.push(token)

Sampling a context with no successors ends generation the same way ``END``
does, and ``max_iterations`` caps the walk so a table whose transitions loop
forever still terminates.  Both cases return the tokens generated so far.

Example
-------
>>> chain = Chain(order=1, rng=random.Random(0))
>>> chain.feed(["a", "b", "c"]).generate()
['a', 'b', 'c']

Thread safety
-------------
Feeding is not synchronised.  Guard a chain shared between threads with an
external lock whenever any thread may feed it; generation alone only reads
the table.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Hashable, Iterable, List, Optional, Union

from .context import Context
from .entropy import RandomSource
from .iterators import InfiniteChainIterator, SizedChainIterator
from .table import TransitionTable, Triple
from .text import iter_file_sentences, join_words, split_sentences
from .tokens import END, MISSING, START
from .utils import InvalidOrder, validate_max_iterations, validate_order

__all__ = ["Chain", "InvalidOrder", "DEFAULT_MAX_ITERATIONS"]

logger = logging.getLogger(__name__)

# Upper bound on tokens produced by a single ``generate`` call. Large enough
# that no realistic corpus reaches it, small enough to stop a cyclic table.
DEFAULT_MAX_ITERATIONS = 100_000


class Chain:
    """A Markov chain over any hashable token type.

    Parameters
    ----------
    order:
        Number of preceding tokens used as context. Fixed for the lifetime of
        the chain.
    rng:
        Random source used when a generation call does not supply its own.
        Defaults to a private :class:`random.Random` instance.
    max_iterations:
        Default cap on tokens produced by one ``generate`` call. ``None``
        selects :data:`DEFAULT_MAX_ITERATIONS`.

    Raises
    ------
    InvalidOrder
        If ``order`` is not a positive integer.
    """

    def __init__(
        self,
        order: int = 1,
        *,
        rng: Optional[RandomSource] = None,
        max_iterations: Optional[int] = DEFAULT_MAX_ITERATIONS,
    ) -> None:
        self._order = validate_order(order)
        self._table = TransitionTable(self._order)
        self.rng: RandomSource = rng if rng is not None else random.Random()
        limit = validate_max_iterations(max_iterations)
        self.max_iterations = DEFAULT_MAX_ITERATIONS if limit is None else limit

    @classmethod
    def from_triples(cls, order: int, triples: Iterable[Triple], **kwargs) -> "Chain":
        """Return a chain whose table holds ``triples``."""

        chain = cls(order, **kwargs)
        chain._table.extend(triples)
        return chain

    @property
    def order(self) -> int:
        return self._order

    @property
    def table(self) -> TransitionTable:
        return self._table

    def is_empty(self) -> bool:
        """Return ``True`` when nothing has been fed into the chain."""

        return self._table.is_empty()

    def clear(self) -> "Chain":
        self._table.clear()
        return self

    # ------------------------------------------------------------------
    # Feeding
    # ------------------------------------------------------------------
    def feed(self, tokens: Iterable[Hashable]) -> "Chain":
        """Record the transitions of one sequence of ``tokens``.

        An empty sequence is ignored. Returns ``self`` so calls can be
        chained.
        """

        tokens = list(tokens)
        if not tokens:
            return self
        path = [START] * self._order + tokens + [END]
        context = Context(path[: self._order])
        for token in path[self._order:]:
            self._table.record(context, token)
            context = context.push(token)
        logger.debug("Fed %d tokens into order-%d chain", len(tokens), self._order)
        return self

    def feed_text(self, text: str) -> "Chain":
        """Split ``text`` into sentences of words and feed each sentence."""

        for sentence in split_sentences(text):
            self.feed(sentence)
        return self

    def feed_file(self, path: Union[str, Path]) -> "Chain":
        """Feed a UTF-8 text file holding one sentence per line."""

        count = 0
        for sentence in iter_file_sentences(path):
            self.feed(sentence)
            count += 1
        logger.debug("Fed %d sentences from %s", count, path)
        return self

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def _walk(
        self,
        context: Context,
        output: List[Hashable],
        rng: Optional[RandomSource],
        max_iterations: Optional[int],
    ) -> List[Hashable]:
        rng = rng if rng is not None else self.rng
        limit = validate_max_iterations(max_iterations)
        if limit is None:
            limit = self.max_iterations
        for _ in range(limit):
            token = self._table.sample(context, rng)
            if token is END or token is MISSING:
                return output
            output.append(token)
            context = context.push(token)
        logger.debug("Generation stopped after reaching max_iterations=%d", limit)
        return output

    def generate(
        self,
        rng: Optional[RandomSource] = None,
        max_iterations: Optional[int] = None,
    ) -> List[Hashable]:
        """Generate one sequence of tokens, excluding the sentinels.

        Parameters
        ----------
        rng:
            Random source for this call only. Defaults to the chain's source.
        max_iterations:
            Cap for this call only. Defaults to the chain's cap.

        Returns
        -------
        list
            Generated tokens. Empty when the chain is empty.
        """

        return self._walk(Context.new(self._order), [], rng, max_iterations)

    def generate_from(
        self,
        token: Hashable,
        rng: Optional[RandomSource] = None,
        max_iterations: Optional[int] = None,
    ) -> List[Hashable]:
        """Generate a sequence seeded with ``order`` copies of ``token``.

        The result starts with ``token``. When ``token`` never appeared in a
        stored context an empty list is returned; check :meth:`is_empty`
        first to tell an empty chain apart from an unknown token.
        """

        if not self._table.contains_token(token):
            return []
        return self._walk(Context.initial(self._order, token), [token], rng, max_iterations)

    def generate_text(
        self,
        rng: Optional[RandomSource] = None,
        max_iterations: Optional[int] = None,
    ) -> str:
        """Generate one sequence and join it with spaces."""

        return join_words(self.generate(rng, max_iterations))

    def generate_text_from(
        self,
        token: Hashable,
        rng: Optional[RandomSource] = None,
        max_iterations: Optional[int] = None,
    ) -> str:
        """Like :meth:`generate_from` but returns a space separated string."""

        return join_words(self.generate_from(token, rng, max_iterations))

    # ------------------------------------------------------------------
    # Iterators
    # ------------------------------------------------------------------
    def iter(self, rng: Optional[RandomSource] = None) -> InfiniteChainIterator:
        """Return an infinite iterator of generated sequences."""

        return InfiniteChainIterator(self, rng)

    def iter_for(self, count: int, rng: Optional[RandomSource] = None) -> SizedChainIterator:
        """Return an iterator producing exactly ``count`` sequences."""

        return SizedChainIterator(self, count, rng)

    def iter_text(self, rng: Optional[RandomSource] = None) -> InfiniteChainIterator:
        return InfiniteChainIterator(self, rng, render=join_words)

    def iter_text_for(self, count: int, rng: Optional[RandomSource] = None) -> SizedChainIterator:
        return SizedChainIterator(self, count, rng, render=join_words)

    def __repr__(self) -> str:
        return f"Chain(order={self._order}, contexts={len(self._table)})"

"""Transition frequency table.

The table maps each :class:`~markov_chain.context.Context` to the tokens that
followed it and how many times each was observed.  A running total per context
is kept alongside the successor counts so weighted sampling needs a single
pass over the successors and never re-sums them.

Counts are plain integers.  Probabilities are never stored; they exist only
implicitly while :meth:`TransitionTable.sample` walks the cumulative counts,
so repeated runs with the same seed make identical choices.

Concurrency
-----------
:meth:`TransitionTable.record` performs an unsynchronised read-modify-write.
Callers feeding one table from several threads must hold their own lock.
Reading (``sample``, ``successors_of``, ``triples``) is safe as long as no
writer runs at the same time; the table does not enforce this.
"""

from __future__ import annotations

import logging
from typing import Dict, Hashable, Iterable, Iterator, List, Optional, Tuple

from .context import Context
from .entropy import RandomSource
from .tokens import MISSING
from .utils import validate_order

__all__ = ["TransitionTable", "Triple"]

logger = logging.getLogger(__name__)

# ``(context, next_token, count)`` as produced by :meth:`TransitionTable.triples`.
Triple = Tuple[Context, Hashable, int]


class TransitionTable:
    """Mapping ``Context -> {next_token: count}`` with per-context totals."""

    def __init__(self, order: int) -> None:
        self._order = validate_order(order)
        self._successors: Dict[Context, Dict[Hashable, int]] = {}
        self._totals: Dict[Context, int] = {}
        # Number of stored contexts each token appears in; answers
        # ``contains_token`` without scanning every key.
        self._key_tokens: Dict[Hashable, int] = {}

    @property
    def order(self) -> int:
        return self._order

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def record(self, context: Context, token: Hashable) -> None:
        """Increment the count of ``token`` following ``context`` by one."""

        self.add(context, token, 1)

    def add(self, context: Context, token: Hashable, count: int) -> None:
        """Add ``count`` observations of ``context -> token``.

        Raises
        ------
        ValueError
            If ``count`` is not a positive integer or ``context`` does not
            hold exactly ``order`` tokens.
        """

        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValueError(f"count must be a positive integer, got {count!r}")
        if not isinstance(context, Context):
            context = Context(context)
        if len(context) != self._order:
            raise ValueError(
                f"context has {len(context)} tokens but the table order is {self._order}"
            )

        successors = self._successors.get(context)
        if successors is None:
            successors = self._successors[context] = {}
            self._totals[context] = 0
            for component in set(context):
                self._key_tokens[component] = self._key_tokens.get(component, 0) + 1
        successors[token] = successors.get(token, 0) + count
        self._totals[context] += count

    def extend(self, triples: Iterable[Triple]) -> None:
        """Bulk insert ``(context, token, count)`` triples."""

        for context, token, count in triples:
            self.add(context, token, count)

    def clear(self) -> None:
        """Forget every recorded transition."""

        self._successors.clear()
        self._totals.clear()
        self._key_tokens.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def is_empty(self) -> bool:
        return not self._successors

    def total(self, context: Context) -> int:
        """Return the number of observations recorded after ``context``."""

        return self._totals.get(context, 0)

    def successors_of(self, context: Context) -> Dict[Hashable, int]:
        """Return a copy of the ``{token: count}`` mapping for ``context``.

        Unknown contexts produce an empty dictionary.
        """

        return dict(self._successors.get(context, {}))

    def contexts(self) -> List[Context]:
        return list(self._successors)

    def contains_token(self, token: Hashable) -> bool:
        """Return ``True`` when ``token`` is part of any stored context."""

        return token in self._key_tokens

    def triples(self) -> Iterator[Triple]:
        """Yield every ``(context, token, count)`` triple in insertion order."""

        for context, successors in self._successors.items():
            for token, count in successors.items():
                yield context, token, count

    def sample(self, context: Context, rng: RandomSource) -> Hashable:
        """Draw a successor of ``context`` weighted by its observed count.

        A uniform integer ``r`` in ``[0, total)`` is drawn and the successors
        are walked in insertion order until the cumulative count exceeds
        ``r``.  Returns :data:`~markov_chain.tokens.MISSING` when ``context``
        has no recorded successors.
        """

        successors = self._successors.get(context)
        if not successors:
            return MISSING
        cap = rng.randrange(self._totals[context])
        cumulative = 0
        for token, count in successors.items():
            cumulative += count
            if cumulative > cap:
                return token
        # Only reachable if ``rng`` returned a value outside ``[0, total)``.
        raise RuntimeError(
            f"random source returned {cap!r}, outside [0, {self._totals[context]})"
        )

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._successors)

    def __contains__(self, context: object) -> bool:
        return context in self._successors

    def __iter__(self) -> Iterator[Context]:
        return iter(self._successors)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransitionTable):
            return NotImplemented
        return self._order == other._order and self._successors == other._successors

    def __repr__(self) -> str:
        return f"TransitionTable(order={self._order}, contexts={len(self)})"

    def check_consistency(self) -> Optional[Context]:
        """Return the first context whose counts disagree with its total.

        ``None`` means every stored total equals the sum of its successor
        counts.
        """

        for context, successors in self._successors.items():
            if sum(successors.values()) != self._totals[context]:
                logger.warning("Inconsistent totals for %r", context)
                return context
        return None

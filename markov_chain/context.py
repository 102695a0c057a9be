"""Fixed-size token windows used as transition table keys.

A :class:`Context` holds the last ``order`` tokens seen while walking a
sequence.  Feeding and generation both slide the window one token at a time
with :meth:`Context.push`, which returns a new context and leaves the original
untouched.  Contexts are immutable, so they hash structurally and can be used
directly as dictionary keys.

Example
-------
>>> ctx = Context.new(2)
>>> ctx
Context(<START>, <START>)
>>> ctx.push("a").push("b")
Context('a', 'b')
"""

from __future__ import annotations

from typing import Hashable, Iterable, Iterator, Tuple

from .tokens import START
from .utils import validate_order

__all__ = ["Context"]


class Context:
    """Immutable ordered window of exactly ``order`` tokens."""

    __slots__ = ("_tokens", "_hash")

    def __init__(self, tokens: Iterable[Hashable]) -> None:
        self._tokens: Tuple[Hashable, ...] = tuple(tokens)
        if not self._tokens:
            raise ValueError("a context must hold at least one token")
        self._hash = hash(self._tokens)

    @classmethod
    def new(cls, order: int) -> "Context":
        """Return the initial context: ``order`` repetitions of ``START``."""

        return cls.initial(order, START)

    @classmethod
    def initial(cls, order: int, token: Hashable = START) -> "Context":
        """Return a context made of ``order`` copies of ``token``."""

        validate_order(order)
        return cls((token,) * order)

    @property
    def order(self) -> int:
        return len(self._tokens)

    @property
    def tokens(self) -> Tuple[Hashable, ...]:
        return self._tokens

    def push(self, token: Hashable) -> "Context":
        """Return the next context: drop the oldest token and append ``token``."""

        return Context(self._tokens[1:] + (token,))

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._tokens)

    def __getitem__(self, index):
        return self._tokens[index]

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Context):
            return self._tokens == other._tokens
        return NotImplemented

    def __hash__(self) -> int:
        return self._hash

    def __repr__(self) -> str:
        return "Context(" + ", ".join(repr(t) for t in self._tokens) + ")"

    def __reduce__(self):
        return (Context, (self._tokens,))

"""Sentinel tokens shared by every chain.

``START`` and ``END`` mark the boundaries of each fed sequence.  They are
unique singleton objects rather than reserved strings so a chain over
characters, words, integers or any other hashable value never loses a legal
token to boundary marking.  ``MISSING`` is returned by
:meth:`TransitionTable.sample` when a context has no recorded successors; it
is never stored in a table.

Each sentinel survives ``copy``, ``deepcopy`` and ``pickle`` as the same
object so identity checks (``token is END``) stay valid after a chain is
copied or restored.
"""

from __future__ import annotations

from typing import Dict

__all__ = ["Sentinel", "START", "END", "MISSING", "is_sentinel"]


class Sentinel:
    """Named singleton marker that never equals a caller supplied token."""

    __slots__ = ("name",)

    _registry: Dict[str, "Sentinel"] = {}

    def __new__(cls, name: str) -> "Sentinel":
        existing = cls._registry.get(name)
        if existing is not None:
            return existing
        obj = super().__new__(cls)
        obj.name = name
        cls._registry[name] = obj
        return obj

    def __repr__(self) -> str:
        return f"<{self.name}>"

    def __reduce__(self):
        return (Sentinel, (self.name,))

    def __copy__(self) -> "Sentinel":
        return self

    def __deepcopy__(self, memo) -> "Sentinel":
        return self


START = Sentinel("START")
END = Sentinel("END")
MISSING = Sentinel("MISSING")


def is_sentinel(token: object) -> bool:
    """Return ``True`` when ``token`` is one of the boundary markers."""

    return token is START or token is END

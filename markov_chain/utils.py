"""Validation helpers shared across the chain, iterators and CLI.

Keeping these checks in one module means the library and the command line
interface reject the same inputs with the same messages.

Usage Example
-------------
>>> from markov_chain.utils import validate_order
>>> validate_order(2)
2
>>> validate_order(0)
Traceback (most recent call last):
    ...
markov_chain.utils.InvalidOrder: order must be a positive integer, got 0
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "InvalidOrder",
    "validate_order",
    "validate_count",
    "validate_max_iterations",
]


class InvalidOrder(ValueError):
    """Raised when a chain or context is created with ``order < 1``."""


def _is_int(value: object) -> bool:
    # ``bool`` is an ``int`` subclass but ``True`` is never a sensible order.
    return isinstance(value, int) and not isinstance(value, bool)


def validate_order(order: object) -> int:
    """Return ``order`` unchanged or raise :class:`InvalidOrder`."""

    if not _is_int(order) or order < 1:
        raise InvalidOrder(f"order must be a positive integer, got {order!r}")
    return order


def validate_count(count: object) -> int:
    """Return ``count`` when it is a non-negative integer.

    Raises
    ------
    ValueError
        If ``count`` is negative or not an integer.
    """

    if not _is_int(count) or count < 0:
        raise ValueError(f"count must be a non-negative integer, got {count!r}")
    return count


def validate_max_iterations(limit: Optional[object]) -> Optional[int]:
    """Return ``limit`` when it is ``None`` or a positive integer."""

    if limit is None:
        return None
    if not _is_int(limit) or limit < 1:
        raise ValueError(f"max_iterations must be a positive integer, got {limit!r}")
    return limit

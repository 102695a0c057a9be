"""Markov Chain library.

This package provides a generic order-N Markov chain.  A typical workflow is
to create a :class:`Chain`, feed it sequences with :meth:`Chain.feed` (or text
with :meth:`Chain.feed_text`), then call :meth:`Chain.generate` or iterate
over :meth:`Chain.iter_for` to produce new sequences.  The ``markov-chain``
command line tool wraps the same calls for plain text corpora.

Underlying Algorithm
--------------------
Every fed sequence is padded with ``order`` copies of a ``START`` sentinel
and one ``END`` sentinel.  Each window of ``order`` tokens records a count
for the token that followed it.  Generation begins at the all-``START``
context and repeatedly draws a successor with probability proportional to
its count, sliding the window forward until ``END`` is drawn, the context has
no successors, or the iteration cap is reached.

Features include:
- Tokens of any hashable type, with boundary sentinels that never collide
  with caller values.
- Reproducible sampling through pluggable random sources
  (:class:`random.Random` or NumPy generators).
- Infinite and fixed-size generation iterators.
- JSON and YAML snapshots via :mod:`markov_chain.persistence`.
- A command line interface with persistent JSON settings.
"""

__version__ = "0.1.0"

import json
import logging
import os
from pathlib import Path

from .chain import DEFAULT_MAX_ITERATIONS, Chain
from .context import Context
from .entropy import NumpyRandomSource, RandomSource, make_rng
from .iterators import InfiniteChainIterator, SizedChainIterator
from .table import TransitionTable
from .tokens import END, MISSING, START, Sentinel
from .utils import InvalidOrder

__all__ = [
    "Chain",
    "Context",
    "TransitionTable",
    "InfiniteChainIterator",
    "SizedChainIterator",
    "RandomSource",
    "NumpyRandomSource",
    "make_rng",
    "InvalidOrder",
    "Sentinel",
    "START",
    "END",
    "MISSING",
    "DEFAULT_MAX_ITERATIONS",
    "DEFAULT_SETTINGS_FILE",
    "load_settings",
    "save_settings",
    "run_cli",
    "main",
]

# Location of the JSON file holding CLI defaults. The environment variable
# lets tests and multi-user setups point at an alternative file.
env_path = os.environ.get("MARKOV_CHAIN_SETTINGS_FILE")
if env_path:
    DEFAULT_SETTINGS_FILE = Path(env_path).expanduser()
else:
    DEFAULT_SETTINGS_FILE = Path.home() / ".markov_chain_settings.json"


def load_settings(path: Path = DEFAULT_SETTINGS_FILE) -> dict:
    """Load saved settings from ``path`` if it exists.

    @param path (Path): Location of the settings file.
    @returns dict: Loaded settings or an empty dictionary when unavailable.
    """
    path = Path(path)
    if path.is_file():
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logging.error(f"Could not load settings: {exc}")
            return {}
        if isinstance(data, dict):
            return data
        logging.error("Could not load settings: top level value must be an object")
    return {}


def save_settings(settings: dict, path: Path = DEFAULT_SETTINGS_FILE) -> None:
    """Save ``settings`` to ``path`` as JSON.

    @param settings (dict): Options to be persisted.
    @param path (Path): Destination file path.
    @returns None: Function does not return a value.
    """
    # Failing to persist defaults must never abort generation.
    try:
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(settings, fh, indent=2)
    except (OSError, TypeError) as exc:
        logging.error(f"Could not save settings: {exc}")


def run_cli(argv=None) -> None:
    """Proxy to :func:`markov_chain.cli.run_cli`."""
    from .cli import run_cli as _run_cli

    _run_cli(argv)


def main(argv=None) -> None:
    """Console script entry point."""
    from .cli import main as _main

    _main(argv)

"""Command line helpers for Markov Chain.

Modification summary
--------------------
* Defaults for ``--order``, ``--count``, ``--max-iterations``, ``--seed`` and
  ``--numpy-rng`` are read from the JSON settings file so repeated runs over
  the same corpus need fewer flags. ``--save-settings`` writes the effective
  values back.
* Corpus files that cannot be read and malformed snapshots are logged and
  cause a non-zero exit instead of a traceback.
* ``-`` reads the corpus from standard input so the tool composes with other
  shell commands.

This module implements the console entry point for the project. ``run_cli``
parses the arguments, builds or loads a chain, feeds every corpus file (one
sentence per line) and prints the requested number of generated sentences,
one per line.  :func:`main` configures logging before delegating to
``run_cli``.

Example
-------
Running ``python -m markov_chain corpus.txt --order 2 --count 3 --seed 7
--save model.json`` learns an order-2 chain from ``corpus.txt``, prints three
sentences and stores the chain so later runs can use ``--load model.json``
without re-reading the corpus.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .chain import DEFAULT_MAX_ITERATIONS, Chain
from .entropy import make_rng
from .text import split_words
from .utils import validate_count, validate_max_iterations, validate_order

__all__ = ["build_parser", "run_cli", "main"]

# Settings keys that map directly onto parser destinations.
SETTINGS_KEYS = ("order", "count", "max_iterations", "seed", "numpy_rng")


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser used by :func:`run_cli`."""

    parser = argparse.ArgumentParser(
        prog="markov-chain",
        description="Learn a Markov chain from text and print generated sentences.",
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="Corpus files with one sentence per line ('-' reads stdin).")
    parser.add_argument("--order", type=int, default=1, help="Number of preceding words used as context (default: 1).")
    parser.add_argument("--count", type=int, default=1, help="Number of sentences to generate (default: 1).")
    parser.add_argument("--start", type=str, help="Begin every sentence with this word.")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible output.")
    parser.add_argument("--numpy-rng", action="store_true", help="Draw random numbers from a NumPy generator.")
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=DEFAULT_MAX_ITERATIONS,
        help=f"Maximum words per generated sentence (default: {DEFAULT_MAX_ITERATIONS}).",
    )
    parser.add_argument("--load", type=str, metavar="PATH", help="Load a saved chain (.json, .yaml or .yml) before feeding.")
    parser.add_argument("--save", type=str, metavar="PATH", help="Save the chain (.json, .yaml or .yml) after feeding.")
    parser.add_argument("--settings-file", type=str, help="Path to the JSON settings file holding default options.")
    parser.add_argument("--save-settings", action="store_true", help="Store the effective defaults in the settings file.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser


def _settings_path(args: argparse.Namespace) -> Path:
    if args.settings_file:
        return Path(args.settings_file).expanduser()
    from . import DEFAULT_SETTINGS_FILE

    return DEFAULT_SETTINGS_FILE


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    """Parse ``argv`` twice so settings file values act as parser defaults."""

    from . import load_settings

    parser = build_parser()
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--settings-file", type=str)
    pre_args, _ = pre_parser.parse_known_args(argv)

    settings = load_settings(_settings_path(pre_args))
    defaults = {key: settings[key] for key in SETTINGS_KEYS if key in settings}
    if defaults:
        parser.set_defaults(**defaults)
    return parser.parse_args(argv)


def _fail(message: str, *args) -> None:
    logging.error(message, *args)
    sys.exit(1)


def _feed_stdin(chain: Chain) -> None:
    for line in sys.stdin:
        words = split_words(line)
        if words:
            chain.feed(words)


def run_cli(argv: Optional[Sequence[str]] = None) -> None:
    """Parse CLI arguments, build the chain and print generated sentences.

    Validation problems, unreadable files and malformed snapshots are logged
    with :func:`logging.error` and terminate with exit status ``1``.
    """

    args = _parse_args(argv)

    try:
        validate_order(args.order)
    except ValueError:
        _fail("Order must be a positive integer.")
    try:
        validate_count(args.count)
    except ValueError:
        _fail("Count must be a non-negative integer.")
    try:
        validate_max_iterations(args.max_iterations)
    except ValueError:
        _fail("Max iterations must be a positive integer.")
    if not args.files and not args.load:
        _fail("No input given: supply corpus files or --load.")

    rng = make_rng(args.seed, numpy=args.numpy_rng)

    if args.load:
        from .persistence import load

        try:
            chain = load(args.load, rng=rng, max_iterations=args.max_iterations)
        except (OSError, ValueError, RuntimeError) as exc:
            _fail("Could not load chain: %s", exc)
        if chain.order != args.order:
            logging.info("Using order %d from %s", chain.order, args.load)
    else:
        chain = Chain(args.order, rng=rng, max_iterations=args.max_iterations)

    for name in args.files:
        try:
            if name == "-":
                _feed_stdin(chain)
            else:
                chain.feed_file(name)
        except (OSError, UnicodeDecodeError) as exc:
            _fail("Could not read corpus file %s: %s", name, exc)

    if chain.is_empty():
        _fail("The corpus contained no text to learn from.")

    if args.save:
        from .persistence import save

        try:
            save(chain, args.save)
        except (OSError, ValueError, RuntimeError) as exc:
            _fail("Could not save chain: %s", exc)

    if args.save_settings:
        from . import save_settings

        save_settings(
            {
                "order": chain.order,
                "count": args.count,
                "max_iterations": args.max_iterations,
                "seed": args.seed,
                "numpy_rng": args.numpy_rng,
            },
            _settings_path(args),
        )

    lines: List[str]
    if args.start is not None:
        lines = [chain.generate_text_from(args.start) for _ in range(args.count)]
        if args.count and not any(lines):
            logging.warning("Start word %r does not occur in the corpus.", args.start)
    else:
        lines = list(chain.iter_text_for(args.count))
    for line in lines:
        print(line)
    logging.debug("Generated %d sentences.", len(lines))


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Entry point used by ``python -m markov_chain`` and the console script."""

    raw = sys.argv[1:] if argv is None else list(argv)
    verbose = "--verbose" in raw or "-v" in raw
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    run_cli(argv)

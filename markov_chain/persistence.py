"""Snapshot and restore chains as JSON or YAML documents.

The chain itself never touches the filesystem.  This module enumerates the
table's ``(context, token, count)`` triples into a plain mapping and rebuilds
a chain from such a mapping through bulk re-insertion, so the on-disk format
can evolve without changing the core.

Document layout (version 1)::

    {
      "format": "markov-chain",
      "version": 1,
      "order": 2,
      "transitions": [
        {"context": [{"$sentinel": "START"}, "the"], "token": "cat", "count": 3},
        ...
      ]
    }

Sentinel tokens are written as ``{"$sentinel": NAME}``. Tuples are written as
lists and read back as tuples so restored tokens stay hashable. Tokens must
otherwise be values the chosen format can represent (strings, numbers,
booleans, ``None`` or tuples of those).

Modification summary
--------------------
* YAML support follows the JSON/YAML-by-extension convention used for other
  user supplied data files: PyYAML is imported only when a ``.yaml``/``.yml``
  path is used and a ``RuntimeError`` explains when it is missing.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Hashable, List, Union

from .chain import Chain
from .context import Context
from .tokens import END, START, is_sentinel

__all__ = [
    "FORMAT_NAME",
    "FORMAT_VERSION",
    "chain_to_dict",
    "chain_from_dict",
    "save",
    "load",
]

logger = logging.getLogger(__name__)

FORMAT_NAME = "markov-chain"
FORMAT_VERSION = 1

_SENTINEL_KEY = "$sentinel"
_SENTINELS = {"START": START, "END": END}


def _encode_token(token: Hashable) -> Any:
    if is_sentinel(token):
        return {_SENTINEL_KEY: token.name}
    if isinstance(token, tuple):
        return [_encode_token(item) for item in token]
    return token


def _decode_token(value: Any) -> Hashable:
    if isinstance(value, dict):
        name = value.get(_SENTINEL_KEY)
        if len(value) != 1 or name not in _SENTINELS:
            raise ValueError(f"unrecognised token encoding: {value!r}")
        return _SENTINELS[name]
    if isinstance(value, list):
        return tuple(_decode_token(item) for item in value)
    return value


def chain_to_dict(chain: Chain) -> Dict[str, Any]:
    """Return a serialisable mapping describing ``chain``'s table."""

    transitions: List[Dict[str, Any]] = [
        {
            "context": [_encode_token(t) for t in context],
            "token": _encode_token(token),
            "count": count,
        }
        for context, token, count in chain.table.triples()
    ]
    return {
        "format": FORMAT_NAME,
        "version": FORMAT_VERSION,
        "order": chain.order,
        "transitions": transitions,
    }


def chain_from_dict(data: Any, **kwargs) -> Chain:
    """Rebuild a :class:`Chain` from a mapping made by :func:`chain_to_dict`.

    Extra keyword arguments (``rng``, ``max_iterations``) are forwarded to the
    :class:`Chain` constructor.

    Raises
    ------
    ValueError
        If ``data`` is not a version 1 chain document or any transition is
        malformed.
    """

    if not isinstance(data, dict):
        raise ValueError("chain document must be a mapping")
    if data.get("format") != FORMAT_NAME:
        raise ValueError(f"not a {FORMAT_NAME} document")
    version = data.get("version")
    if version != FORMAT_VERSION:
        raise ValueError(f"unsupported chain document version: {version!r}")

    order = data.get("order")
    transitions = data.get("transitions")
    if not isinstance(transitions, list):
        raise ValueError("'transitions' must be a list")

    chain = Chain(order, **kwargs)
    for index, entry in enumerate(transitions):
        try:
            context = Context(_decode_token(t) for t in entry["context"])
            token = _decode_token(entry["token"])
            count = entry["count"]
            chain.table.add(context, token, count)
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"invalid transition at index {index}: {exc}") from exc
    return chain


def _format_for(path: Union[str, Path]) -> str:
    ext = os.path.splitext(str(path))[1].lower()
    if ext == ".json":
        return "json"
    if ext in {".yaml", ".yml"}:
        return "yaml"
    raise ValueError(f"unsupported chain file format: {ext or '(none)'}")


def _import_yaml():
    try:
        import yaml  # type: ignore
    except Exception as exc:  # pragma: no cover - optional dependency
        raise RuntimeError("PyYAML is required for YAML chain files") from exc
    return yaml


def save(chain: Chain, path: Union[str, Path]) -> None:
    """Write ``chain`` to ``path`` as JSON or YAML depending on the extension.

    Missing parent directories are created once the extension is accepted.

    Raises
    ------
    ValueError
        If the extension is unsupported or a token cannot be represented in
        the chosen format. The file at ``path`` is left untouched.
    """

    fmt = _format_for(path)
    data = chain_to_dict(chain)
    # Serialise fully before touching the file so a bad token never
    # truncates an existing snapshot.
    if fmt == "json":
        try:
            text = json.dumps(data, indent=2)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"cannot serialise chain: {exc}") from exc
    else:
        yaml = _import_yaml()
        try:
            text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
        except yaml.YAMLError as exc:
            raise ValueError(f"cannot serialise chain: {exc}") from exc
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(text)
    logger.info("Saved chain with %d contexts to %s", len(chain.table), path)


def load(path: Union[str, Path], **kwargs) -> Chain:
    """Load a chain saved by :func:`save`.

    Raises
    ------
    ValueError
        If the file cannot be parsed or is not a valid chain document.
    RuntimeError
        If a YAML file is supplied but PyYAML is missing.
    """

    fmt = _format_for(path)
    with open(path, "r", encoding="utf-8") as fh:
        if fmt == "json":
            try:
                data = json.load(fh)
            except json.JSONDecodeError as exc:
                raise ValueError(f"invalid JSON chain file: {exc}") from exc
        else:
            yaml = _import_yaml()
            try:
                data = yaml.safe_load(fh)
            except yaml.YAMLError as exc:
                raise ValueError(f"invalid YAML chain file: {exc}") from exc
    chain = chain_from_dict(data, **kwargs)
    logger.info("Loaded chain with %d contexts from %s", len(chain.table), path)
    return chain

"""Thin text adapter for word-level chains.

Text is split into sentences first and each sentence into words, so every
sentence becomes its own fed sequence with its own ``START``/``END``
boundaries.  Sentence breaks are line breaks or whitespace that follows a
``.``, ``!`` or ``?``.  Punctuation stays attached to its word, which lets a
chain learn where sentences tend to end.

Example
-------
>>> split_sentences("The cat sat. The dog ran!\\nBirds sing")
[['The', 'cat', 'sat.'], ['The', 'dog', 'ran!'], ['Birds', 'sing']]
>>> join_words(["The", "cat", "sat."])
'The cat sat.'
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Iterator, List, Union

__all__ = ["split_words", "split_sentences", "iter_file_sentences", "join_words"]

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+|[\r\n]+")


def split_words(text: str) -> List[str]:
    """Return the whitespace separated words of ``text``."""

    return text.split()


def split_sentences(text: str) -> List[List[str]]:
    """Return ``text`` as a list of word lists, one per sentence.

    Empty sentences (blank lines, trailing whitespace) are dropped.
    """

    sentences = []
    for chunk in _SENTENCE_BREAK.split(text):
        words = split_words(chunk)
        if words:
            sentences.append(words)
    return sentences


def iter_file_sentences(path: Union[str, Path]) -> Iterator[List[str]]:
    """Yield the words of each non-blank line in the UTF-8 file at ``path``.

    Each line is treated as one sentence, matching the corpus layout accepted
    by the command line tool.
    """

    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            words = split_words(line)
            if words:
                yield words


def join_words(words: Iterable[object]) -> str:
    """Render generated ``words`` as a single space separated string."""

    return " ".join(str(word) for word in words)

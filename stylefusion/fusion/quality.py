"""Raw-text quality detectors.

The confidence calculator consumes per-source quality signals but never
reads text itself. These detectors compute those signals for callers that
still hold the text a source was assessed from.

Examples
--------
>>> vocabulary_diversity("Clear prose beats clever prose.")
0.8
"""

from __future__ import annotations

import re

from .domain import SourceQuality

_SENTENCE_BOUNDARY = re.compile(r"[.!?]+")
_PUNCTUATION = re.compile(r"[^\w\s]")
_MIN_TEXT_LENGTH = 100
_MIN_SENTENCE_LENGTH = 10
_MIN_SENTENCES = 5
_MIN_WORD_LENGTH = 3


def duplicate_sentence_ratio(text: str | None) -> float:
    """Return the fraction of sentences that repeat an earlier sentence.

    Sentences are split on ``.``, ``!`` and ``?``, compared case-insensitively,
    and ignored when 10 characters or shorter. Texts under 100 characters or
    with fewer than five qualifying sentences are too small to judge and
    yield 0.0.
    """
    if not text or len(text) < _MIN_TEXT_LENGTH:
        return 0.0
    sentences = [
        sentence
        for part in _SENTENCE_BOUNDARY.split(text)
        if len(sentence := part.strip().lower()) > _MIN_SENTENCE_LENGTH
    ]
    if len(sentences) < _MIN_SENTENCES:
        return 0.0
    return 1.0 - len(set(sentences)) / len(sentences)


def vocabulary_diversity(text: str | None) -> float:
    """Return unique words over total words, ignoring words of three letters or fewer."""
    if not text:
        return 0.0
    words = [
        word
        for word in _PUNCTUATION.sub("", text.lower()).split()
        if len(word) > _MIN_WORD_LENGTH
    ]
    if not words:
        return 0.0
    return len(set(words)) / len(words)


def assess_text_quality(text: str | None) -> SourceQuality:
    """Measure both quality signals for one source's text."""
    return SourceQuality(
        duplicate_sentence_ratio=duplicate_sentence_ratio(text),
        vocabulary_diversity=vocabulary_diversity(text),
    )

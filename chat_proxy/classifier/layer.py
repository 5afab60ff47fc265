"""
Heuristic classification layer that maps a chat message to a complexity tier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from chat_proxy.tiers import (
    COMPLEX_MIN_HISTORY,
    COMPLEX_MIN_WORDS,
    SIMPLE_MAX_WORDS,
    ComplexityTier,
    triggers_for,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationResult:
    """
    Tier plus the evidence that selected it.
    """

    tier: ComplexityTier
    word_count: int
    matched_pattern: Optional[str] = None
    reason: str = "default"


class ComplexityClassifier:
    """
    Stateless, deterministic classifier. The first matching rule wins:
    greeting or short message -> simple, complex keyword or long message or
    long conversation -> complex, everything else -> medium.
    """

    def __init__(
        self,
        simple_patterns: Optional[Sequence[str]] = None,
        complex_patterns: Optional[Sequence[str]] = None,
        *,
        simple_max_words: int = SIMPLE_MAX_WORDS,
        complex_min_words: int = COMPLEX_MIN_WORDS,
        complex_min_history: int = COMPLEX_MIN_HISTORY,
    ) -> None:
        self._simple_patterns = tuple(triggers_for(ComplexityTier.SIMPLE) if simple_patterns is None else simple_patterns)
        self._complex_patterns = tuple(triggers_for(ComplexityTier.COMPLEX) if complex_patterns is None else complex_patterns)
        self._simple_max_words = simple_max_words
        self._complex_min_words = complex_min_words
        self._complex_min_history = complex_min_history

    def classify(self, message: str, history_length: int = 0) -> ComplexityTier:
        return self.explain(message, history_length).tier

    def explain(self, message: str, history_length: int = 0) -> ClassificationResult:
        """
        Return the tier for ``message`` together with the rule that fired.
        """

        text = message.lower().strip()
        word_count = count_words(message)

        greeting = _match_greeting(text, self._simple_patterns)
        if greeting is not None:
            return ClassificationResult(ComplexityTier.SIMPLE, word_count, greeting, "greeting")
        if word_count <= self._simple_max_words:
            return ClassificationResult(ComplexityTier.SIMPLE, word_count, reason="short_message")

        keyword = next((pattern for pattern in self._complex_patterns if pattern in text), None)
        if keyword is not None:
            return ClassificationResult(ComplexityTier.COMPLEX, word_count, keyword, "complex_keyword")
        if word_count >= self._complex_min_words:
            return ClassificationResult(ComplexityTier.COMPLEX, word_count, reason="long_message")
        if history_length >= self._complex_min_history:
            return ClassificationResult(ComplexityTier.COMPLEX, word_count, reason="long_history")

        return ClassificationResult(ComplexityTier.MEDIUM, word_count)


def count_words(message: str) -> int:
    # Split on single spaces; runs of spaces produce empty tokens that still count.
    return len(message.split(" "))


def _match_greeting(text: str, patterns: Sequence[str]) -> Optional[str]:
    for pattern in patterns:
        if text == pattern or text.startswith(pattern + " "):
            return pattern
    return None


_DEFAULT_CLASSIFIER = ComplexityClassifier()


def classify(message: str, history_length: int = 0) -> ComplexityTier:
    """
    Classify with the default pattern sets and thresholds.
    """

    return _DEFAULT_CLASSIFIER.classify(message, history_length)

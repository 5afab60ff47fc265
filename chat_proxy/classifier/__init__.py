"""
Heuristic message-complexity classification.
"""

from .layer import ClassificationResult, ComplexityClassifier, classify, count_words

__all__ = [
    "ClassificationResult",
    "ComplexityClassifier",
    "classify",
    "count_words",
]

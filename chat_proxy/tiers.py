"""
Centralized complexity-tier definitions + metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class ComplexityTier(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


@dataclass(frozen=True)
class TierDefinition:
    """
    Registry entry: the phrases that select a tier and the model it routes to.
    """

    tier: ComplexityTier
    triggers: Tuple[str, ...] = ()
    default_model: str = ""


# Greetings and acknowledgements; matched exactly or as a leading word.
SIMPLE_PATTERNS: Tuple[str, ...] = (
    "hi",
    "hello",
    "hey",
    "thanks",
    "thank you",
    "ok",
    "okay",
    "yes",
    "no",
    "sure",
    "great",
    "awesome",
    "cool",
    "got it",
)

# Technical, enterprise, or multi-part intent; matched as substrings.
COMPLEX_PATTERNS: Tuple[str, ...] = (
    "integrate",
    "api",
    "technical",
    "architecture",
    "how exactly",
    "explain in detail",
    "step by step",
    "compare",
    "difference between",
    "custom",
    "specific",
    "enterprise",
    "compliance",
    "gdpr",
    "soc",
    "multiple",
    "several",
    "and also",
    "also want",
    "in addition",
)

SIMPLE_MAX_WORDS = 4
COMPLEX_MIN_WORDS = 26
COMPLEX_MIN_HISTORY = 9


TIER_REGISTRY: Dict[ComplexityTier, TierDefinition] = {
    ComplexityTier.SIMPLE: TierDefinition(
        tier=ComplexityTier.SIMPLE,
        triggers=SIMPLE_PATTERNS,
        default_model="meta-llama/llama-3.2-3b-instruct:free",
    ),
    ComplexityTier.MEDIUM: TierDefinition(
        tier=ComplexityTier.MEDIUM,
        default_model="mistralai/mistral-7b-instruct:free",
    ),
    ComplexityTier.COMPLEX: TierDefinition(
        tier=ComplexityTier.COMPLEX,
        triggers=COMPLEX_PATTERNS,
        default_model="anthropic/claude-3-haiku-20240307",
    ),
}


def triggers_for(tier: ComplexityTier) -> Tuple[str, ...]:
    return TIER_REGISTRY[tier].triggers


def default_model_table() -> Dict[ComplexityTier, str]:
    return {tier: definition.default_model for tier, definition in TIER_REGISTRY.items()}


__all__ = [
    "ComplexityTier",
    "TierDefinition",
    "TIER_REGISTRY",
    "SIMPLE_PATTERNS",
    "COMPLEX_PATTERNS",
    "SIMPLE_MAX_WORDS",
    "COMPLEX_MIN_WORDS",
    "COMPLEX_MIN_HISTORY",
    "triggers_for",
    "default_model_table",
]

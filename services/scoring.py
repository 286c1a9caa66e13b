"""
scoring.py
----------

Single-pass scoring of a token sequence against the lexicon.

The walk is modelled as a small state object fed one token at a time.
Three pieces of state interact:

* ``negation_scope`` counts how many upcoming tokens are still affected
  by the most recent negator. A negator sets it to ``NEGATION_WINDOW``
  and every later token (intensifiers included) consumes one unit.
* ``multiplier`` is armed by an intensifier and applies to the next
  sentiment-bearing token only. A multiplier that is never consumed
  simply stays armed until it is overwritten or the walk ends.
* the positive and negative running scores, plus the lists of tokens
  that produced them.

While a negation is active the polarity of a matched token is flipped:
a positive word is scored (and reported) as negative and vice versa.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from services.lexicon import Lexicon, SPANISH_LEXICON

NEGATION_WINDOW = 2
INTENSIFIER_MULTIPLIER = 1.5
PHRASE_WEIGHT = 1.5


@dataclass
class ScoringState:
    """Mutable per-analysis scoring state."""

    lexicon: Lexicon = SPANISH_LEXICON
    positive_score: float = 0.0
    negative_score: float = 0.0
    negation_scope: int = 0
    multiplier: float = 1.0
    positive: List[str] = field(default_factory=list)
    negative: List[str] = field(default_factory=list)
    intensifiers: List[str] = field(default_factory=list)
    negators: List[str] = field(default_factory=list)
    negative_phrases: List[str] = field(default_factory=list)

    @property
    def total(self) -> float:
        return self.positive_score + self.negative_score

    def scan_phrases(self, phrase_text: str, weight: float = PHRASE_WEIGHT) -> None:
        """Score each negative phrase present in ``phrase_text`` once."""
        for phrase in self.lexicon.negative_phrases:
            if phrase in phrase_text:
                self.negative_score += weight
                self.negative_phrases.append(phrase)

    def feed(self, token: str) -> "ScoringState":
        """Apply the transition for a single token and return ``self``."""
        if self.lexicon.is_negator(token):
            self.negation_scope = NEGATION_WINDOW
            self.negators.append(token)
            return self

        negation_active = self.negation_scope > 0

        if self.lexicon.is_intensifier(token):
            self.multiplier = INTENSIFIER_MULTIPLIER
            self.intensifiers.append(token)
            self._consume_scope()
            return self

        if self.lexicon.is_positive(token):
            self._add(token, 1 * self.multiplier, positive=not negation_active)
            self.multiplier = 1.0
        elif self.lexicon.is_negative(token):
            self._add(token, 1 * self.multiplier, positive=negation_active)
            self.multiplier = 1.0

        self._consume_scope()
        return self

    def _add(self, token: str, points: float, *, positive: bool) -> None:
        if positive:
            self.positive_score += points
            self.positive.append(token)
        else:
            self.negative_score += points
            self.negative.append(token)

    def _consume_scope(self) -> None:
        if self.negation_scope > 0:
            self.negation_scope -= 1

    def detected(self) -> Dict[str, List[str]]:
        return {
            "positive": list(self.positive),
            "negative": list(self.negative),
            "intensifiers": list(self.intensifiers),
            "negators": list(self.negators),
            "negative_phrases": list(self.negative_phrases),
        }


def score_tokens(
    tokens: Iterable[str],
    phrase_text: str = "",
    *,
    lexicon: Lexicon = SPANISH_LEXICON,
    phrase_weight: float = PHRASE_WEIGHT,
) -> ScoringState:
    """Run the phrase scan and then fold ``tokens`` through a fresh state.

    Phrase matches are additive with per-token matches on the same
    words; ``phrase_weight`` is the knob for tuning that overlap.
    """
    state = ScoringState(lexicon=lexicon)
    if phrase_text:
        state.scan_phrases(phrase_text, phrase_weight)
    for token in tokens:
        state.feed(token)
    return state


__all__ = [
    "NEGATION_WINDOW",
    "INTENSIFIER_MULTIPLIER",
    "PHRASE_WEIGHT",
    "ScoringState",
    "score_tokens",
]

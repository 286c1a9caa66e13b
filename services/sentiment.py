"""
sentiment.py
-------------

This module exposes the local heuristic sentiment engine. It is the
safe fallback used whenever the remote model provider is unavailable,
and it never fails: any input produces a complete result.

An analysis normalizes the text, scans it for negative multi-word
phrases, walks the tokens through :class:`~services.scoring.ScoringState`
and finally maps the two accumulated scores to a label and a
confidence percentage:

* no signal at all is ``neutral`` with a fixed 60% confidence;
* a positive ratio above 0.65 is ``positive``, below 0.35 is
  ``negative``, both with confidence ``60 + lopsidedness * 40`` capped
  at 95;
* anything in between is ``neutral`` with a confidence slightly above
  60 depending on how far the ratio sits from 0.5.

The per-label percentages in ``all_scores`` are a separate, purely
proportional view of the two scores.
"""

from __future__ import annotations

from datetime import datetime, UTC
from typing import Any, Dict, Iterable, List, Optional, Tuple

from services.lexicon import Lexicon, SPANISH_LEXICON
from services.logging_utils import get_structured_logger, log_performance
from services.scoring import PHRASE_WEIGHT, score_tokens
from services.text_normalizer import normalize_text, tokenize

logger = get_structured_logger(__name__)

LOCAL_MODEL_NAME = "Análisis Local Avanzado (heurístico)"
LOCAL_SOURCE = "Local Processing Engine"

POSITIVE_RATIO = 0.65
NEGATIVE_RATIO = 0.35
BASE_CONFIDENCE = 60.0
MAX_CONFIDENCE = 95.0


def classify_scores(positive_score: float, negative_score: float) -> Tuple[str, float]:
    """Map accumulated scores to ``(sentiment, confidence)``."""
    total = positive_score + negative_score
    if total == 0:
        return "neutral", BASE_CONFIDENCE

    ratio = positive_score / total
    if ratio > POSITIVE_RATIO:
        sentiment = "positive"
        confidence = min(MAX_CONFIDENCE, BASE_CONFIDENCE + ratio * 40)
    elif ratio < NEGATIVE_RATIO:
        sentiment = "negative"
        confidence = min(MAX_CONFIDENCE, BASE_CONFIDENCE + (1 - ratio) * 40)
    else:
        sentiment = "neutral"
        confidence = BASE_CONFIDENCE + abs(ratio - 0.5) * 20
    return sentiment, round(confidence, 2)


def score_breakdown(positive_score: float, negative_score: float) -> List[Dict[str, Any]]:
    """Proportional share of each label, independent of the decision."""
    total = positive_score + negative_score
    divisor = total or 1
    return [
        {"label": "Positive", "score": round(positive_score / divisor * 100, 2)},
        {"label": "Negative", "score": round(negative_score / divisor * 100, 2)},
        {"label": "Neutral", "score": 100.0 if total == 0 else 0.0},
    ]


class SentimentService:
    """Lexicon-driven sentiment analysis with negation and intensifiers."""

    def __init__(self, lexicon: Lexicon = SPANISH_LEXICON, phrase_weight: float = PHRASE_WEIGHT):
        self.lexicon = lexicon
        self.phrase_weight = phrase_weight

    def analyze(
        self,
        text: Any,
        model: Optional[str] = None,
        warning: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Analyse one text and return the full result envelope.

        Args:
            text: The input text. Non-string values are analysed as empty
                text.
            model: Profile requested by the caller. The local lexicon is
                Spanish only, so the profile does not change the result.
            warning: Optional note for the caller, e.g. why the remote
                provider was skipped.

        Returns:
            A dictionary with the echoed text, the engine identifiers,
            an ``analysis`` block and a UTC timestamp.
        """
        clean_text = text if isinstance(text, str) else ""
        state = score_tokens(
            tokenize(clean_text),
            normalize_text(clean_text),
            lexicon=self.lexicon,
            phrase_weight=self.phrase_weight,
        )
        sentiment, confidence = classify_scores(state.positive_score, state.negative_score)

        result: Dict[str, Any] = {
            "success": True,
            "text": text,
            "model": LOCAL_MODEL_NAME,
            "source": LOCAL_SOURCE,
        }
        if warning:
            result["warning"] = warning
        result["analysis"] = {
            "sentiment": sentiment,
            "confidence": confidence,
            "label": sentiment.capitalize(),
            "all_scores": score_breakdown(state.positive_score, state.negative_score),
            "details": {
                "positive_words": len(state.positive),
                "negative_words": len(state.negative),
                "intensifiers": len(state.intensifiers),
                "negations": len(state.negators),
                "detected_words": state.detected(),
            },
        }
        result["timestamp"] = datetime.now(UTC).isoformat()
        return result

    @log_performance()
    def analyze_batch(self, texts: Iterable[Any], model: Optional[str] = None) -> List[Dict[str, Any]]:
        """Analyse each item independently, preserving input order.

        Items are coerced to text first. A failure on one item yields an
        ``{"text", "error"}`` record in its slot and never aborts the
        rest of the batch.
        """
        results: List[Dict[str, Any]] = []
        for index, item in enumerate(texts):
            try:
                results.append(self.analyze(str(item or ""), model))
            except Exception as e:
                logger.warning(
                    f"Batch item {index} could not be analysed: {e}",
                    index=index,
                    error=str(e),
                )
                results.append({"text": item, "error": str(e)})
        return results


__all__ = [
    "LOCAL_MODEL_NAME",
    "LOCAL_SOURCE",
    "SentimentService",
    "classify_scores",
    "score_breakdown",
]

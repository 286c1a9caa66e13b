"""Token-by-token behaviour of the scoring state machine."""

from __future__ import annotations

import pytest

from services.lexicon import Lexicon, SPANISH_LEXICON
from services.scoring import NEGATION_WINDOW, ScoringState, score_tokens
from services.text_normalizer import normalize_text, tokenize


def _score(text: str) -> ScoringState:
    return score_tokens(tokenize(text), normalize_text(text))


def test_negator_opens_window_without_consuming_it() -> None:
    state = ScoringState()

    state.feed("no")

    assert state.negation_scope == NEGATION_WINDOW
    assert state.negators == ["no"]
    assert state.positive_score == state.negative_score == 0


def test_neutral_token_consumes_one_unit_of_scope() -> None:
    state = ScoringState()
    state.feed("no").feed("es")

    assert state.negation_scope == 1


def test_negated_positive_scores_as_negative() -> None:
    state = _score("no es bueno")

    assert state.negative_score == 1.0
    assert state.positive_score == 0.0
    assert state.negative == ["bueno"]
    assert state.negators == ["no"]


def test_negated_negative_scores_as_positive() -> None:
    state = _score("no es malo")

    assert state.positive_score == 1.0
    assert state.negative_score == 0.0
    assert state.positive == ["malo"]


def test_negation_window_expires_after_two_tokens() -> None:
    state = _score("no es el bueno")

    assert state.positive_score == 1.0
    assert state.negative_score == 0.0


def test_intensifier_multiplies_next_match() -> None:
    assert _score("muy bueno").positive_score == 1.5
    assert _score("bueno").positive_score == 1.0


def test_intensifier_is_never_scored_itself() -> None:
    state = _score("extremadamente")

    assert state.intensifiers == ["extremadamente"]
    assert state.positive == [] and state.negative == []
    assert state.multiplier == 1.5


def test_multiplier_is_consumed_by_first_match_only() -> None:
    state = _score("muy bueno malo")

    assert state.positive_score == 1.5
    assert state.negative_score == 1.0
    assert state.multiplier == 1.0


def test_multiplier_spills_over_neutral_tokens() -> None:
    state = _score("muy el día fue bueno")

    assert state.positive_score == 1.5


def test_multiplier_survives_a_negator() -> None:
    state = _score("muy no bueno")

    assert state.negative_score == 1.5
    assert state.positive_score == 0.0


def test_intensifier_inside_window_consumes_scope() -> None:
    # no(2) muy(1) bueno -> still negated
    assert _score("no muy bueno").negative_score == 1.5
    # no(2) muy(1) muy(0) bueno -> window closed
    state = _score("no muy muy bueno")
    assert state.positive_score == 1.5
    assert state.negative_score == 0.0


def test_new_negator_resets_window() -> None:
    state = _score("no es nunca es bueno")

    assert state.negators == ["no", "nunca"]
    assert state.negative_score == 1.0


def test_substring_matching_tolerates_inflections() -> None:
    state = _score("buenos amigos, felicidades")

    assert state.positive == ["buenos", "felicidades"]


def test_negators_and_intensifiers_need_exact_tokens() -> None:
    state = _score("nadar muyy bueno")

    assert state.negators == []
    assert state.intensifiers == []
    assert state.positive_score == 1.0


def test_positive_match_wins_over_negative() -> None:
    state = _score("bienfeo")

    assert state.positive == ["bienfeo"]
    assert state.negative == []


def test_negative_phrase_counts_once_and_adds_to_token_matches() -> None:
    state = _score("Eres un hijo de la gran puta, hijo de la gran puta")

    assert state.negative_phrases == ["hijo de la gran puta"]
    # phrase weight once + "puta" matched as a token twice
    assert state.negative_score == pytest.approx(1.5 + 2.0)


def test_phrase_weight_is_tunable() -> None:
    text = "hijo de la gran puta"
    state = score_tokens(tokenize(text), normalize_text(text), phrase_weight=0.0)

    assert state.negative_phrases == ["hijo de la gran puta"]
    assert state.negative_score == 1.0


def test_custom_lexicon_is_respected() -> None:
    lexicon = Lexicon.build(
        positive=["good"],
        negative=["bad", "not at all"],
        intensifiers=["very"],
        negators=["not"],
    )
    state = score_tokens(["not", "very", "good"], "not very good", lexicon=lexicon)

    assert lexicon.negative_phrases == ("not at all",)
    assert state.negative_score == 1.5


def test_detected_returns_copies() -> None:
    state = _score("muy bueno")
    detected = state.detected()
    detected["positive"].append("x")

    assert state.positive == ["bueno"]
    assert set(detected) == {"positive", "negative", "intensifiers", "negators", "negative_phrases"}


def test_spanish_lexicon_splits_phrases_from_words() -> None:
    assert "hijo de la gran puta" in SPANISH_LEXICON.negative_phrases
    assert all(" " not in word for word in SPANISH_LEXICON.negative_words)

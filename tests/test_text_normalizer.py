"""Normalization and tokenization of raw input text."""

from __future__ import annotations

import pytest

from services.text_normalizer import normalize_text, tokenize


def test_punctuation_is_blanked_and_whitespace_collapsed() -> None:
    text = "¡Hola!  ¿Qué tal?\n\t“Todo” (bien), 'gracias'; sí: ok."

    assert normalize_text(text) == "hola qué tal todo bien gracias sí ok"


def test_tokens_split_on_single_spaces() -> None:
    assert tokenize("No es   BUENO.") == ["no", "es", "bueno"]


def test_accented_letters_are_lowercased_not_stripped() -> None:
    assert tokenize("ÉXITO Increíble") == ["éxito", "increíble"]


@pytest.mark.parametrize("text", ["", "   ", "¡¿?!", "\n\t"])
def test_empty_text_yields_no_tokens(text: str) -> None:
    assert normalize_text(text) == ""
    assert tokenize(text) == []


@pytest.mark.parametrize("value", [None, 42, ["bueno"], {"text": "bueno"}])
def test_non_string_input_is_empty(value) -> None:
    assert normalize_text(value) == ""
    assert tokenize(value) == []


def test_hyphens_and_digits_are_kept() -> None:
    # Only the listed punctuation marks are separators
    assert tokenize("súper-bueno 10/10") == ["súper-bueno", "10/10"]

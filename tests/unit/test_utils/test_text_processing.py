"""Unit tests for text coercion helpers."""

from __future__ import annotations

import pytest

from landnet.utils.text_processing import clamp, coerce_identifier, coerce_int, coerce_text, fold_keyword


def test_fold_keyword_strips_accents_and_case():
    assert fold_keyword("  Álta\n") == "alta"
    assert fold_keyword("MEDIA") == "media"


@pytest.mark.parametrize(
    ("value", "expected"),
    [("7", "7"), (7, "7"), (7.0, "7"), ("  a1 ", "a1"), ("", None), (True, None), (None, None), (1.5, None)],
)
def test_coerce_identifier(value, expected):
    assert coerce_identifier(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [(8, 8), (7.6, 8), ("9", 9), ("score: 6/10", 6), ("4,5", 4), (float("nan"), None), ("n/a", None), (False, None)],
)
def test_coerce_int(value, expected):
    assert coerce_int(value) == expected


def test_coerce_text():
    assert coerce_text(None) == ""
    assert coerce_text({"a": 1}) == ""
    assert coerce_text("  two   words ") == "two words"
    assert coerce_text(12) == "12"


def test_clamp():
    assert clamp(15, 1, 10) == 10
    assert clamp(-2, 1, 10) == 1
    assert clamp(5, 1, 10) == 5

from __future__ import annotations

import pytest

from hftools.errors import ExecutionError
from hftools.infrastructure.placeholders import translate_placeholders


def test_pyformat_rewrites_dollar_placeholders():
    text, params = translate_placeholders(
        "UPDATE users SET username=$1, email=$2 WHERE id=$3", ["a", "b", 3]
    )
    assert text == "UPDATE users SET username=%s, email=%s WHERE id=%s"
    assert params == ["a", "b", 3]


def test_qmark_style():
    text, params = translate_placeholders("DELETE FROM users WHERE id=$1", [9], style="qmark")
    assert text == "DELETE FROM users WHERE id=?"
    assert params == [9]


def test_params_follow_order_of_appearance():
    text, params = translate_placeholders("SELECT * FROM t WHERE b=$2 AND a=$1", ["a", "b"])
    assert text == "SELECT * FROM t WHERE b=%s AND a=%s"
    assert params == ["b", "a"]


def test_repeated_placeholder_repeats_its_param():
    _, params = translate_placeholders("SELECT * FROM t WHERE a=$1 OR b=$1", [5])
    assert params == [5, 5]


def test_literal_percent_is_escaped_for_pyformat():
    text, _ = translate_placeholders("SELECT * FROM t WHERE s LIKE 'EUR%' AND id=$1", [1])
    assert text == "SELECT * FROM t WHERE s LIKE 'EUR%%' AND id=%s"


def test_placeholder_beyond_params_fails():
    with pytest.raises(ExecutionError, match=r"\$3"):
        translate_placeholders("SELECT * FROM t WHERE a=$3", [1, 2])


def test_unknown_style_fails():
    with pytest.raises(ExecutionError, match="numeric"):
        translate_placeholders("SELECT 1", [], style="numeric")

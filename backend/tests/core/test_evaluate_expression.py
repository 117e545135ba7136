"""Expression Evaluator — verifies arithmetic, rounding, and failure classification.

Invariants:
    - Valid expressions return floats rounded to exactly 2 decimal places (half-up)
    - Every malformed/semantically invalid input raises EvaluationError (never a raw exception)
    - No eval(): attribute access, imports and names outside the whitelist are rejected
"""

import pytest

from calclog.core.errors import EvaluationError
from calclog.core.evaluate_expression import evaluate_expression, round_output


@pytest.mark.parametrize(
    "expression, expected",
    [
        ("3*4", 12.0),
        ("1 + 2 * 3", 7.0),
        ("(1 + 2) * 3", 9.0),
        ("10 / 4", 2.5),
        ("2 ^ 10", 1024.0),
        ("2 ** 3", 8.0),
        ("-5 + 2", -3.0),
        ("7 // 2", 3.0),
        ("7 % 4", 3.0),
        ("sqrt(16)", 4.0),
        ("max(1, 9, 3)", 9.0),
        ("pi", 3.14),
        ("1/3", 0.33),
        ("2/3", 0.67),
        ("  4 + 4  ", 8.0),
        ("1 +\n2", 3.0),
        ("3\t*\r\n4", 12.0),
        ("2(3)", 6.0),
        ("(1 + 2)(4)", 12.0),
        ("-2(3)", -6.0),
    ],
)
def test_evaluates_valid_expressions(expression, expected):
    assert evaluate_expression(expression) == expected


def test_result_has_at_most_two_decimals():
    value = evaluate_expression("22 / 7")
    assert value == 3.14
    assert round(value, 2) == value


def test_round_output_is_half_up():
    assert round_output(2.675) == 2.68
    assert round_output(0.125) == 0.13
    assert round_output(-1.005) == -1.01


def test_round_output_normalizes_negative_zero():
    assert str(round_output(-0.001)) == "0.0"


def test_large_finite_results_survive_rounding():
    assert evaluate_expression("10 ^ 30") == 1e30


@pytest.mark.parametrize(
    "expression",
    [
        "2+",
        "foo(bar",
        "1/0",
        "5 % 0",
        "unknown + 1",
        "nope(3)",
        "sqrt(-1)",
        "(-8) ^ 0.5",
        "10 ^ 400",
        "exp(1000)",
        "'text'",
        "True",
        "1j",
        "__import__('os')",
        "(1).real",
        "[1, 2]",
        "max()",
        "2(3, 4)",
        "2 3",
    ],
)
def test_invalid_expressions_raise_evaluation_error(expression):
    with pytest.raises(EvaluationError):
        evaluate_expression(expression)


@pytest.mark.parametrize("expression", ["", "   ", "\t\n"])
def test_blank_expression_is_an_evaluation_error(expression):
    with pytest.raises(EvaluationError, match="empty"):
        evaluate_expression(expression)


def test_overlong_expression_is_rejected():
    with pytest.raises(EvaluationError, match="longer than"):
        evaluate_expression("1+" * 600 + "1")


def test_division_by_zero_reason_is_reported():
    with pytest.raises(EvaluationError) as exc_info:
        evaluate_expression("1/0")
    assert exc_info.value.reason == "division by zero"
    assert exc_info.value.code == "EVALUATION_FAILED"

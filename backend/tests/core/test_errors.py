"""Error Hierarchy — verifies codes, HTTP mapping, and envelopes.

Tests:
    - Empty expression is a 400 validation error
    - Store unavailability is a 500 (not 503) critical error
    - to_response envelope shape
"""

from calclog.core.errors import (
    CalclogError, EmptyExpressionError, ErrorCategory, ErrorSeverity,
    EvaluationError, InvalidSubmissionError, StoreUnavailableError,
)


def test_empty_expression_maps_to_400():
    err = EmptyExpressionError()
    assert err.http_status == 400
    assert err.code == "EMPTY_EXPRESSION"
    assert err.category == ErrorCategory.VALIDATION
    assert err.message == "Expression is empty"


def test_store_unavailable_maps_to_500():
    err = StoreUnavailableError("Connection or operational error", "execute")
    assert err.http_status == 500
    assert err.severity == ErrorSeverity.CRITICAL
    assert err.operation == "execute"
    assert "execute" in err.message


def test_all_errors_share_the_base():
    for err in (
        EmptyExpressionError(),
        InvalidSubmissionError("bad"),
        EvaluationError("bad"),
        StoreUnavailableError("down", "commit"),
    ):
        assert isinstance(err, CalclogError)


def test_to_response_envelope():
    body = EmptyExpressionError().to_response()
    assert set(body) == {"error"}
    assert body["error"]["code"] == "EMPTY_EXPRESSION"
    assert body["error"]["message"] == "Expression is empty"
    assert body["error"]["category"] == "validation"
    assert "timestamp" in body["error"]

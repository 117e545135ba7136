"""Log Schemas — verifies camelCase wire names and submission normalization."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from calclog.core.domain_types import LogStatus
from calclog.schemas.log import (
    EvaluationResponse, ExpressionRequest, LogRecordResponse, LogSubmission,
)


def test_expression_request_allows_missing_expression():
    assert ExpressionRequest.model_validate({}).expression is None


def test_evaluation_response_serializes_camel_case():
    body = EvaluationResponse(message="ok", output=1.5, is_valid=True)
    assert body.model_dump(by_alias=True) == {
        "message": "ok", "output": 1.5, "isValid": True,
    }


def test_submission_accepts_camel_and_snake_names():
    camel = LogSubmission.model_validate({"expression": "1+1", "isValid": True, "output": 2})
    snake = LogSubmission.model_validate({"expression": "1+1", "is_valid": True, "output": 2})
    assert camel == snake


def test_submission_forces_null_output_when_invalid():
    sub = LogSubmission.model_validate({"expression": "2+", "isValid": False, "output": 3})
    assert sub.output is None


def test_submission_rounds_output_half_up():
    sub = LogSubmission.model_validate(
        {"expression": "pi", "isValid": True, "output": 3.14159265},
    )
    assert sub.output == 3.14
    assert LogSubmission.model_validate(
        {"expression": "2.675", "isValid": True, "output": 2.675},
    ).output == 2.68


def test_submission_accepts_reserved_status():
    sub = LogSubmission.model_validate(
        {"expression": "1", "isValid": True, "output": 1, "status": "completed"},
    )
    assert sub.status == LogStatus.COMPLETED


@pytest.mark.parametrize(
    "payload",
    [
        {"expression": "", "isValid": True},
        {"isValid": True},
        {"expression": "1+1", "isValid": True, "status": "archived"},
        {"expression": "1/0", "isValid": True, "output": float("inf")},
        {"expression": "0/0", "isValid": True, "output": float("nan")},
    ],
)
def test_submission_rejects_bad_payloads(payload):
    with pytest.raises(ValidationError):
        LogSubmission.model_validate(payload)


def test_record_response_naive_created_on_is_utc():
    record = LogRecordResponse(
        id=1, expression="1+1", is_valid=True, output=2.0,
        created_on=datetime(2026, 3, 1, 8, 30, 0),
    )
    assert record.model_dump(mode="json", by_alias=True)["createdOn"] == (
        "2026-03-01T08:30:00+00:00"
    )

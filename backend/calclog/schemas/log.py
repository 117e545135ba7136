"""Log Schemas — Pydantic models for the calculator log wire format.

Invariants:
    - Wire names are camelCase (isValid, createdOn); Python names stay snake_case
    - createdOn always serializes as an ISO 8601 string with a UTC offset
    - LogSubmission.output is forced to None when isValid is false, else rounded
      half-up to 2 places; non-finite outputs are rejected
    - ExpressionRequest accepts a missing expression; emptiness is a domain error, not a schema error

Design Decisions:
    - alias_generator=to_camel + populate_by_name: ORM attributes map 1:1 by name,
      JSON keys match the browser client without per-field aliases
    - from_attributes=True: LogRecordResponse.model_validate(orm_row) works directly
"""

from datetime import datetime

from pydantic import (
    BaseModel, ConfigDict, Field, field_serializer, model_validator,
)
from pydantic.alias_generators import to_camel

from calclog.core.dedup_policy import as_utc
from calclog.core.domain_types import LogStatus, MAX_EXPRESSION_LENGTH
from calclog.core.evaluate_expression import round_output


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )


class ExpressionRequest(BaseModel):
    """POST /api/logs body."""
    expression: str | None = None


class EvaluationResponse(_CamelModel):
    """POST /api/logs result — reached for valid and invalid expressions alike."""
    message: str
    output: float | None
    is_valid: bool


class LogSubmission(_CamelModel):
    """Push-channel `log` payload — a record minus id/createdOn."""
    expression: str = Field(min_length=1, max_length=MAX_EXPRESSION_LENGTH)
    is_valid: bool
    output: float | None = Field(default=None, allow_inf_nan=False)
    status: LogStatus | None = None

    @model_validator(mode="after")
    def normalize_output(self):
        if not self.is_valid:
            self.output = None
        elif self.output is not None:
            self.output = round_output(self.output)
        return self


class LogRecordResponse(_CamelModel):
    """A committed log record as seen by every delivery channel."""
    id: int
    expression: str
    is_valid: bool
    output: float | None
    created_on: datetime
    status: str | None = None

    @field_serializer("created_on")
    def serialize_created_on(self, value: datetime) -> str:
        return as_utc(value).isoformat()

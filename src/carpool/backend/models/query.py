"""
Models for datasource queries
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from carpool.backend.errors import BadRequest, InvalidMetricType, MalformedQuery


class MetricType(str, Enum):
    """User-facing metric types"""

    INVOCATIONS = "invocations"
    UNIQUE_SIGNERS = "uniqueSigners"
    FAILURES = "failures"
    FAILURE_RATE = "failureRate"
    PROGRAM_DEPLOYMENTS = "programDeployments"
    FAILED_PROGRAM_DEPLOYMENTS = "failedProgramDeployments"
    TOP_INSTRUCTIONS = "topInstructions"


class UpstreamShape(str, Enum):
    """Query shapes served by the upstream metrics API"""

    INVOCATIONS = "invocations"
    UNIQUE_SIGNERS = "uniqueSigners"
    PROGRAM_DEPLOYMENTS = "programDeployments"
    FAILED_PROGRAM_DEPLOYMENTS = "failedProgramDeployments"


class TimeRange(BaseModel):
    """Absolute time range of a query"""

    model_config = ConfigDict(populate_by_name=True)

    from_: datetime = Field(..., alias="from", description="Start of the range")
    to: datetime = Field(..., description="End of the range")


class QueryPayload(BaseModel):
    """The sub-query JSON as sent by the query editor"""

    queryType: str = Field(..., description="Requested metric type")
    programId: str = Field(..., description="Program to query")
    instructionName: str = Field(default="", description="Optional instruction filter")
    topN: int = Field(default=0, description="Number of instructions for topInstructions")


class DataQuery(BaseModel):
    """A single sub-query of a data request"""

    refId: str = Field(default="A", description="Identifier the result is keyed by")
    timeRange: TimeRange = Field(..., description="Time range to query")
    intervalMs: int = Field(default=1000, description="Requested interval in milliseconds")
    payload: Any = Field(default_factory=dict, description="Raw sub-query JSON")


class QueryDataRequest(BaseModel):
    """Request for one or more sub-queries"""

    queries: List[DataQuery] = Field(default_factory=list, description="Sub-queries to run")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class MetricRequest(BaseModel):
    """A validated, immutable metric request"""

    model_config = ConfigDict(frozen=True)

    metric_type: MetricType
    program_id: str
    instruction_name: str = ""
    top_n: int = 0
    time_from: datetime
    time_to: datetime
    interval_seconds: int = 1

    @classmethod
    def from_query(cls, query: DataQuery) -> "MetricRequest":
        """
        Parse a sub-query into a metric request.

        Raises:
            MalformedQuery: the payload is missing fields or has the wrong types,
                or the time range cannot be expressed in UTC
            InvalidMetricType: queryType is not a supported metric type
            BadRequest: programId is blank
        """
        try:
            if isinstance(query.payload, (str, bytes)):
                payload = QueryPayload.model_validate_json(query.payload)
            else:
                payload = QueryPayload.model_validate(query.payload)
        except ValidationError as e:
            raise MalformedQuery(str(e)) from e

        try:
            metric_type = MetricType(payload.queryType)
        except ValueError as e:
            raise InvalidMetricType(payload.queryType) from e

        if not payload.programId.strip():
            raise BadRequest("programId is required", code="MISSING_PROGRAM_ID")

        try:
            time_from = _as_utc(query.timeRange.from_)
            time_to = _as_utc(query.timeRange.to)
        except (OverflowError, ValueError) as e:
            raise MalformedQuery(f"time range out of range: {e}") from e

        return cls(
            metric_type=metric_type,
            program_id=payload.programId,
            instruction_name=payload.instructionName,
            top_n=payload.topN,
            time_from=time_from,
            time_to=time_to,
            interval_seconds=max(query.intervalMs // 1000, 1),
        )

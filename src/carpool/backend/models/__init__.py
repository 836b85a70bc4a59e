"""Models for the Carpool datasource backend"""

from .buckets import (
    InvocationBucket,
    InvocationsResponse,
    ProgramEventBucket,
    ProgramEventsResponse,
    SignerBucket,
    SignersResponse,
)
from .frames import DataResponse, Frame, FrameField, FrameMeta, HealthResponse, QueryDataResponse
from .query import (
    DataQuery,
    MetricRequest,
    MetricType,
    QueryDataRequest,
    QueryPayload,
    TimeRange,
    UpstreamShape,
)

__all__ = [
    "InvocationBucket",
    "InvocationsResponse",
    "ProgramEventBucket",
    "ProgramEventsResponse",
    "SignerBucket",
    "SignersResponse",
    "DataResponse",
    "Frame",
    "FrameField",
    "FrameMeta",
    "HealthResponse",
    "QueryDataResponse",
    "DataQuery",
    "MetricRequest",
    "MetricType",
    "QueryDataRequest",
    "QueryPayload",
    "TimeRange",
    "UpstreamShape",
]

"""
Datasource errors

Every failure of a single sub-query is reported through one of these
exceptions and converted into a bad-request result for that sub-query.
"""

from typing import Any, Mapping, Optional


class DatasourceError(Exception):
    """
    Base exception for datasource query errors.

    Attributes:
        message: Human-readable description
        code: Machine-readable, UPPER_SNAKE_CASE error code
        status: Status code reported back in the data response
        details: Additional machine context
    """

    status = 500

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = dict(details or {})

    def __str__(self) -> str:
        base = self.message or self.__class__.__name__
        if self.code:
            base += f" [code={self.code}]"
        return base


class BadRequest(DatasourceError):
    """Failure attributable to the request or to the upstream API"""

    status = 400

    def __init__(self, message: str, **kw: Any):
        kw.setdefault("code", "BAD_REQUEST")
        super().__init__(message, **kw)


class MalformedQuery(BadRequest):
    """The sub-query payload could not be parsed"""

    def __init__(self, cause: str, **kw: Any):
        kw.setdefault("code", "MALFORMED_QUERY")
        super().__init__(f"json unmarshal: {cause}", **kw)


class InvalidMetricType(BadRequest):
    """The queryType is not one of the supported metric types"""

    def __init__(self, query_type: Any, **kw: Any):
        kw.setdefault("code", "INVALID_METRIC_TYPE")
        kw.setdefault("details", {"queryType": query_type})
        super().__init__(f"invalid query type: {query_type}", **kw)
        self.query_type = query_type


class UpstreamTransportError(BadRequest):
    """The upstream request could not complete"""

    def __init__(self, cause: str, **kw: Any):
        kw.setdefault("code", "UPSTREAM_TRANSPORT")
        super().__init__(f"upstream error: {cause}", **kw)


class UpstreamStatusError(BadRequest):
    """The upstream API answered with a non-200 status"""

    def __init__(self, status_code: int, **kw: Any):
        kw.setdefault("code", "UPSTREAM_STATUS")
        kw.setdefault("details", {"status_code": status_code})
        super().__init__(f"upstream error: {status_code}", **kw)
        self.status_code = status_code


class DecodeError(BadRequest):
    """The upstream body is not valid JSON or does not match the bucket schema"""

    def __init__(self, cause: str, **kw: Any):
        kw.setdefault("code", "DECODE_ERROR")
        super().__init__(f"json unmarshal: {cause}", **kw)

"""
Maps metric types to upstream query shapes and builds upstream URLs.
"""

from datetime import datetime, timezone
from typing import Dict
from urllib.parse import quote, urlencode

from carpool.backend.models import MetricType, UpstreamShape

UPSTREAM_SHAPES: Dict[MetricType, UpstreamShape] = {
    MetricType.INVOCATIONS: UpstreamShape.INVOCATIONS,
    MetricType.FAILURES: UpstreamShape.INVOCATIONS,
    MetricType.FAILURE_RATE: UpstreamShape.INVOCATIONS,
    MetricType.TOP_INSTRUCTIONS: UpstreamShape.INVOCATIONS,
    MetricType.UNIQUE_SIGNERS: UpstreamShape.UNIQUE_SIGNERS,
    MetricType.PROGRAM_DEPLOYMENTS: UpstreamShape.PROGRAM_DEPLOYMENTS,
    MetricType.FAILED_PROGRAM_DEPLOYMENTS: UpstreamShape.FAILED_PROGRAM_DEPLOYMENTS,
}


def upstream_shape_for(metric_type: MetricType) -> UpstreamShape:
    """Upstream shape that must be fetched to serve a metric type"""
    return UPSTREAM_SHAPES[metric_type]


def format_rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def build_metrics_url(
    host: str,
    shape: UpstreamShape,
    program_id: str,
    instruction_name: str,
    start: datetime,
    end: datetime,
    bucket_seconds: int,
) -> str:
    """
    Build the upstream metrics URL.

    ``instructionName`` is only appended when non-empty.
    """
    params = [
        ("start", format_rfc3339(start)),
        ("end", format_rfc3339(end)),
        ("bucketSeconds", str(bucket_seconds)),
    ]
    if instruction_name:
        params.append(("instructionName", instruction_name))

    path = f"/query/solana/instructions/{quote(program_id, safe='')}/{shape.value}"
    return f"{host.rstrip('/')}{path}?{urlencode(params, safe=':')}"

"""
Decodes upstream bucket payloads into columnar series.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Type, Union

from pydantic import BaseModel, ValidationError

from carpool.backend.errors import DecodeError
from carpool.backend.models import (
    InvocationsResponse,
    ProgramEventsResponse,
    SignersResponse,
    UpstreamShape,
)

logger = logging.getLogger(__name__)

# Label columns per shape, in output order
LABEL_COLUMNS: Dict[UpstreamShape, List[str]] = {
    UpstreamShape.INVOCATIONS: ["status", "instructionName"],
    UpstreamShape.UNIQUE_SIGNERS: [],
    UpstreamShape.PROGRAM_DEPLOYMENTS: ["authority", "status", "action"],
    UpstreamShape.FAILED_PROGRAM_DEPLOYMENTS: ["authority", "status", "action"],
}

_RESPONSE_MODELS: Dict[UpstreamShape, Type[BaseModel]] = {
    UpstreamShape.INVOCATIONS: InvocationsResponse,
    UpstreamShape.UNIQUE_SIGNERS: SignersResponse,
    UpstreamShape.PROGRAM_DEPLOYMENTS: ProgramEventsResponse,
    UpstreamShape.FAILED_PROGRAM_DEPLOYMENTS: ProgramEventsResponse,
}


@dataclass
class DecodedSeries:
    """Parallel time, count and label columns, in upstream order"""

    times: List[datetime] = field(default_factory=list)
    counts: List[int] = field(default_factory=list)
    labels: Dict[str, List[str]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.times)

    def label(self, name: str) -> List[str]:
        return self.labels[name]

    def columns(self) -> Dict[str, list]:
        """All columns keyed by name: time, count, then labels"""
        return {"time": self.times, "count": self.counts, **self.labels}


def decode(raw_body: Union[bytes, str], shape: UpstreamShape) -> DecodedSeries:
    """
    Decode an upstream response body for the given shape.

    Raises:
        DecodeError: the body is not JSON or does not match the bucket schema
    """
    model = _RESPONSE_MODELS[shape]
    try:
        response = model.model_validate_json(raw_body)
    except ValidationError as e:
        raise DecodeError(str(e)) from e

    label_names = LABEL_COLUMNS[shape]
    buckets = response.buckets
    series = DecodedSeries(
        times=[b.time for b in buckets],
        counts=[b.count for b in buckets],
        labels={name: [getattr(b, name) for b in buckets] for name in label_names},
    )
    logger.debug(f"Decoded {len(series)} {shape.value} buckets")
    return series

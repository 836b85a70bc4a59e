"""
Derives output columns from decoded series, one derivation per metric type.
"""

import logging
from typing import Any, Callable, Dict, List

from carpool.backend.models import MetricRequest, MetricType
from carpool.backend.services.decoder import DecodedSeries
from carpool.backend.services.top_n import select_top_n

logger = logging.getLogger(__name__)

SUCCESS_STATUS = "success"

Columns = Dict[str, List[Any]]


def passthrough(series: DecodedSeries) -> Columns:
    """All decoded columns, unchanged"""
    return {name: list(values) for name, values in series.columns().items()}


def top_instructions(series: DecodedSeries, n: int) -> Columns:
    """Rows belonging to the ``n`` instructions with the largest totals"""
    names = series.label("instructionName")
    top = select_top_n(zip(names, series.counts), n)
    logger.debug(f"Top {n} instructions: {sorted(top)}")

    keep = [i for i, name in enumerate(names) if name in top]
    return {name: [values[i] for i in keep] for name, values in series.columns().items()}


def failures(series: DecodedSeries) -> Columns:
    """Invocation rows whose status is not the success marker"""
    statuses = series.label("status")
    names = series.label("instructionName")
    keep = [i for i, status in enumerate(statuses) if status != SUCCESS_STATUS]
    return {
        "time": [series.times[i] for i in keep],
        "count": [series.counts[i] for i in keep],
        "instructionName": [names[i] for i in keep],
    }


def failure_rate(series: DecodedSeries) -> Columns:
    """
    Running failure rate at each distinct timestamp.

    Rows sharing a timestamp form one group. Failure and total counts
    accumulate over all groups seen so far, and one rate is emitted when
    each group closes, so every value is the cumulative failure proportion
    up to and including that timestamp. The rate is weighted by bucket
    count, not by the number of rows.
    """
    times: List[Any] = []
    rates: List[float] = []
    failed = 0
    total = 0

    def emit(at):
        times.append(at)
        rates.append(failed / total if total else 0.0)

    statuses = series.label("status")
    current = None
    for i, at in enumerate(series.times):
        if i > 0 and at != current:
            emit(current)
        current = at
        total += series.counts[i]
        if statuses[i] != SUCCESS_STATUS:
            failed += series.counts[i]

    if len(series):
        emit(current)

    return {"time": times, "rate": rates}


_DERIVATIONS: Dict[MetricType, Callable[[DecodedSeries, MetricRequest], Columns]] = {
    MetricType.INVOCATIONS: lambda s, r: passthrough(s),
    MetricType.TOP_INSTRUCTIONS: lambda s, r: top_instructions(s, r.top_n),
    MetricType.UNIQUE_SIGNERS: lambda s, r: passthrough(s),
    MetricType.FAILURES: lambda s, r: failures(s),
    MetricType.FAILURE_RATE: lambda s, r: failure_rate(s),
    MetricType.PROGRAM_DEPLOYMENTS: lambda s, r: passthrough(s),
    MetricType.FAILED_PROGRAM_DEPLOYMENTS: lambda s, r: passthrough(s),
}


def transform(series: DecodedSeries, request: MetricRequest) -> Columns:
    """Output columns for the request's metric type"""
    return _DERIVATIONS[request.metric_type](series, request)

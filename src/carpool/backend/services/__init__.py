"""Services for the Carpool datasource backend"""

from .bucket_resolver import resolve_bucket_seconds
from .decoder import DecodedSeries, decode
from .fetcher import AiohttpMetricsFetcher, MetricsFetcher
from .query_controller import QueryController
from .router import build_metrics_url, upstream_shape_for
from .top_n import InstructionRanking, select_top_n
from .transformer import transform

__all__ = [
    "resolve_bucket_seconds",
    "DecodedSeries",
    "decode",
    "AiohttpMetricsFetcher",
    "MetricsFetcher",
    "QueryController",
    "build_metrics_url",
    "upstream_shape_for",
    "InstructionRanking",
    "select_top_n",
    "transform",
]

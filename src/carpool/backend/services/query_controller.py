"""
Query Controller

Runs the sub-queries of a data request and collects one result per refId.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from carpool.backend.config import DatasourceSettings
from carpool.backend.errors import DatasourceError
from carpool.backend.models import (
    DataQuery,
    DataResponse,
    Frame,
    HealthResponse,
    MetricRequest,
    QueryDataRequest,
    QueryDataResponse,
)
from carpool.backend.services.bucket_resolver import resolve_bucket_seconds
from carpool.backend.services.decoder import decode
from carpool.backend.services.fetcher import AiohttpMetricsFetcher, MetricsFetcher
from carpool.backend.services.router import build_metrics_url, upstream_shape_for
from carpool.backend.services.transformer import transform

logger = logging.getLogger(__name__)


class QueryController:
    """
    Controller for datasource queries.

    Each sub-query runs resolve -> build URL -> fetch -> decode -> transform
    in sequence; sub-queries of one request run concurrently and share no
    state.
    """

    def __init__(
        self,
        settings: DatasourceSettings,
        fetcher: Optional[MetricsFetcher] = None,
    ):
        self.settings = settings
        self.fetcher = fetcher or AiohttpMetricsFetcher(settings)

    async def query_data(self, request: QueryDataRequest) -> QueryDataResponse:
        """Run every sub-query; failures are reported per refId"""
        results: List[Tuple[str, DataResponse]] = await asyncio.gather(
            *(self._run(q) for q in request.queries)
        )
        return QueryDataResponse(results=dict(results))

    async def _run(self, query: DataQuery) -> Tuple[str, DataResponse]:
        try:
            frame = await self.query(query)
        except DatasourceError as e:
            logger.warning(f"Query {query.refId} failed: {e.message}")
            return query.refId, DataResponse(error=e.message, status=e.status)
        except Exception as e:
            logger.exception(f"Query {query.refId} failed unexpectedly")
            return query.refId, DataResponse(error=f"internal error: {e}", status=500)
        return query.refId, DataResponse(frames=[frame])

    async def query(self, query: DataQuery) -> Frame:
        """
        Execute a single sub-query.

        Raises:
            DatasourceError: any failure of this sub-query
        """
        request = MetricRequest.from_query(query)
        logger.info(
            f"Query {query.refId}: {request.metric_type.value} "
            f"program={request.program_id} instruction={request.instruction_name!r}"
        )

        shape = upstream_shape_for(request.metric_type)
        bucket_seconds = resolve_bucket_seconds(
            request.time_from,
            request.time_to,
            request.interval_seconds,
            self.settings.max_buckets,
        )
        url = build_metrics_url(
            self.settings.url,
            shape,
            request.program_id,
            request.instruction_name,
            request.time_from,
            request.time_to,
            bucket_seconds,
        )
        logger.info(f"Query {query.refId}: GET {url}")

        body = await self.fetcher.fetch(url, self._headers())
        series = decode(body, shape)
        return Frame.from_columns(transform(series, request))

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
        }

    async def check_health(self) -> HealthResponse:
        """Check that the datasource is configured"""
        missing = []
        if not self.settings.url:
            missing.append("url")
        if not self.settings.api_key:
            missing.append("apiKey")
        if missing:
            return HealthResponse(
                status="error",
                message=f"Data source is missing configuration: {', '.join(missing)}",
            )
        return HealthResponse(status="ok", message="Data source is working")

    async def dispose(self) -> None:
        """Release upstream connections"""
        await self.fetcher.close()

"""
Upstream Fetcher

Issues GET requests against the upstream metrics API.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Mapping, Optional

import aiohttp

from carpool.backend.config import DatasourceSettings
from carpool.backend.errors import UpstreamStatusError, UpstreamTransportError

logger = logging.getLogger(__name__)


class MetricsFetcher(ABC):
    """Abstract interface for fetching upstream payloads"""

    @abstractmethod
    async def fetch(self, url: str, headers: Mapping[str, str]) -> bytes:
        """
        GET the url and return the response body.

        Raises:
            UpstreamTransportError: the request could not complete
            UpstreamStatusError: the response status is not 200
        """
        pass

    async def close(self) -> None:
        """Release any held connections"""
        pass


class AiohttpMetricsFetcher(MetricsFetcher):
    """Fetcher backed by a shared aiohttp session"""

    def __init__(self, settings: DatasourceSettings):
        self.settings = settings
        self._session: Optional[aiohttp.ClientSession] = None

    def _timeout(self) -> aiohttp.ClientTimeout:
        s = self.settings
        return aiohttp.ClientTimeout(
            total=s.read_timeout_s + s.write_timeout_s,
            sock_connect=s.write_timeout_s,
            sock_read=s.read_timeout_s,
        )

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.settings.max_connections,
                ttl_dns_cache=self.settings.dns_cache_ttl_s,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=self._timeout(),
            )
        return self._session

    async def fetch(self, url: str, headers: Mapping[str, str]) -> bytes:
        session = self._get_session()
        try:
            async with session.get(url, headers=dict(headers)) as resp:
                if resp.status != 200:
                    raise UpstreamStatusError(resp.status)
                return await resp.read()
        except asyncio.TimeoutError as e:
            raise UpstreamTransportError("timeout") from e
        except aiohttp.ClientError as e:
            raise UpstreamTransportError(str(e) or e.__class__.__name__) from e

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
            logger.info("Upstream session closed")
        self._session = None

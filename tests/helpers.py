"""Shared builders and fakes for the datasource tests"""

import json
from typing import Any, Dict, List, Mapping, Optional, Union

from carpool.backend.errors import UpstreamStatusError
from carpool.backend.services import MetricsFetcher

T0 = "2024-01-01T00:00:00Z"
T1 = "2024-01-01T00:01:00Z"
T2 = "2024-01-01T00:02:00Z"
T_END = "2024-01-01T01:00:00Z"


def invocation(time: str, count: int, status: str = "success", name: str = "transfer") -> Dict[str, Any]:
    return {"time": time, "count": count, "status": status, "instructionName": name}


def program_event(time: str, count: int, authority: str, status: str, action: str) -> Dict[str, Any]:
    return {"time": time, "count": count, "authority": authority, "status": status, "action": action}


def body(buckets: List[Dict[str, Any]]) -> bytes:
    return json.dumps({"buckets": buckets}).encode()


def data_query(
    query_type: str,
    ref_id: str = "A",
    program_id: str = "Prog1",
    interval_ms: int = 60000,
    **payload: Any,
) -> Dict[str, Any]:
    return {
        "refId": ref_id,
        "timeRange": {"from": T0, "to": T_END},
        "intervalMs": interval_ms,
        "payload": {"queryType": query_type, "programId": program_id, **payload},
    }


class FakeFetcher(MetricsFetcher):
    """Answers by program id; records every call"""

    def __init__(self, responses: Optional[Mapping[str, Union[bytes, Exception]]] = None):
        self.responses = dict(responses or {})
        self.calls: List[tuple] = []
        self.closed = False

    async def fetch(self, url: str, headers: Mapping[str, str]) -> bytes:
        self.calls.append((url, dict(headers)))
        for program_id, response in self.responses.items():
            if f"/instructions/{program_id}/" in url:
                if isinstance(response, Exception):
                    raise response
                return response
        raise UpstreamStatusError(404)

    async def close(self) -> None:
        self.closed = True

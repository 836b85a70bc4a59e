"""
Datasource configuration

Settings are handed over as plain fields: either the datasource JSON plus
its decrypted secure JSON, or environment variables.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_CARPOOL_HOST = "https://api.carpool.dev"


class DatasourceSettings(BaseModel):
    """Configuration for one datasource instance"""

    url: str = Field(default=DEFAULT_CARPOOL_HOST, description="Upstream metrics API host")
    max_buckets: int = Field(
        default=1000, ge=1, description="Maximum number of buckets per upstream query"
    )
    api_key: str = Field(default="", repr=False, description="Bearer credential")

    # HTTP client configuration
    read_timeout_s: float = Field(default=15.0, gt=0, description="Upstream read timeout")
    write_timeout_s: float = Field(default=15.0, gt=0, description="Upstream write timeout")
    max_connections: int = Field(default=4096, ge=1, description="Connection pool size")
    dns_cache_ttl_s: int = Field(default=3600, ge=0, description="DNS cache duration")

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_instance(
        cls,
        json_data: Mapping[str, Any],
        secure_json_data: Optional[Mapping[str, str]] = None,
    ) -> "DatasourceSettings":
        """
        Build settings from the datasource JSON and its decrypted secure JSON.

        Args:
            json_data: Datasource options ({"url", "maxBuckets"})
            secure_json_data: Decrypted secrets ({"apiKey"})
        """
        values: Dict[str, Any] = {}
        if json_data.get("url"):
            values["url"] = json_data["url"]
        if json_data.get("maxBuckets") is not None:
            values["max_buckets"] = json_data["maxBuckets"]
        if secure_json_data and secure_json_data.get("apiKey"):
            values["api_key"] = secure_json_data["apiKey"]
        return cls(**values)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DatasourceSettings":
        """Build settings from CARPOOL_* environment variables"""
        environ = os.environ if environ is None else environ
        mapping = {
            "CARPOOL_URL": "url",
            "CARPOOL_MAX_BUCKETS": "max_buckets",
            "CARPOOL_API_KEY": "api_key",
            "CARPOOL_READ_TIMEOUT_S": "read_timeout_s",
            "CARPOOL_WRITE_TIMEOUT_S": "write_timeout_s",
        }
        values = {field: environ[var] for var, field in mapping.items() if environ.get(var)}
        return cls(**values)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> DatasourceSettings:
    """
    Load settings for the running service.

    When CARPOOL_DATASOURCE_JSON names a file holding the datasource
    instance settings ({"jsonData": {...}, "secureJsonData": {...}}),
    those are used; otherwise settings come from CARPOOL_* variables.
    """
    environ = os.environ if environ is None else environ
    path = environ.get("CARPOOL_DATASOURCE_JSON")
    if not path:
        return DatasourceSettings.from_env(environ)

    instance = json.loads(Path(path).read_text())
    return DatasourceSettings.from_instance(
        instance.get("jsonData") or {},
        instance.get("secureJsonData") or {},
    )

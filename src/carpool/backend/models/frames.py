"""
Models for query results
"""

from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field, model_validator


class FrameMeta(BaseModel):
    """Frame type information"""

    type: str = Field(default="timeseries-long", description="Frame type")
    typeVersion: List[int] = Field(default_factory=lambda: [0, 1])


class FrameField(BaseModel):
    """A single named column"""

    name: str = Field(..., description="Column name")
    values: List[Any] = Field(default_factory=list, description="Column values")


class Frame(BaseModel):
    """A set of named, equal-length columns"""

    name: str = Field(default="Long")
    meta: FrameMeta = Field(default_factory=FrameMeta)
    fields: List[FrameField] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_lengths(self) -> "Frame":
        lengths = {len(f.values) for f in self.fields}
        if len(lengths) > 1:
            raise ValueError(f"frame fields have different lengths: {sorted(lengths)}")
        return self

    @classmethod
    def from_columns(cls, columns: Dict[str, Sequence[Any]], name: str = "Long") -> "Frame":
        return cls(
            name=name,
            fields=[FrameField(name=k, values=list(v)) for k, v in columns.items()],
        )

    def column(self, name: str) -> List[Any]:
        for f in self.fields:
            if f.name == name:
                return f.values
        raise KeyError(name)


class DataResponse(BaseModel):
    """Result of one sub-query"""

    frames: List[Frame] = Field(default_factory=list)
    error: Optional[str] = Field(default=None, description="Error message if the query failed")
    status: int = Field(default=200, description="Status of this sub-query")


class QueryDataResponse(BaseModel):
    """Results keyed by the originating refId"""

    results: Dict[str, DataResponse] = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Result of a datasource health check"""

    status: str = Field(..., description="ok or error")
    message: str = Field(..., description="Human readable status")

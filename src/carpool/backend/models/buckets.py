"""
Models for upstream bucket payloads
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class InvocationBucket(BaseModel):
    """Invocation count for one (time, instruction, status)"""

    time: datetime
    count: int
    status: str = ""
    instructionName: str = ""


class SignerBucket(BaseModel):
    """Unique signer count for one time bucket"""

    time: datetime
    count: int


class ProgramEventBucket(BaseModel):
    """Program deployment events for one time bucket"""

    time: datetime
    count: int
    authority: str = ""
    status: str = ""
    action: str = ""


class InvocationsResponse(BaseModel):
    buckets: List[InvocationBucket] = Field(..., description="Invocation buckets")


class SignersResponse(BaseModel):
    buckets: List[SignerBucket] = Field(..., description="Signer count buckets")


class ProgramEventsResponse(BaseModel):
    buckets: List[ProgramEventBucket] = Field(..., description="Program event buckets")

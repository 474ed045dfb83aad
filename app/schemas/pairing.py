from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PairingRequestRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: int
    pairing_code: str
    expires_at: datetime
    node_id: Optional[UUID] = None
    created_at: datetime


class PairingClaim(BaseModel):
    code: str = Field(min_length=1)
    node_name: Optional[str] = None

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from app.models.node import CapabilityStatus, ConnectionHealth, NodeStatus


class NodeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: int
    name: Optional[str] = None
    status: NodeStatus
    connection_health: ConnectionHealth
    capabilities: List[str]
    last_active_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class NodeCapabilityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    node_id: UUID
    capability_key: str
    status: CapabilityStatus
    description: Optional[str] = None
    configurations: Dict[str, Any]
    created_at: datetime
    updated_at: datetime


class NodeCapabilityUpsert(BaseModel):
    status: Optional[CapabilityStatus] = None
    description: Optional[str] = None
    configurations: Optional[Dict[str, Any]] = None


class NodeCapabilityUpdate(BaseModel):
    status: Optional[CapabilityStatus] = None
    description: Optional[str] = None
    configurations: Optional[Dict[str, Any]] = None

    # May be omitted, but not cleared
    @field_validator("status", "configurations")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v


class NodeUpdate(BaseModel):
    name: Optional[str] = None
    status: Optional[NodeStatus] = None
    connection_health: Optional[ConnectionHealth] = None
    capabilities: Optional[List[str]] = None
    last_active_at: Optional[datetime] = None

    @field_validator("status", "connection_health", "capabilities")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    @field_validator("last_active_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class CapabilityInfo(BaseModel):
    key: str
    description: str

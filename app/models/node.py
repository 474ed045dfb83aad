from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from app.core.time import utcnow


class NodeStatus(str, Enum):
    paired = "paired"
    offline = "offline"
    error = "error"


class ConnectionHealth(str, Enum):
    healthy = "healthy"
    degraded = "degraded"
    unknown = "unknown"
    offline = "offline"


class CapabilityStatus(str, Enum):
    enabled = "enabled"
    disabled = "disabled"
    pending_approval = "pending_approval"


class Node(SQLModel, table=True):
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: Optional[str] = None
    status: NodeStatus = Field(default=NodeStatus.paired)
    connection_health: ConnectionHealth = Field(default=ConnectionHealth.unknown)
    # Keys granted at creation, in registry order
    capabilities: List[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    last_active_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow}
    )


class NodeCapability(SQLModel, table=True):
    __tablename__ = "node_capability"
    __table_args__ = (
        UniqueConstraint("node_id", "capability_key", name="uq_node_capability_key"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    node_id: UUID = Field(foreign_key="node.id", index=True)
    capability_key: str = Field(index=True)
    status: CapabilityStatus = Field(default=CapabilityStatus.enabled)
    description: Optional[str] = None
    configurations: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSON, nullable=False)
    )
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(
        default_factory=utcnow, sa_column_kwargs={"onupdate": utcnow}
    )

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from app.core.time import utcnow


class PairingRequest(SQLModel, table=True):
    __tablename__ = "pairing_request"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    pairing_code: str = Field(max_length=8, index=True)
    expires_at: datetime
    # Null until claimed; set exactly once
    node_id: Optional[UUID] = Field(default=None, foreign_key="node.id")
    created_at: datetime = Field(default_factory=utcnow)

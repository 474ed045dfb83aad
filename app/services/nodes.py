"""
Node provisioning and capability management.

Functions here take an explicit session and owner. Writers that are part of a
larger unit of work (``create_node``, ``seed_default_capabilities`` and
``upsert_capability(commit=False)``) only flush; the caller owns the commit.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from app.core.capabilities import get_capability_description, get_default_capability_keys
from app.core.config import settings
from app.core.exceptions import (
    CapabilityNotFound,
    NodeNotFound,
    PartialProvisioningFailure,
)
from app.core.time import utcnow
from app.models.node import (
    CapabilityStatus,
    ConnectionHealth,
    Node,
    NodeCapability,
    NodeStatus,
)
from app.models.pairing import PairingRequest
from app.models.user import User

logger = logging.getLogger(__name__)

_CAPABILITY_FIELDS = ("status", "description", "configurations")
_NODE_FIELDS = ("name", "status", "connection_health", "capabilities", "last_active_at")


def create_node(
    session: Session,
    owner: User,
    name: Optional[str] = None,
    status: NodeStatus = NodeStatus.paired,
    connection_health: ConnectionHealth = ConnectionHealth.healthy,
    capabilities: Optional[Iterable[str]] = None,
) -> Node:
    node = Node(
        user_id=owner.id,
        name=name,
        status=status,
        connection_health=connection_health,
        capabilities=list(capabilities) if capabilities is not None else [],
    )
    session.add(node)
    session.flush()
    logger.info("Created node %s for user %s", node.id, owner.id)
    return node


def _commit(session: Session) -> None:
    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        raise


def _get_capability(session: Session, node_id: UUID, capability_key: str) -> Optional[NodeCapability]:
    return session.exec(
        select(NodeCapability).where(
            NodeCapability.node_id == node_id,
            NodeCapability.capability_key == capability_key,
        )
    ).first()


def upsert_capability(
    session: Session,
    node_id: UUID,
    capability_key: str,
    status: Optional[CapabilityStatus] = None,
    description: Optional[str] = None,
    configurations: Optional[Dict[str, Any]] = None,
    commit: bool = True,
) -> NodeCapability:
    """
    Create or overwrite the capability row keyed by (node_id, capability_key).

    Omitted values fall back to ``enabled``, the registry description and an
    empty configuration, on both the insert and the update path.
    """
    values = {
        "status": status or CapabilityStatus.enabled,
        "description": description if description is not None else get_capability_description(capability_key),
        "configurations": dict(configurations) if configurations is not None else {},
    }

    capability = _get_capability(session, node_id, capability_key)
    if capability is None:
        try:
            with session.begin_nested():
                capability = NodeCapability(node_id=node_id, capability_key=capability_key, **values)
                session.add(capability)
        except IntegrityError:
            # A concurrent writer inserted the same key; update its row instead
            capability = _get_capability(session, node_id, capability_key)
            if capability is None:
                raise
            logger.debug("Capability %s on node %s inserted concurrently", capability_key, node_id)

    for field in _CAPABILITY_FIELDS:
        setattr(capability, field, values[field])
    session.add(capability)

    if commit:
        session.commit()
        session.refresh(capability)
    else:
        session.flush()
    return capability


def seed_default_capabilities(
    session: Session,
    node_id: UUID,
    attempts: Optional[int] = None,
) -> List[NodeCapability]:
    """
    Upsert every default capability on a freshly created node.

    Each key is retried inside its own savepoint; keys still failing after
    ``attempts`` tries raise PartialProvisioningFailure.
    """
    if attempts is None:
        attempts = settings.CAPABILITY_SEED_ATTEMPTS

    seeded = []
    missing = []
    for key in get_default_capability_keys():
        for attempt in range(1, attempts + 1):
            try:
                with session.begin_nested():
                    capability = upsert_capability(
                        session,
                        node_id,
                        key,
                        status=CapabilityStatus.enabled,
                        description=get_capability_description(key),
                        commit=False,
                    )
            except SQLAlchemyError as exc:
                logger.warning(
                    "Seeding capability %s on node %s failed (attempt %d/%d): %s",
                    key, node_id, attempt, attempts, exc,
                )
                continue
            seeded.append(capability)
            break
        else:
            missing.append(key)

    if missing:
        logger.error("Node %s is missing capabilities after seeding: %s", node_id, missing)
        raise PartialProvisioningFailure(node_id, missing)
    return seeded


def list_nodes(session: Session, owner: User) -> List[Node]:
    statement = (
        select(Node)
        .where(Node.user_id == owner.id)
        .order_by(
            col(Node.last_active_at).desc().nulls_last(),
            col(Node.created_at).desc(),
        )
    )
    return list(session.exec(statement).all())


def get_node(session: Session, owner: User, node_id: UUID) -> Optional[Node]:
    node = session.get(Node, node_id)
    if node is None or node.user_id != owner.id:
        return None
    return node


def _require_node(session: Session, owner: User, node_id: UUID) -> Node:
    node = get_node(session, owner, node_id)
    if node is None:
        raise NodeNotFound()
    return node


def update_node(
    session: Session,
    owner: User,
    node_id: UUID,
    changes: Dict[str, Any],
) -> Node:
    """Partially update a node; keys absent from ``changes`` are kept."""
    node = _require_node(session, owner, node_id)
    for field in _NODE_FIELDS:
        if field in changes:
            setattr(node, field, changes[field])
    session.add(node)
    _commit(session)
    session.refresh(node)
    return node


def _detach_pairing_requests(session: Session, node_id: UUID, now: datetime) -> None:
    # Requests are kept; expiring them first keeps them unclaimable once node_id is cleared
    table = PairingRequest.__table__
    connection = session.connection()
    connection.execute(
        update(table)
        .where(table.c.node_id == node_id, table.c.expires_at > now)
        .values(expires_at=now)
    )
    connection.execute(
        update(table).where(table.c.node_id == node_id).values(node_id=None)
    )


def delete_node(session: Session, owner: User, node_id: UUID) -> None:
    """Unpair a node: drop it with its capability rows and detach its pairing requests."""
    node = _require_node(session, owner, node_id)
    try:
        _detach_pairing_requests(session, node.id, utcnow())
        for capability in session.exec(select(NodeCapability).where(NodeCapability.node_id == node.id)).all():
            session.delete(capability)
        session.flush()
        session.delete(node)
        session.commit()
    except Exception:
        session.rollback()
        raise
    logger.info("Deleted node %s for user %s", node_id, owner.id)


def list_capabilities(session: Session, owner: User, node_id: UUID) -> List[NodeCapability]:
    node = _require_node(session, owner, node_id)
    statement = (
        select(NodeCapability)
        .where(NodeCapability.node_id == node.id)
        .order_by(col(NodeCapability.capability_key))
    )
    return list(session.exec(statement).all())


def get_capability(session: Session, owner: User, node_id: UUID, capability_key: str) -> NodeCapability:
    node = _require_node(session, owner, node_id)
    capability = _get_capability(session, node.id, capability_key)
    if capability is None:
        raise CapabilityNotFound()
    return capability


def update_capability(
    session: Session,
    owner: User,
    node_id: UUID,
    capability_key: str,
    changes: Dict[str, Any],
) -> NodeCapability:
    """Partially update an existing capability; keys absent from ``changes`` are kept."""
    capability = get_capability(session, owner, node_id, capability_key)
    for field in _CAPABILITY_FIELDS:
        if field in changes:
            setattr(capability, field, changes[field])
    session.add(capability)
    _commit(session)
    session.refresh(capability)
    return capability

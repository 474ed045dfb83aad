from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, HTTPException

from app.api import deps
from app.schemas.msg import Msg
from app.schemas.node import (
    NodeCapabilityRead,
    NodeCapabilityUpdate,
    NodeCapabilityUpsert,
    NodeRead,
    NodeUpdate,
)
from app.services import nodes

router = APIRouter()


@router.get("", response_model=List[NodeRead])
def list_nodes(
    session: deps.SessionDep,
    current_user: deps.CurrentUser,
) -> Any:
    return nodes.list_nodes(session, current_user)


@router.get("/{node_id}", response_model=NodeRead)
def get_node(
    node_id: UUID,
    session: deps.SessionDep,
    current_user: deps.CurrentUser,
) -> Any:
    node = nodes.get_node(session, current_user, node_id)
    if not node:
        raise HTTPException(status_code=404, detail="Node not found")
    return node


@router.patch("/{node_id}", response_model=NodeRead)
def update_node(
    node_id: UUID,
    payload: NodeUpdate,
    session: deps.SessionDep,
    current_user: deps.CurrentUser,
) -> Any:
    """
    Rename a node or record its status, health and last activity.
    """
    return nodes.update_node(session, current_user, node_id, payload.model_dump(exclude_unset=True))


@router.delete("/{node_id}", response_model=Msg)
def delete_node(
    node_id: UUID,
    session: deps.SessionDep,
    current_user: deps.CurrentUser,
) -> Any:
    """
    Unpair a node.
    """
    nodes.delete_node(session, current_user, node_id)
    return {"message": "Node removed"}


@router.get("/{node_id}/capabilities", response_model=List[NodeCapabilityRead])
def list_capabilities(
    node_id: UUID,
    session: deps.SessionDep,
    current_user: deps.CurrentUser,
) -> Any:
    return nodes.list_capabilities(session, current_user, node_id)


@router.get("/{node_id}/capabilities/{capability_key}", response_model=NodeCapabilityRead)
def get_capability(
    node_id: UUID,
    capability_key: str,
    session: deps.SessionDep,
    current_user: deps.CurrentUser,
) -> Any:
    return nodes.get_capability(session, current_user, node_id, capability_key)


@router.put("/{node_id}/capabilities/{capability_key}", response_model=NodeCapabilityRead)
def upsert_capability(
    node_id: UUID,
    capability_key: str,
    payload: NodeCapabilityUpsert,
    session: deps.SessionDep,
    current_user: deps.CurrentUser,
) -> Any:
    """
    Create or replace a capability on a node. Omitted fields take their defaults.
    """
    if not nodes.get_node(session, current_user, node_id):
        raise HTTPException(status_code=404, detail="Node not found")
    return nodes.upsert_capability(
        session,
        node_id,
        capability_key,
        status=payload.status,
        description=payload.description,
        configurations=payload.configurations,
    )


@router.patch("/{node_id}/capabilities/{capability_key}", response_model=NodeCapabilityRead)
def update_capability(
    node_id: UUID,
    capability_key: str,
    payload: NodeCapabilityUpdate,
    session: deps.SessionDep,
    current_user: deps.CurrentUser,
) -> Any:
    return nodes.update_capability(
        session,
        current_user,
        node_id,
        capability_key,
        payload.model_dump(exclude_unset=True),
    )

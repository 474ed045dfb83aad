from typing import Any

from fastapi import APIRouter

from app.api import deps
from app.schemas.node import NodeRead
from app.schemas.pairing import PairingClaim, PairingRequestRead
from app.services import pairing

router = APIRouter()


@router.post("/start", response_model=PairingRequestRead)
def start_pairing(
    session: deps.SessionDep,
    current_user: deps.CurrentUser,
) -> Any:
    """
    Issue a one-time pairing code for the current user, valid for ten minutes.
    """
    return pairing.start_pairing(session, current_user)


@router.post("/claim", response_model=NodeRead)
def claim_pairing(
    session: deps.SessionDep,
    current_user: deps.CurrentUser,
    claim: PairingClaim,
) -> Any:
    """
    Claim a pairing code and create a paired node with the default capabilities.
    """
    return pairing.claim_pairing(session, current_user, claim.code, node_name=claim.node_name)

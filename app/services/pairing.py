"""
Pairing codes: issue a short-lived code for an account, then claim it to
create a paired node.

A claim is a single transaction: the node insert, the conditional write that
consumes the request, and the capability seeding either all commit or all roll
back. The consuming write only matches a row that is still unclaimed and
unexpired, so when two claims race on the same code the loser updates zero rows
and gets InvalidOrExpiredCode instead of a second node.
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import Session, col, select

from app.core.capabilities import get_default_capability_keys
from app.core.exceptions import InvalidOrExpiredCode, Unauthenticated
from app.core.time import utcnow
from app.models.node import ConnectionHealth, Node, NodeStatus
from app.models.pairing import PairingRequest
from app.models.user import User
from app.services import nodes

logger = logging.getLogger(__name__)

# No 0/O or 1/I
PAIRING_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
PAIRING_CODE_LENGTH = 8
PAIRING_CODE_TTL = timedelta(minutes=10)
DEFAULT_NAME_SUFFIX_LENGTH = 6


def generate_code(length=PAIRING_CODE_LENGTH):
    return ''.join(secrets.choice(PAIRING_CODE_ALPHABET) for _ in range(length))


def _masked(code: str) -> str:
    return "*" * max(len(code) - 2, 0) + code[-2:]


def _require_caller(caller: Optional[User]) -> User:
    if caller is None or caller.id is None:
        raise Unauthenticated()
    return caller


def start_pairing(session: Session, caller: Optional[User], now: Optional[datetime] = None) -> PairingRequest:
    """
    Issue a fresh pairing code for the caller, valid for ten minutes.

    Earlier outstanding codes of the same account stay valid.
    """
    caller = _require_caller(caller)
    now = now or utcnow()

    request = PairingRequest(
        user_id=caller.id,
        pairing_code=generate_code(),
        expires_at=now + PAIRING_CODE_TTL,
        created_at=now,
    )
    session.add(request)
    session.commit()
    session.refresh(request)
    logger.info(
        "Issued pairing request %s (code %s) for user %s",
        request.id, _masked(request.pairing_code), caller.id,
    )
    return request


def find_claimable_request(session: Session, caller: User, code: str, now: datetime) -> Optional[PairingRequest]:
    statement = select(PairingRequest).where(
        PairingRequest.pairing_code == code,
        PairingRequest.user_id == caller.id,
        col(PairingRequest.node_id).is_(None),
        col(PairingRequest.expires_at) > now,
    )
    return session.exec(statement).first()


def consume_request(session: Session, request_id: UUID, node_id: UUID, now: datetime) -> bool:
    """Mark a request as claimed by ``node_id``; False if it was no longer claimable."""
    table = PairingRequest.__table__
    statement = (
        update(table)
        .where(
            table.c.id == request_id,
            table.c.node_id.is_(None),
            table.c.expires_at > now,
        )
        .values(node_id=node_id)
    )
    result = session.connection().execute(statement)
    return result.rowcount == 1


def claim_pairing(
    session: Session,
    caller: Optional[User],
    code: str,
    node_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Node:
    """
    Claim an outstanding pairing code and return the newly paired node.

    The code is trimmed and compared exactly (no case folding). Wrong code,
    another account's code, an already claimed code and an expired code all
    raise the same InvalidOrExpiredCode.
    """
    caller = _require_caller(caller)
    now = now or utcnow()
    code = (code or "").strip()

    request = find_claimable_request(session, caller, code, now)
    if request is None:
        logger.info("Rejected pairing claim by user %s (code %s)", caller.id, _masked(code))
        raise InvalidOrExpiredCode()
    request_id = request.id

    try:
        node = nodes.create_node(
            session,
            caller,
            name=node_name if node_name is not None else f"Node {code[-DEFAULT_NAME_SUFFIX_LENGTH:]}",
            status=NodeStatus.paired,
            connection_health=ConnectionHealth.healthy,
            capabilities=get_default_capability_keys(),
        )
        if not consume_request(session, request_id, node.id, now):
            logger.warning("Pairing request %s was claimed concurrently", request_id)
            raise InvalidOrExpiredCode()
        nodes.seed_default_capabilities(session, node.id)
        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(node)
    logger.info("Pairing request %s claimed by node %s", request_id, node.id)
    return node

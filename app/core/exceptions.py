"""
Errors raised by the pairing and node services.

Each error carries the HTTP status and detail the API layer renders, so the
routers never have to translate them one by one.
"""
from typing import Iterable, Optional
from uuid import UUID


class PairingServiceError(Exception):
    status_code = 500
    detail = "Pairing service error"

    def __init__(self, detail: Optional[str] = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class Unauthenticated(PairingServiceError):
    status_code = 401
    detail = "Not authenticated"


class InvalidOrExpiredCode(PairingServiceError):
    # Deliberately the same message for wrong code, foreign account,
    # already claimed and expired.
    status_code = 400
    detail = "Invalid or expired pairing code"


class NodeNotFound(PairingServiceError):
    status_code = 404
    detail = "Node not found"


class CapabilityNotFound(PairingServiceError):
    status_code = 404
    detail = "Capability not found"


class PartialProvisioningFailure(PairingServiceError):
    status_code = 500

    def __init__(self, node_id: UUID, missing_keys: Iterable[str]):
        self.node_id = node_id
        self.missing_keys = list(missing_keys)
        super().__init__(
            f"Node {node_id} could not be provisioned with: {', '.join(self.missing_keys)}"
        )

from typing import Any, List

from fastapi import APIRouter

from app.core.capabilities import get_capability_description, get_default_capability_keys
from app.schemas.node import CapabilityInfo

router = APIRouter()


@router.get("", response_model=List[CapabilityInfo])
def default_capabilities() -> Any:
    """
    Capabilities granted to every newly paired node, in display order.
    """
    return [
        {"key": key, "description": get_capability_description(key)}
        for key in get_default_capability_keys()
    ]


@router.get("/{key}", response_model=CapabilityInfo)
def describe_capability(key: str) -> Any:
    return {"key": key, "description": get_capability_description(key)}

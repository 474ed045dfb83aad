"""
Static registry of the capabilities every newly paired node is granted.
"""
from typing import List

DEFAULT_CAPABILITY_KEYS = (
    "voice_wake",
    "talk_mode",
    "remote_exec",
    "browser_proxy",
    "camera_capture",
)

CAPABILITY_DESCRIPTIONS = {
    "voice_wake": "Wake word detection",
    "talk_mode": "Voice conversation mode",
    "remote_exec": "Remote command execution",
    "browser_proxy": "Browser/CDP proxy",
    "camera_capture": "Camera and screen capture",
}


def get_default_capability_keys() -> List[str]:
    return list(DEFAULT_CAPABILITY_KEYS)


def get_capability_description(key: str) -> str:
    """Human readable text for a capability key; unknown keys are returned as-is."""
    return CAPABILITY_DESCRIPTIONS.get(key, key)

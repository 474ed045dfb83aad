from app.core.capabilities import (
    CAPABILITY_DESCRIPTIONS,
    get_capability_description,
    get_default_capability_keys,
)
from app.core.config import settings


def test_default_keys_order():
    assert get_default_capability_keys() == [
        "voice_wake",
        "talk_mode",
        "remote_exec",
        "browser_proxy",
        "camera_capture",
    ]


def test_default_keys_returns_fresh_list():
    keys = get_default_capability_keys()
    keys.append("extra")
    assert "extra" not in get_default_capability_keys()


def test_known_descriptions():
    assert get_capability_description("voice_wake") == "Wake word detection"
    assert get_capability_description("talk_mode") == "Voice conversation mode"
    assert get_capability_description("remote_exec") == "Remote command execution"
    assert get_capability_description("browser_proxy") == "Browser/CDP proxy"
    assert get_capability_description("camera_capture") == "Camera and screen capture"


def test_every_default_key_is_described():
    for key in get_default_capability_keys():
        assert CAPABILITY_DESCRIPTIONS[key]


def test_unknown_key_falls_back_to_key():
    assert get_capability_description("unknown_key") == "unknown_key"
    assert get_capability_description("") == ""


def test_list_default_capabilities_endpoint(client):
    resp = client.get(f"{settings.API_V1_STR}/capabilities")
    assert resp.status_code == 200
    body = resp.json()
    assert [item["key"] for item in body] == get_default_capability_keys()
    assert body[0] == {"key": "voice_wake", "description": "Wake word detection"}


def test_describe_capability_endpoint(client):
    resp = client.get(f"{settings.API_V1_STR}/capabilities/remote_exec")
    assert resp.status_code == 200
    assert resp.json()["description"] == "Remote command execution"

    resp = client.get(f"{settings.API_V1_STR}/capabilities/unknown_key")
    assert resp.status_code == 200
    assert resp.json() == {"key": "unknown_key", "description": "unknown_key"}

"""Tests for LiveKit token minting."""

import pytest
from livekit import api

from quickroom.app_config import AppEnvironConfig
from quickroom.services.integrations.livekit_service import LivekitService
from quickroom.utils.app_errors import AppError, AppErrorCode

API_KEY = "APItestkey"
API_SECRET = "test-secret-0123456789abcdef0123456789abcdef"


def _service(**overrides) -> LivekitService:
    values = {
        "DEMO_MODE": False,
        "LIVEKIT_URL": "wss://rtc.example.test",
        "LIVEKIT_API_KEY": API_KEY,
        "LIVEKIT_API_SECRET": API_SECRET,
    }
    values.update(overrides)
    return LivekitService(cfg=AppEnvironConfig(**values))


class TestCreateAccessToken:
    def test_token_grants_room_join(self):
        token = _service().create_access_token(identity="alice", room="standup", name="Alice")

        claims = api.TokenVerifier(API_KEY, API_SECRET).verify(token)
        assert claims.identity == "alice"
        assert claims.name == "Alice"
        assert claims.video.room_join is True
        assert claims.video.room == "standup"

    def test_demo_mode_returns_placeholder(self):
        token = _service(DEMO_MODE=True).create_access_token(identity="alice", room="standup")

        assert token == "DEMO_RTC_TOKEN::alice::standup"

    def test_missing_credentials_rejected(self):
        service = _service(LIVEKIT_API_KEY=None)

        with pytest.raises(AppError) as exc_info:
            service.create_access_token(identity="alice", room="standup")

        assert exc_info.value.errcode == AppErrorCode.E_INVALID_REQUEST.value


class TestUrl:
    def test_url_configured(self):
        assert _service().url == "wss://rtc.example.test"

    def test_missing_url_rejected(self):
        with pytest.raises(AppError):
            _ = _service(LIVEKIT_URL=None).url

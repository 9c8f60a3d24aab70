"""LiveKit helper service.

This module provides a thin wrapper around the `livekit-api` package.

Based on the official LiveKit Python SDK:
https://github.com/livekit/python-sdks

Usage:
    from quickroom.services.integrations.livekit_service import livekit_service

    token = livekit_service.create_access_token(
        identity="user-123",
        room="my-room",
        name="John Doe"
    )
"""

from __future__ import annotations

from livekit import api
from loguru import logger

from quickroom.app_config import AppEnvironConfig, get_app_environ_config
from quickroom.utils.app_errors import AppError, AppErrorCode


class LivekitService:
    """Service wrapper for LiveKit token minting (livekit-api package)."""

    def __init__(self, cfg: AppEnvironConfig | None = None) -> None:
        self._cfg = cfg or get_app_environ_config()
        self._demo_mode = bool(getattr(self._cfg, "DEMO_MODE", False))
        logger.info("LivekitService initialized")

    @property
    def url(self) -> str:
        """LiveKit server URL rooms are joined on.

        Raises:
            AppError: If LIVEKIT_URL is not configured
        """
        url = self._cfg.LIVEKIT_URL
        if not url:
            logger.error("LIVEKIT_URL not configured")
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="LIVEKIT_URL must be configured. Set it in env.local or environment variables.",
            )
        return url

    def create_access_token(
        self,
        identity: str,
        room: str | None = None,
        name: str | None = None,
        metadata: str | None = None,
        can_publish: bool = True,
        can_subscribe: bool = True,
        can_publish_data: bool = True,
    ) -> str:
        """Create and return a LiveKit JWT access token.

        Args:
            identity: Unique identity for the participant
            room: Room name to grant access to (optional)
            name: Display name for the participant (optional)
            metadata: Custom metadata string (optional)
            can_publish: Grant permission to publish tracks (default: True)
            can_subscribe: Grant permission to subscribe to tracks (default: True)
            can_publish_data: Grant permission to publish data (default: True)

        Returns:
            JWT token string

        Raises:
            AppError: If LIVEKIT_API_KEY or LIVEKIT_API_SECRET is not configured
        """
        if self._demo_mode:
            # Demo-safe token: deterministic placeholder (NOT a real JWT).
            room_part = room or "any-room"
            return f"DEMO_RTC_TOKEN::{identity}::{room_part}"

        api_key = self._cfg.LIVEKIT_API_KEY
        api_secret = self._cfg.LIVEKIT_API_SECRET

        if not api_key or not api_secret:
            logger.error("LIVEKIT_API_KEY or LIVEKIT_API_SECRET not configured")
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="RTC provider credentials must be configured. Set them in env.local or environment variables.",
            )

        logger.info(
            f"Creating LiveKit access token for identity={identity}, room={room}, name={name}"
        )

        token = api.AccessToken(api_key, api_secret).with_identity(identity)

        if name:
            token = token.with_name(name)

        grants = api.VideoGrants(
            room_join=True,
            room=room or "",
            can_publish=can_publish,
            can_subscribe=can_subscribe,
            can_publish_data=can_publish_data,
        )
        token = token.with_grants(grants)

        if metadata:
            token = token.with_metadata(metadata)

        return token.to_jwt()


livekit_service = LivekitService()

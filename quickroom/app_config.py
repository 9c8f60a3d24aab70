from pydantic import BaseModel

from quickroom.shared.config import config


class AppEnvironConfig(BaseModel):
    DEBUG: bool = (config.get("DEBUG") or "false").strip().lower() == "true"

    # Demo switch: when enabled, token minting returns placeholders instead of real JWTs.
    DEMO_MODE: bool = (config.get("DEMO_MODE") or "false").strip().lower() == "true"

    # LiveKit configuration
    LIVEKIT_URL: str | None = (config.get("LIVEKIT_URL") or "").strip() or None
    LIVEKIT_API_KEY: str | None = (config.get("LIVEKIT_API_KEY") or "").strip() or None
    LIVEKIT_API_SECRET: str | None = (config.get("LIVEKIT_API_SECRET") or "").strip() or None

    # Room configuration
    DEFAULT_ROOM_NAME: str | None = (config.get("DEFAULT_ROOM_NAME") or "").strip() or None
    AUTO_SUBSCRIBE: bool = (config.get("AUTO_SUBSCRIBE") or "true").strip().lower() == "true"

    # Local camera preview published on join
    LOCAL_VIDEO_WIDTH: int = int((config.get("LOCAL_VIDEO_WIDTH") or "").strip() or 1280)
    LOCAL_VIDEO_HEIGHT: int = int((config.get("LOCAL_VIDEO_HEIGHT") or "").strip() or 720)


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config

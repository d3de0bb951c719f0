"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Supabase
    SUPABASE_URL: str
    SUPABASE_ANON_KEY: str
    SUPABASE_SERVICE_ROLE_KEY: str
    STORAGE_BUCKET: str = "voice-messages"

    # JWT (tokens are issued by Supabase Auth, we only verify them)
    SUPABASE_JWT_SECRET: str
    JWT_AUDIENCE: str = "authenticated"

    # Audio limits
    MAX_AUDIO_BYTES: int = 10 * 1024 * 1024
    MAX_AUDIO_DURATION: float = 600
    VALIDATE_AUDIO_MAX_DURATION: float = 300

    # Notifications
    NOTIFICATION_TITLE: str = "새 음성 메시지"
    NOTIFICATION_BODY: str = "새로운 메아리가 도착했습니다."
    NOTIFICATION_ICON: str = "/favicon.ico"
    SSE_KEEPALIVE_SECONDS: float = 15.0

    # CORS
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    # Rate limiting
    RATE_LIMIT_STANDARD: int = 60
    RATE_LIMIT_UPLOAD: int = 10

    LOG_LEVEL: str = "INFO"

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache()
def get_settings() -> Settings:
    return Settings()

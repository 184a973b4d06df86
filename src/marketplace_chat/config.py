from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300
    DB_COMMAND_TIMEOUT: float = 10.0

    REDIS_URL: str = "redis://localhost:6379/0"

    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"

    CORS_ORIGINS: list[str] = ["*"]

    WS_HEARTBEAT_SECONDS: int = 30

    REDIS_PUBSUB_CHANNEL: str = "chat.fanout"

    NOTIFICATION_EXCHANGE: str = "gigconnect-order-exchange"
    NOTIFICATION_ROUTING_KEY: str = "order-email"
    NOTIFICATION_STREAM_MAXLEN: int = 10_000
    NOTIFY_TIMEOUT_SECONDS: float = 5.0

    UPLOAD_URL: str | None = None
    UPLOAD_TIMEOUT_SECONDS: float = 30.0

    LOG_LEVEL: str = "INFO"
    SLOW_REQUEST_MS: float = 1000.0

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]

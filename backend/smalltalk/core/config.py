from functools import lru_cache
from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    debug: bool = Field(default=False)
    project_name: str = Field(default="Small-Talk Backend")
    version: str = Field(default="1.0.0")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001, validation_alias="PORT")
    frontend_url: str = Field(default="http://localhost:3000", validation_alias="FRONTEND_URL")
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    cors_allow_methods: list[str] = Field(default_factory=lambda: ["GET", "POST"])
    cors_allow_headers: list[str] = Field(default_factory=lambda: ["*"])
    cors_allow_credentials: bool = Field(default=True)
    websocket_ping_interval: int = Field(default=20)
    socketio_path: str = Field(default="/socket.io")
    blob_retention_seconds: int = Field(default=24 * 60 * 60)
    blob_sweep_interval_seconds: int = Field(default=60 * 60)
    max_voice_upload_bytes: int = Field(default=5 * 1024 * 1024)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def allowed_origins(self) -> list[str]:
        origins = list(self.cors_allow_origins)
        if self.frontend_url and self.frontend_url not in origins:
            origins.insert(0, self.frontend_url)
        return origins


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings: Annotated[Settings, "Application settings"] = get_settings()

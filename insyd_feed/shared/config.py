"""
MODULE OVERVIEW:
Application-wide configuration using Pydantic Settings, plus the explicit
`ClientConfig` object handed to every component that talks to the backend.

WHAT IS HAPPENING HERE:
`settings` is read from the environment (and `.env`) exactly once, at the process
edge. The CLI turns it into a `ClientConfig` and passes that object down; nothing
in the client reads the global settings at request time.
"""
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    API_URL: str = "http://127.0.0.1:8000"
    USER_ID: str = "user123"
    LOG_LEVEL: str = "INFO"

    # Feed polling cadence
    POLL_INTERVAL_S: float = 5.0

    # Development backend
    PORT: int = 8000

    # Tolerate missing env vars to allow easy out-of-the-box execution
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class ClientConfig(BaseModel):
    base_url: str
    user_id: str
    poll_interval_s: float = Field(default=5.0, gt=0)

    @classmethod
    def from_settings(cls, source: Settings) -> "ClientConfig":
        return cls(
            base_url=source.API_URL.rstrip("/"),
            user_id=source.USER_ID,
            poll_interval_s=source.POLL_INTERVAL_S,
        )


settings = Settings()

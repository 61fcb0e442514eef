"""Observer settings loaded from the environment."""

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ObserverSettings(BaseSettings):
    """Connection and logging settings.

    Every field can be set through an environment variable with the
    ``REQOBSERVER_`` prefix (e.g. ``REQOBSERVER_MONGO_URI``) or a ``.env``
    file in the working directory. An unknown log level fails validation
    when the settings are loaded.
    """

    model_config = SettingsConfigDict(
        env_prefix="REQOBSERVER_",
        env_file=".env",
        extra="ignore",
    )

    mongo_uri: str = "mongodb://localhost:27017"
    database: str = "observability"
    collection: str = "events"
    log_level: LogLevel = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v

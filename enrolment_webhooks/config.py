"""Application configuration via pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    debug: bool = False
    log_level: str = "INFO"
    # API key (optional): if set, required to list or delete queued submissions
    api_key: str = ""
    host: str = "0.0.0.0"
    port: int = 8000

    # Tally
    webhook_signing_secret: str = ""

    # List store: Upstash REST wins over REDIS_URL; neither means in-memory
    upstash_redis_rest_url: str = ""
    upstash_redis_rest_token: str = ""
    redis_url: str = ""
    store_timeout_seconds: float = 10.0

    # Queue keys
    submissions_queue_key: str = "enrolment-submissions"
    teams_queue_key: str = "enrolment-participants-teams"


settings = Settings()

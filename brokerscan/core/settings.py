from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_ROSTER_PATH = PROJECT_ROOT / "config" / "brokers.yaml"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="BrokerScan API", alias="APP_NAME")
    app_env: str = Field(default="local", alias="APP_ENV")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    broker_roster_path: Path = Field(default=DEFAULT_ROSTER_PATH, alias="BROKER_ROSTER_PATH")
    scan_batch_delay_s: float = Field(default=2.0, alias="SCAN_BATCH_DELAY_S")
    scan_call_timeout_s: float = Field(default=30.0, alias="SCAN_CALL_TIMEOUT_S")
    scan_default_batch_size: int = Field(default=5, alias="SCAN_DEFAULT_BATCH_SIZE")
    scan_default_priority: int = Field(default=3, alias="SCAN_DEFAULT_PRIORITY")

    http_user_agent: str = Field(default="BrokerScan/0.1", alias="HTTP_USER_AGENT")

    apify_api_token: str | None = Field(default=None, alias="APIFY_API_TOKEN")
    apify_actor_id: str = Field(default="vmf6h5lxPAkB1W2gT", alias="APIFY_ACTOR_ID")
    apify_base_url: str = Field(default="https://api.apify.com/v2", alias="APIFY_BASE_URL")
    skip_trace_max_results: int = Field(default=5, alias="SKIP_TRACE_MAX_RESULTS")

    searchbug_api_key: str | None = Field(default=None, alias="SEARCHBUG_API_KEY")
    searchbug_base_url: str = Field(default="https://searchbug.com/api", alias="SEARCHBUG_BASE_URL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

"""Application configuration."""

import json
from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, HttpUrl, computed_field
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def parse_list(v: Any) -> list[str]:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, str):
        return json.loads(v)
    elif isinstance(v, list | tuple):
        return list(v)
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Study Ocean"
    SERVER_PORT: int = 8000
    ROOTPATH: str = ""
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Sentry
    SENTRY_DSN: HttpUrl | None = None

    # Proxy gateway
    PROXY_PATH: str = "/proxy-api"
    PROXY_ALLOWED_DOMAINS: Annotated[
        list[str], NoDecode, BeforeValidator(parse_list)
    ] = [
        "studyuk.site",
        "classx.co.in",
        "testseries-assets.classx.co.in",
        "appx.co.in",
        "akamai.net.in",
    ]
    PROXY_USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    )
    PROXY_TIMEOUT_SEC: float = 15.0
    PROXY_MAX_REDIRECTS: int = 5
    PROXY_CORS_ALLOW_HEADERS: str = "authorization, x-client-info, apikey, content-type"

    # Catalog client
    CATALOG_MANIFEST_URL: str = "https://studyuk.site/appxapis.json"
    CATALOG_BASE_URL: str = "https://studyuk.site/appx.php"
    # Empty means the catalog talks to the in-process proxy service.
    PROXY_GATEWAY_URL: str | None = None
    CLIENT_TIMEOUT_SEC: float = 20.0

    # Batch aggregation
    BATCH_CONCURRENCY: int = 5
    BATCH_CHUNK_DELAY_MS: int = 300

    @computed_field
    @property
    def gateway_mode(self) -> str:
        return "http" if self.PROXY_GATEWAY_URL else "in_process"


settings = Settings()

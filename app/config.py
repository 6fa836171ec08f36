"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Source site
    host: str = "www.everyonepiano.cn"
    site_name: str = "人人钢琴网"
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124 Safari/537.36"
    )

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    # Job store
    job_ttl_seconds: int = 60 * 60  # 1 hour

    # Server
    version: str = "0.1.0"
    port: int = 8001
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    model_config = {"env_prefix": "EOP_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()

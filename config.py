"""
config.py — application settings from environment variables.
All variables carry the SOURCETRACE_ prefix.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Fetching sources and source maps
    fetch_timeout_ms: int = 10_000
    allow_local_files: bool = False
    user_agent: str = "sourcetrace/0.1.0"
    # Hosts sources may be fetched from (empty = any host)
    fetch_allowed_hosts: list[str] = []

    # Enhancement (True = parse only, never touch the network)
    offline: bool = False

    # Reporting
    report_url: str = ""
    report_timeout_ms: int = 10_000
    # Further collectors the HTTP service may forward to besides report_url
    report_allowed_urls: list[str] = []

    # Logging
    log_level: str = "INFO"

    # App
    app_title: str = "SourceTrace"
    app_version: str = "0.1.0"

    model_config = SettingsConfigDict(env_prefix="SOURCETRACE_", env_file=".env", extra="ignore")

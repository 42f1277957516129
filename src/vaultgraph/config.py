"""Application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    vault_dir: Path = Path("vault")
    config_file: str = "vaultgraph.yaml"
    debug: bool = False
    app_title: str = "VaultGraph"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="VAULTGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


settings = Settings()

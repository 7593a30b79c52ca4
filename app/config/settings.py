from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseSettings):
    """Object storage (MinIO / S3 compatible) configuration"""

    endpoint: str = "localhost"
    port: int = 9000
    access_key: SecretStr = Field(default=SecretStr("minioadmin"))
    secret_key: SecretStr = Field(default=SecretStr("minioadmin"))
    bucket: str = "hls-audio"
    region: str = "us-east-1"
    use_ssl: bool = Field(
        default=False,
        validation_alias="USE_SSL",
        description="Talk to the object store (and build public URLs) over https.",
    )

    @property
    def address(self) -> str:
        """Get the host:port pair used both for the client and public URLs"""
        return f"{self.endpoint}:{self.port}"

    @property
    def url(self) -> str:
        """Get the endpoint URL handed to the S3 client"""
        scheme = "https" if self.use_ssl else "http"
        return f"{scheme}://{self.address}"

    model_config = SettingsConfigDict(
        env_prefix="MINIO_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )


class Settings(BaseSettings):
    """Application settings"""

    app_name: str = "HLS Audio Converter"
    app_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080
    log_file: str = "logs/app.log"
    conversion_log_file: str = "logs/conversion.log"

    # Conversion pipeline
    conversion_folder: str = "converted-audio"
    ffmpeg_binary: str = "ffmpeg"
    transcode_timeout_seconds: Optional[float] = Field(default=600.0, gt=0)
    fetch_timeout_seconds: float = Field(default=60.0, gt=0)
    workspace_root: Optional[str] = Field(
        default=None,
        description="Parent directory for per-request workspaces; system temp dir when unset.",
    )

    # Object storage
    storage: StorageConfig = Field(default_factory=StorageConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )


# Global settings instance
settings = Settings()

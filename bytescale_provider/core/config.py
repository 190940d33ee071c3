import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings
from pydantic import field_validator

project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
env_path = os.path.join(project_root, '.env')
load_dotenv(env_path)


class Settings(BaseSettings):
    # Provider identity
    PROJECT_NAME: str = "bytescale-file-provider"
    DEFAULT_PROVIDER: str = "bytescale-file"

    # Bytescale credentials; the API key must carry delete permission
    BYTESCALE_API_KEY: Optional[str] = None
    BYTESCALE_ACCOUNT_ID: Optional[str] = None
    BYTESCALE_PREFIX: Optional[str] = "uploads"

    # Bytescale endpoints
    BYTESCALE_API_BASE: str = "https://api.bytescale.com"
    BYTESCALE_CDN_BASE: str = "https://upcdn.io"
    BYTESCALE_TIMEOUT: int = 300

    # Streaming
    STREAM_MAX_BUFFERED_CHUNKS: int = 16
    DOWNLOAD_CHUNK_SIZE: int = 64 * 1024

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    @field_validator("BYTESCALE_API_BASE", "BYTESCALE_CDN_BASE", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    @field_validator("STREAM_MAX_BUFFERED_CHUNKS", "DOWNLOAD_CHUNK_SIZE", "BYTESCALE_TIMEOUT")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"must be >= 1, got: {v}")
        return v

    @property
    def PROVIDER_OPTIONS(self) -> Dict[str, Any]:
        """
        Options dict understood by BytescaleFileProviderService
        """
        return {
            "apiKey": self.BYTESCALE_API_KEY,
            "accountId": self.BYTESCALE_ACCOUNT_ID,
            "prefix": self.BYTESCALE_PREFIX,
        }

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()

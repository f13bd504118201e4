import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .errors import ConfigurationError

# Load environment variables
load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_COMPLETION_BASE_URL = "https://models.github.ai/inference"
DEFAULT_COMPLETION_MODEL = "openai/gpt-4.1"
DEFAULT_ZIP_TABLE_PATH = os.path.join("data", "uszips.xlsx")
DEFAULT_SEARCH_DOMAIN = "https://gis.vgsi.com/"


class Settings(BaseModel):
    """Runtime configuration, read from the environment (and a .env file)."""

    tavily_api_key: Optional[str] = None
    completion_api_key: Optional[str] = None
    completion_base_url: str = DEFAULT_COMPLETION_BASE_URL
    completion_model: str = DEFAULT_COMPLETION_MODEL
    zip_table_path: str = DEFAULT_ZIP_TABLE_PATH
    search_domain: str = DEFAULT_SEARCH_DOMAIN
    search_max_results: int = Field(default=5, ge=1, le=20)
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            tavily_api_key=os.getenv("TAVILY_API_KEY") or None,
            completion_api_key=os.getenv("GITHUB_TOKEN") or None,
            completion_base_url=os.getenv("COMPLETION_BASE_URL", DEFAULT_COMPLETION_BASE_URL),
            completion_model=os.getenv("COMPLETION_MODEL", DEFAULT_COMPLETION_MODEL),
            zip_table_path=os.getenv("ZIP_TABLE_PATH", DEFAULT_ZIP_TABLE_PATH),
            search_domain=os.getenv("SEARCH_DOMAIN", DEFAULT_SEARCH_DOMAIN),
            search_max_results=int(os.getenv("SEARCH_MAX_RESULTS", "5")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_origins=os.getenv("CORS_ORIGINS", "*").split(","),
        )

    def require_api_keys(self) -> "Settings":
        """Fail fast when either upstream API key is missing."""
        missing = []
        if not self.tavily_api_key:
            missing.append("TAVILY_API_KEY")
        if not self.completion_api_key:
            missing.append("GITHUB_TOKEN")
        if missing:
            raise ConfigurationError(
                f"{', '.join(missing)} is not set in environment variables"
            )
        return self


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)

"""Environment configuration for the cloner."""

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigError

DEFAULT_DATABASE_NAME = "Cloned Database"
DEFAULT_API_BASE = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"


@dataclass
class ClonerSettings:
    """Settings loaded once per process and handed to the orchestrator."""
    notion_token: Optional[str] = None
    source_database_id: Optional[str] = None
    parent_page_id: Optional[str] = None
    new_database_name: str = DEFAULT_DATABASE_NAME

    # Remote service
    api_base: str = DEFAULT_API_BASE
    notion_version: str = DEFAULT_NOTION_VERSION
    request_timeout: float = 30.0
    max_retries: int = 0

    # Execution options
    row_batch_size: int = 10
    edge_batch_size: int = 5
    page_size: int = 100

    environment: str = "production"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClonerSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            ClonerSettings populated from the environment
        """
        env = os.environ if environ is None else environ

        return cls(
            notion_token=env.get("NOTION_TOKEN") or None,
            source_database_id=env.get("SOURCE_DATABASE_ID") or None,
            parent_page_id=env.get("PARENT_PAGE_ID") or None,
            new_database_name=env.get("NEW_DATABASE_NAME") or DEFAULT_DATABASE_NAME,
            api_base=env.get("NOTION_API_BASE", DEFAULT_API_BASE),
            notion_version=env.get("NOTION_VERSION", DEFAULT_NOTION_VERSION),
            request_timeout=_float(env, "CLONER_REQUEST_TIMEOUT", 30.0),
            max_retries=_int(env, "CLONER_MAX_RETRIES", 0),
            row_batch_size=_positive_int(env, "CLONER_ROW_BATCH_SIZE", 10),
            edge_batch_size=_positive_int(env, "CLONER_EDGE_BATCH_SIZE", 5),
            environment=env.get("CLONER_ENV", "production"),
        )

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def require_token(self) -> str:
        """Return the integration token or raise ConfigError."""
        if not self.notion_token:
            raise ConfigError(
                "Server configuration error",
                "NOTION_TOKEN environment variable is not set",
            )
        return self.notion_token

    def require_defaults(self) -> None:
        """Check that the default source database and parent page are configured."""
        self.require_token()
        if not self.source_database_id:
            raise ConfigError(
                "Server configuration error",
                "SOURCE_DATABASE_ID environment variable is required",
            )
        if not self.parent_page_id:
            raise ConfigError(
                "Server configuration error",
                "PARENT_PAGE_ID environment variable is required",
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation (token omitted)."""
        return {
            "has_token": bool(self.notion_token),
            "source_database_id": self.source_database_id,
            "parent_page_id": self.parent_page_id,
            "new_database_name": self.new_database_name,
            "api_base": self.api_base,
            "notion_version": self.notion_version,
            "request_timeout": self.request_timeout,
            "max_retries": self.max_retries,
            "row_batch_size": self.row_batch_size,
            "edge_batch_size": self.edge_batch_size,
            "page_size": self.page_size,
            "environment": self.environment,
        }


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError("Server configuration error", f"{key} must be an integer, got {raw!r}")


def _positive_int(env: Mapping[str, str], key: str, default: int) -> int:
    value = _int(env, key, default)
    if value < 1:
        raise ConfigError("Server configuration error", f"{key} must be at least 1, got {value}")
    return value


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError("Server configuration error", f"{key} must be a number, got {raw!r}")

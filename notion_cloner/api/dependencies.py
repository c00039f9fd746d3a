"""Shared FastAPI dependencies."""

from typing import Callable

from ..client import NotionClient
from ..config import ClonerSettings

ClientFactory = Callable[[ClonerSettings], NotionClient]


def get_settings() -> ClonerSettings:
    """Settings are re-read from the environment on each request."""
    return ClonerSettings.from_env()


def get_client_factory() -> ClientFactory:
    """Factory building the API client once the token is known to be present."""
    return NotionClient.from_settings

"""HTTP client for the Notion REST API."""

import logging
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import ClonerSettings, DEFAULT_API_BASE, DEFAULT_NOTION_VERSION
from .errors import (
    ClonerError,
    CloneError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


class NotionClient:
    """
    Thin client over the Notion REST endpoints the cloner needs.

    Every call returns the decoded JSON body or raises a ClonerError
    subclass matching the HTTP status:
    - 400 -> ValidationError
    - 401/403 -> UnauthorizedError
    - 404 -> NotFoundError
    - anything else -> CloneError
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_BASE,
        notion_version: str = DEFAULT_NOTION_VERSION,
        timeout: float = 30.0,
        max_retries: int = 0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            token: Integration token
            base_url: Base URL for the API
            notion_version: Value of the Notion-Version header
            timeout: Per-request timeout in seconds
            max_retries: Retries on 429 responses (0 disables retrying)
            session: Custom requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._session = session or self._create_session()
        self._session.headers.update({
            "Authorization": f"Bearer {token}",
            "Notion-Version": notion_version,
            "Content-Type": "application/json",
        })

    @classmethod
    def from_settings(cls, settings: ClonerSettings) -> "NotionClient":
        """Create a client from loaded settings."""
        return cls(
            token=settings.require_token(),
            base_url=settings.api_base,
            notion_version=settings.notion_version,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
        )

    def _create_session(self) -> requests.Session:
        """Create a requests session; retries only rate-limited calls, and only when enabled."""
        session = requests.Session()

        retries = Retry(
            total=self.max_retries,
            backoff_factor=1.0,
            status_forcelist=[429],
            allowed_methods=None,
            respect_retry_after_header=True,
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

        return session

    def request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Issue a request and decode the JSON response."""
        url = f"{self.base_url}{path}"

        try:
            response = self._session.request(
                method,
                url,
                json=payload,
                params=params,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise CloneError(f"{method} {path} failed", str(e)) from e

        if response.status_code >= 400:
            raise self._error_for(method, path, response)

        return response.json() if response.text else {}

    def _error_for(self, method: str, path: str, response: requests.Response) -> ClonerError:
        """Translate an error response into the cloner's error taxonomy."""
        try:
            body = response.json()
            message = body.get("message") or body.get("code") or response.text
        except ValueError:
            message = response.text

        status = response.status_code
        summary = f"{method} {path} failed ({status})"
        logger.debug(f"{summary}: {message}")

        if status == 400:
            return ValidationError(summary, message)
        if status in (401, 403):
            return UnauthorizedError("Unauthorized", message)
        if status == 404:
            return NotFoundError("Could not find database or page", message)
        return CloneError(summary, message)

    # Databases

    def retrieve_database(self, database_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/databases/{database_id}")

    def create_database(
        self,
        parent_page_id: str,
        title: List[Dict[str, Any]],
        properties: Dict[str, Dict[str, Any]]
    ) -> Dict[str, Any]:
        payload = {
            "parent": {"type": "page_id", "page_id": parent_page_id},
            "title": title,
            "properties": properties,
        }
        return self.request("POST", "/databases", payload=payload)

    def update_database(
        self,
        database_id: str,
        properties: Dict[str, Dict[str, Any]]
    ) -> Dict[str, Any]:
        return self.request("PATCH", f"/databases/{database_id}", payload={"properties": properties})

    def query_database(
        self,
        database_id: str,
        start_cursor: Optional[str] = None,
        page_size: int = MAX_PAGE_SIZE
    ) -> Dict[str, Any]:
        """Fetch one page of rows. The response carries results, has_more and next_cursor."""
        payload: Dict[str, Any] = {"page_size": min(page_size, MAX_PAGE_SIZE)}
        if start_cursor:
            payload["start_cursor"] = start_cursor
        return self.request("POST", f"/databases/{database_id}/query", payload=payload)

    # Pages (rows)

    def create_page(self, database_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        payload = {
            "parent": {"database_id": database_id},
            "properties": properties,
        }
        return self.request("POST", "/pages", payload=payload)

    def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        return self.request("GET", f"/pages/{page_id}")

    def update_page(self, page_id: str, properties: Dict[str, Any]) -> Dict[str, Any]:
        return self.request("PATCH", f"/pages/{page_id}", payload={"properties": properties})


def database_url(database_id: str) -> str:
    """Public URL of a database."""
    return f"https://notion.so/{database_id.replace('-', '')}"

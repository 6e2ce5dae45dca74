import logging
from typing import Any, Optional

import httpx

from dealership.core.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx answer from the dealership API (status_code 0 when it was unreachable).

    ``details`` holds the decoded JSON body, so field errors sent by the
    backend are found under ``details["errors"]``.
    """

    def __init__(self, status_code: int, message: str, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details


class ApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.token = token
        self._client = client or httpx.Client(timeout=settings.API_TIMEOUT)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, path: str, *, json: Any = None, params: Optional[dict] = None) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            response = self._client.request(method, url, json=json, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"HTTP error while calling {method} {url}: {e}")
            raise ApiError(0, f"Could not reach the server: {e}") from e

        if response.is_error:
            try:
                details = response.json()
            except ValueError:
                details = None
            message = f"HTTP {response.status_code}"
            if isinstance(details, dict) and isinstance(details.get("detail"), str):
                message = details["detail"]
            logger.warning(f"{method} {url} failed with {response.status_code}")
            raise ApiError(response.status_code, message, details)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def login(self, username: str, password: str) -> str:
        """Authenticate and keep the access token for the following calls."""
        data = self.post("/auth/login", json={"username": username, "password": password})
        self.token = data["access_token"]
        return self.token

    def close(self) -> None:
        self._client.close()

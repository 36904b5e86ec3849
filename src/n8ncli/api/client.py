"""n8n public API client with structured errors."""

import sys
from typing import Any, Optional

import httpx

DEFAULT_TIMEOUT = 30.0


class N8nApiError(Exception):
    """Error response from the n8n API."""

    def __init__(self, message: str, status_code: int, response: Any = None):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(message)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "N8nApiError":
        """Build an error from a non-2xx response, preferring its JSON message."""
        fallback = f"Request failed with status {response.status_code}"
        try:
            body = response.json()
        except ValueError:
            return cls(fallback, response.status_code)
        if isinstance(body, dict) and "message" in body:
            return cls(str(body["message"]), response.status_code, body)
        return cls(fallback, response.status_code, body)


class N8nAuthenticationError(N8nApiError):
    """The API rejected the API key (HTTP 401)."""

    def __init__(self, message: str = "Authentication failed. Check your API key."):
        super().__init__(message, 401)


class N8nConnectionError(Exception):
    """The n8n instance could not be reached."""
    pass


class N8nClient:
    """HTTP client for the n8n REST API.

    ``host`` is the API base URL, e.g. ``https://n8n.example.com/api/v1``.
    """

    def __init__(
        self,
        host: str,
        api_key: str,
        verbose: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = host.rstrip("/")
        self.api_key = api_key
        self.verbose = verbose
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _headers(self) -> dict:
        return {
            "X-N8N-API-KEY": self.api_key,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json_body: Optional[Any] = None,
    ) -> Any:
        """Make an API request and decode the JSON response."""
        url = self._url(path)

        if self.verbose:
            print(f"[HTTP] {method} {url}", file=sys.stderr)
            if params:
                print(f"[HTTP] params={params}", file=sys.stderr)

        kwargs: dict = {}
        if params:
            kwargs["params"] = params
        if json_body is not None and method in ("POST", "PUT", "PATCH"):
            kwargs["json"] = json_body

        try:
            response = httpx.request(
                method,
                url,
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs,
            )
        except httpx.RequestError as e:
            raise N8nConnectionError(
                f"Failed to connect to n8n at {self.base_url}"
            ) from e

        if self.verbose:
            print(
                f"[HTTP] {response.status_code} ({len(response.content)} bytes)",
                file=sys.stderr,
            )

        if response.status_code == 401:
            raise N8nAuthenticationError()

        if response.status_code >= 400:
            raise N8nApiError.from_response(response)

        # DELETE and some actions return no body
        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError:
            return None

    def list_workflows(
        self,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
        active: Optional[bool] = None,
        tags: Optional[str] = None,
    ) -> list:
        """List one page of workflows."""
        params: dict = {}
        if cursor:
            params["cursor"] = cursor
        if limit is not None:
            params["limit"] = str(limit)
        if active is not None:
            params["active"] = "true" if active else "false"
        if tags:
            params["tags"] = tags

        result = self._request("GET", "workflows", params=params) or {}
        return result.get("data", [])

    def get_workflow(self, workflow_id: str) -> dict:
        return self._request("GET", f"workflows/{workflow_id}")

    def create_workflow(self, body: dict) -> dict:
        return self._request("POST", "workflows", json_body=body)

    def update_workflow(self, workflow_id: str, body: dict) -> dict:
        return self._request("PUT", f"workflows/{workflow_id}", json_body=body)

    def delete_workflow(self, workflow_id: str) -> None:
        self._request("DELETE", f"workflows/{workflow_id}")

    def activate_workflow(self, workflow_id: str) -> dict:
        return self._request("POST", f"workflows/{workflow_id}/activate")

    def deactivate_workflow(self, workflow_id: str) -> dict:
        return self._request("POST", f"workflows/{workflow_id}/deactivate")

    def test_connection(self) -> dict:
        """Probe the API with a one-item listing. Never raises API errors."""
        try:
            workflows = self.list_workflows(limit=1)
        except N8nAuthenticationError:
            return {
                "success": False,
                "workflowCount": 0,
                "message": "Authentication failed. Check your API key.",
            }
        except N8nConnectionError as e:
            return {
                "success": False,
                "workflowCount": 0,
                "message": f"Connection failed: {e}",
            }
        except N8nApiError as e:
            return {"success": False, "workflowCount": 0, "message": e.message}

        return {
            "success": True,
            "workflowCount": len(workflows),
            "message": "Successfully connected to n8n API",
        }

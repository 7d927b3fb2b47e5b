"""
ConfigClient SDK: sync client for x402 Exchange.

Used by gateway processes to fetch their payment manifest at startup and
by scripts that sign in and seed demo data.
"""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx


@dataclass
class ClientEndpointPrice:
    """Price entry for one gateway route."""

    route: str
    price: str
    network: str


@dataclass
class ClientManifest:
    """Manifest returned by fetch()."""

    wallet_address: str
    network: str
    asset: str
    endpoints: list[ClientEndpointPrice] = field(default_factory=list)

    def as_middleware_config(self) -> dict[str, dict[str, str]]:
        """Route table in the shape the payment middleware consumes."""
        return {
            e.route: {"price": e.price, "network": e.network}
            for e in self.endpoints
        }


@dataclass
class ClientFetchResult:
    """Result of fetch() call."""

    success: bool
    manifest: Optional[ClientManifest] = None
    code: str = ""
    error: str = ""


@dataclass
class ClientSeedResult:
    """Result of seed() call."""

    success: bool
    message: str = ""
    endpoint_count: int = 0
    code: str = ""


class ConfigClient:
    """
    Synchronous HTTP client for x402 Exchange.

    Can be wrapped in async by consumers; designed for simplicity in sync contexts.
    """

    def __init__(
        self,
        server_url: str = "http://localhost:8080",
        api_key: Optional[str] = None,
        access_token: Optional[str] = None,
        timeout: int = 30,
        max_retries: int = 3,
        retry_backoff_base: float = 0.5,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.server_url = server_url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self.max_retries = max_retries
        self.retry_backoff_base = retry_backoff_base
        self._http = httpx.Client(
            base_url=self.server_url,
            timeout=timeout,
            transport=transport,
        )

    def _auth_headers(self) -> dict[str, str]:
        headers = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Central HTTP method with retry and structured error handling.

        Retries on:
        - httpx.TimeoutException
        - 5xx status codes
        - 429 (rate limit)

        No retry on other 4xx errors; the server's ``error`` message is
        passed through with an ``HTTP_<status>`` code.

        Returns parsed JSON on success, or structured error dict on failure.
        """
        last_error = None
        for attempt in range(self.max_retries):
            try:
                resp = getattr(self._http, method)(path, **kwargs)
                if resp.status_code >= 500 or resp.status_code == 429:
                    last_error = f"HTTP {resp.status_code}"
                    if attempt < self.max_retries - 1:
                        time.sleep(self.retry_backoff_base * (2 ** attempt))
                        continue
                    return {
                        "error": f"Server error: {resp.status_code}",
                        "code": "SERVER_ERROR",
                    }
                if resp.status_code >= 400:
                    return {
                        "error": _error_message(resp),
                        "code": f"HTTP_{resp.status_code}",
                    }
                return resp.json()
            except httpx.TimeoutException:
                last_error = "timeout"
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_backoff_base * (2 ** attempt))
                    continue
            except httpx.HTTPError as e:
                last_error = str(e)
                if attempt < self.max_retries - 1:
                    time.sleep(self.retry_backoff_base * (2 ** attempt))
                    continue
            except json.JSONDecodeError:
                return {"error": "Invalid JSON response", "code": "JSON_ERROR"}

        return {"error": f"All {self.max_retries} retries exhausted: {last_error}", "code": "CONNECTION_ERROR"}

    @staticmethod
    def _parse_manifest(data: dict) -> ClientManifest:
        endpoints = [
            ClientEndpointPrice(
                route=route,
                price=entry.get("price", ""),
                network=entry.get("network", ""),
            )
            for route, entry in (data.get("endpoints") or {}).items()
        ]
        return ClientManifest(
            wallet_address=data.get("walletAddress", ""),
            network=data.get("network", ""),
            asset=data.get("asset", ""),
            endpoints=endpoints,
        )

    # ── Manifest ──

    def fetch(self) -> ClientFetchResult:
        """Fetch the pricing manifest for the configured API key."""
        data = self._request("get", "/config", params={"apiKey": self.api_key or ""})
        if "error" in data:
            return ClientFetchResult(
                success=False,
                code=data.get("code", "ERROR"),
                error=data.get("error", ""),
            )
        return ClientFetchResult(success=True, manifest=self._parse_manifest(data))

    # ── Accounts ──

    def login(self, email: str, password: str) -> bool:
        """Exchange credentials for a bearer token, kept on the client."""
        data = self._request(
            "post", "/auth/token", json={"email": email, "password": password},
        )
        if "error" in data:
            return False
        self.access_token = data.get("access_token")
        return bool(self.access_token)

    # ── Demo data ──

    def seed(self) -> ClientSeedResult:
        """Seed demo API calls for the signed-in user."""
        data = self._request(
            "post", "/functions/seed-api-calls", headers=self._auth_headers(),
        )
        if "error" in data:
            return ClientSeedResult(
                success=False,
                message=data.get("error", ""),
                code=data.get("code", "ERROR"),
            )
        return ClientSeedResult(
            success=data.get("success", False),
            message=data.get("message", ""),
            endpoint_count=data.get("endpointCount", 0),
        )

    # ── Health ──

    def health(self) -> dict[str, Any]:
        return self._request("get", "/health")

    # ── Lifecycle ──

    def close(self) -> None:
        """Close the HTTP client."""
        self._http.close()

    def __enter__(self) -> "ConfigClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except json.JSONDecodeError:
        return f"Client error: {resp.status_code}"
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail")
        if isinstance(message, str):
            return message
    return f"Client error: {resp.status_code}"

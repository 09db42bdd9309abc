from __future__ import annotations

import logging
from typing import Any

import requests

from .base import StoreError

logger = logging.getLogger(__name__)


class HttpProductStore:
    """Client for the StockPilot product API.

    Endpoints:
        GET  /products        -> list, or {"products": [...]}
        POST /products        -> created product (or {"product": {...}})
        PUT  /products/{id}   -> updated product (or {"product": {...}})
    """

    def __init__(self, base_url: str, token: str | None = None, timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _request(self, method: str, endpoint: str, data: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            resp = self._session.request(method=method, url=url, json=data, timeout=self.timeout)
            if resp.status_code == 401:
                raise StoreError("authentication failed: invalid or expired token", 401)
            if resp.status_code == 404:
                raise StoreError(f"not found: {endpoint}", 404)
            if resp.status_code >= 400:
                raise StoreError(f"API error {resp.status_code}: {resp.text[:500]}", resp.status_code)
            return resp.json()
        except requests.ConnectionError as e:
            raise StoreError(f"connection failed: cannot reach {self.base_url}") from e
        except requests.Timeout as e:
            raise StoreError(f"request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise StoreError(f"request error: {e}") from e
        except ValueError as e:
            raise StoreError(f"invalid JSON response from {endpoint}: {e}") from e

    def get_products(self) -> list[dict[str, Any]]:
        payload = self._request("GET", "/products")
        if isinstance(payload, dict):
            payload = payload.get("products") or []
        if not isinstance(payload, list):
            raise StoreError(f"unexpected catalog payload: {type(payload).__name__}")
        return payload

    def save_product(self, record: dict[str, Any]) -> dict[str, Any]:
        product_id = record.get("id")
        if product_id:
            payload = self._request("PUT", f"/products/{product_id}", record)
        else:
            payload = self._request("POST", "/products", record)
        if isinstance(payload, dict) and isinstance(payload.get("product"), dict):
            return payload["product"]
        if isinstance(payload, dict):
            return payload
        logger.debug("save returned %s, keeping submitted record", type(payload).__name__)
        return dict(record)

    def close(self) -> None:
        self._session.close()

"""
Public-read catalog client

Reads product documents from the catalog's HTTP API. Used as a fallback
behind the local catalog.
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from ..errors import TransientSourceError
from ..models.product import ProductDocument
from .products import parse_document

logger = logging.getLogger(__name__)


class HttpCatalog:
    """Catalog reader backed by the public product API"""

    name = "http"

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the catalog client.

        Args:
            base_url: Base URL of the catalog API
            timeout: Transport timeout in seconds
            http_client: Preconfigured client, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    async def _request(self, path: str, params: Optional[dict] = None) -> Optional[httpx.Response]:
        url = f"{self.base_url}{path}"
        try:
            response = await self._http_client.get(
                url,
                params=params,
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            raise TransientSourceError(f"Catalog request failed: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            logger.error(f"Catalog request failed: {response.status_code} - {response.text}")
            raise TransientSourceError(f"Catalog returned HTTP {response.status_code}")
        return response

    def _json(self, response: httpx.Response):
        try:
            return response.json()
        except ValueError as e:
            raise TransientSourceError(f"Catalog returned invalid JSON: {e}") from e

    async def get_product(self, id_or_slug: str) -> Optional[ProductDocument]:
        """Get a product by ID or slug"""
        response = await self._request(f"/products/{quote(id_or_slug, safe='')}")
        if response is None:
            return None

        data = self._json(response)
        if not isinstance(data, dict):
            raise TransientSourceError("Catalog returned a non-object product payload")
        return parse_document(str(data.get("id", id_or_slug)), data)

    async def list_products_by_category(
        self, category_id: str, limit: int = 50
    ) -> list[ProductDocument]:
        """Get products in a category"""
        response = await self._request(
            "/products", params={"category_id": category_id, "limit": limit}
        )
        if response is None:
            return []

        data = self._json(response)
        items = data.get("products", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise TransientSourceError("Catalog returned a non-list product payload")
        return [parse_document(str(item.get("id")), item) for item in items][:limit]

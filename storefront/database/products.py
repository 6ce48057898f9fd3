"""Catalog read interface and the local product document store"""

import logging
from typing import Any, Optional, Protocol

from pydantic import ValidationError

from ..errors import TransientSourceError
from ..models.product import ProductDocument

logger = logging.getLogger(__name__)


class CatalogReader(Protocol):
    """Narrow read access to the product catalog.

    Implementations return None when the product does not exist and raise
    TransientSourceError when the catalog cannot answer right now.
    """

    name: str

    async def get_product(self, id_or_slug: str) -> Optional[ProductDocument]:
        ...

    async def list_products_by_category(
        self, category_id: str, limit: int = 50
    ) -> list[ProductDocument]:
        ...


def parse_document(doc_id: str, data: dict[str, Any]) -> ProductDocument:
    """Validate a raw catalog document, treating bad data as a source failure"""
    try:
        return ProductDocument.model_validate({**data, "id": doc_id})
    except ValidationError as e:
        raise TransientSourceError(f"Malformed product document {doc_id}: {e}") from e


# Seed catalog, prices in MAD
PRODUCTS: dict[str, dict[str, Any]] = {
    "p1": {
        "name": "Oud Royal Eau de Parfum 100ml",
        "slug": "oud-royal-100ml",
        "description": "Deep oud and amber with a smoky saffron opening.",
        "price": 100.00,
        "images": ["/images/oud-royal-1.jpg", "/images/oud-royal-2.jpg"],
        "category_id": "oriental",
        "stock": 40,
    },
    "p2": {
        "name": "Rose de Taif 50ml",
        "slug": "rose-de-taif-50ml",
        "description": "Damask rose over a soft musk base.",
        "price": 249.50,
        "images": ["/images/rose-taif.jpg"],
        "category_id": "floral",
        "stock": 25,
    },
    "p3": {
        "name": "Musk Blanc 30ml",
        "slug": "musk-blanc-30ml",
        "description": "Clean white musk, everyday wear.",
        "price": 89.99,
        "images": ["/images/musk-blanc.jpg"],
        "category_id": "musk",
        "stock": 120,
    },
    "p4": {
        "name": "Ambre Nuit 100ml",
        "slug": "ambre-nuit-100ml",
        "description": "Warm amber, vanilla and labdanum.",
        "price": 520.00,
        "images": ["/images/ambre-nuit.jpg"],
        "category_id": "oriental",
        "stock": 10,
    },
    "p5": {
        "name": "Neroli Atlas 75ml",
        "slug": "neroli-atlas-75ml",
        "description": "Orange blossom from the Atlas foothills.",
        "price": 310.00,
        "images": ["/images/neroli-atlas.jpg"],
        "category_id": "floral",
        "stock": 0,
    },
}


class LocalCatalog:
    """In-process product document store with privileged access"""

    name = "local"

    def __init__(self, documents: Optional[dict[str, dict[str, Any]]] = None):
        source = PRODUCTS if documents is None else documents
        self.documents = {doc_id: dict(data) for doc_id, data in source.items()}

    async def get_product(self, id_or_slug: str) -> Optional[ProductDocument]:
        """Get a product by ID, falling back to slug"""
        data = self.documents.get(id_or_slug)
        if data is not None:
            return parse_document(id_or_slug, data)

        for doc_id, data in self.documents.items():
            if data.get("slug") == id_or_slug:
                logger.debug(f"Found product by slug: {id_or_slug}")
                return parse_document(doc_id, data)

        return None

    async def list_products_by_category(
        self, category_id: str, limit: int = 50
    ) -> list[ProductDocument]:
        """Get products in a category"""
        results = [
            parse_document(doc_id, data)
            for doc_id, data in self.documents.items()
            if data.get("category_id") == category_id
        ]
        return results[:limit]

    def put(self, doc_id: str, data: dict[str, Any]) -> None:
        """Insert or replace a product document"""
        self.documents[doc_id] = dict(data)

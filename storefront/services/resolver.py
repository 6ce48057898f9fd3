"""
Product Resolver

Resolves a variant identifier to a product snapshot by asking an ordered
list of catalog sources. A source that times out or errors hands over to
the next one; the first product found wins.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from ..database.products import CatalogReader
from ..errors import ProductNotFoundError, SourcesExhaustedError, TransientSourceError
from ..models.product import ProductSnapshot, product_id_from_variant

logger = logging.getLogger(__name__)


class ResolutionStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    TRANSIENT_ERROR = "transient_error"


@dataclass
class Resolution:
    """Outcome of asking one source for one product"""
    status: ResolutionStatus
    source: str
    snapshot: Optional[ProductSnapshot] = None
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status == ResolutionStatus.FOUND


class CatalogSource:
    """Wraps a catalog reader with a timeout and a three-way result"""

    def __init__(self, reader: CatalogReader, timeout: float = 2.0):
        self.reader = reader
        self.timeout = timeout

    @property
    def name(self) -> str:
        return getattr(self.reader, "name", type(self.reader).__name__)

    async def lookup(self, product_id: str) -> Resolution:
        try:
            document = await asyncio.wait_for(
                self.reader.get_product(product_id), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            return Resolution(
                ResolutionStatus.TRANSIENT_ERROR,
                self.name,
                error=f"timed out after {self.timeout}s",
            )
        except (TransientSourceError, OSError) as e:
            return Resolution(ResolutionStatus.TRANSIENT_ERROR, self.name, error=str(e))
        except Exception as e:
            logger.exception(f"Catalog source {self.name} failed looking up {product_id}")
            return Resolution(ResolutionStatus.TRANSIENT_ERROR, self.name, error=repr(e))

        if document is None:
            return Resolution(ResolutionStatus.NOT_FOUND, self.name)
        return Resolution(ResolutionStatus.FOUND, self.name, snapshot=document.to_snapshot())


class ProductResolver:
    """
    Resolves variants against catalog sources in a fixed order.

    Args:
        sources: Catalog sources, most authoritative first
        not_found_is_final: Stop at the first source that says the product
            does not exist instead of asking the remaining ones
    """

    def __init__(self, sources: Sequence[CatalogSource], not_found_is_final: bool = True):
        if not sources:
            raise ValueError("ProductResolver needs at least one catalog source")
        self.sources = list(sources)
        self.not_found_is_final = not_found_is_final

    async def lookup(self, variant_id: str) -> Resolution:
        """Walk the source chain and return the deciding resolution.

        When every source fails transiently, the last failure is returned.
        """
        product_id = product_id_from_variant(variant_id)
        resolution: Optional[Resolution] = None

        for source in self.sources:
            resolution = await source.lookup(product_id)

            if resolution.status == ResolutionStatus.FOUND:
                logger.debug(f"Resolved {variant_id} via {resolution.source}")
                return resolution

            if resolution.status == ResolutionStatus.NOT_FOUND:
                if self.not_found_is_final:
                    return resolution
                continue

            logger.warning(
                f"Catalog source {resolution.source} failed for {product_id}: "
                f"{resolution.error}; trying next source"
            )

        return resolution

    async def resolve(self, variant_id: str) -> Optional[ProductSnapshot]:
        """Resolve a variant, returning None when it cannot be resolved"""
        resolution = await self.lookup(variant_id)
        if resolution.found:
            return resolution.snapshot

        if resolution.status == ResolutionStatus.TRANSIENT_ERROR:
            logger.error(f"All catalog sources failed for variant {variant_id}")
        else:
            logger.warning(f"Product not found for variant {variant_id}")
        return None

    async def require(self, variant_id: str) -> ProductSnapshot:
        """
        Resolve a variant or raise.

        Raises:
            SourcesExhaustedError: every source failed transiently
            ProductNotFoundError: the product does not exist
        """
        resolution = await self.lookup(variant_id)
        if resolution.found:
            return resolution.snapshot
        if resolution.status == ResolutionStatus.TRANSIENT_ERROR:
            logger.error(f"All catalog sources failed for variant {variant_id}")
            raise SourcesExhaustedError(variant_id)
        raise ProductNotFoundError(variant_id)

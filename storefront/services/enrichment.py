"""Cart enrichment: refresh cached product snapshots on every line"""

import asyncio
import logging
from typing import Optional

from ..models.cart import Cart, LineItem
from ..models.product import ProductSnapshot
from .resolver import ProductResolver

logger = logging.getLogger(__name__)


class CartEnrichmentPipeline:
    """
    Refreshes each line's product snapshot from the resolver.

    Lines are resolved concurrently, at most `concurrency` at a time, and
    reassembled in their original order. A line that fails to resolve, or
    is still pending when the deadline passes, keeps its cached snapshot.
    """

    def __init__(
        self,
        resolver: ProductResolver,
        concurrency: int = 8,
        deadline: float = 5.0,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.resolver = resolver
        self.concurrency = concurrency
        self.deadline = deadline

    async def enrich(self, cart: Cart) -> Cart:
        """Return a copy of cart with refreshed snapshots"""
        enriched = cart.model_copy(deep=True)
        if not enriched.line_items:
            return enriched

        logger.debug(f"Enriching cart {cart.id} with {len(enriched.line_items)} items")
        semaphore = asyncio.Semaphore(self.concurrency)

        async def refresh(item: LineItem) -> Optional[ProductSnapshot]:
            async with semaphore:
                return await self.resolver.resolve(item.variant_id)

        tasks = [asyncio.create_task(refresh(item)) for item in enriched.line_items]
        done, pending = await asyncio.wait(tasks, timeout=self.deadline)

        if pending:
            logger.warning(
                f"Enrichment deadline of {self.deadline}s hit for cart {cart.id}; "
                f"{len(pending)} items keep cached data"
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        for item, task in zip(enriched.line_items, tasks):
            if task not in done:
                continue
            if task.exception() is not None:
                logger.warning(
                    f"Error enriching {item.variant_id} in cart {cart.id}: {task.exception()!r}"
                )
                continue
            snapshot = task.result()
            if snapshot is None:
                logger.warning(f"Could not find product data for variant {item.variant_id}")
                continue
            item.product_snapshot = snapshot

        return enriched

"""Product service - business logic for the catalog."""

import builtins
import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import Product
from app.services.errors import NotFoundError

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Product not found"

# Columns that can never be NULL; an explicit null in an update is ignored
_REQUIRED_FIELDS = {"name", "price"}
_UPDATABLE_FIELDS = {"name", "description", "price"}


def _clean_description(description: str | None) -> str | None:
    """Store empty descriptions as NULL."""
    if description is None or not description.strip():
        return None
    return description


class ProductService:
    """Service for managing catalog products."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list(self, page: int = 1, limit: int = 10) -> tuple[builtins.list[Product], int]:
        """List products with pagination.

        Returns a tuple of (products, total_count).
        """
        count_result = await self.db.execute(select(func.count(Product.id)))
        total = count_result.scalar() or 0

        # Secondary sort by id keeps pages stable when timestamps tie
        offset = (page - 1) * limit
        result = await self.db.execute(
            select(Product)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return builtins.list(result.scalars().all()), total

    async def get(self, product_id: int) -> Product:
        """Get a product by ID.

        Raises:
            NotFoundError: If the product does not exist.
        """
        product = await self.db.get(Product, product_id)
        if product is None:
            raise NotFoundError(PRODUCT_NOT_FOUND)
        return product

    async def create(self, name: str, price: float, description: str | None = None) -> Product:
        """Create a new product."""
        product = Product(
            name=name,
            price=price,
            description=_clean_description(description),
        )
        self.db.add(product)
        await self.db.flush()
        await self.db.refresh(product)
        logger.info(f"Created product {product.id}")
        return product

    async def update(self, product_id: int, changes: dict[str, Any]) -> Product:
        """Apply a partial update to a product."""
        product = await self.get(product_id)

        for field, value in changes.items():
            if field not in _UPDATABLE_FIELDS:
                continue
            if value is None and field in _REQUIRED_FIELDS:
                continue
            if field == "description":
                value = _clean_description(value)
            setattr(product, field, value)

        await self.db.flush()
        await self.db.refresh(product)
        return product

    async def delete(self, product_id: int) -> Product:
        """Delete a product and return it as it was."""
        product = await self.get(product_id)
        await self.db.delete(product)
        await self.db.flush()
        logger.info(f"Deleted product {product_id}")
        return product

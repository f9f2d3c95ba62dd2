"""In-memory product store."""

from __future__ import annotations

import logging
import re
import threading
from typing import Optional
from uuid import uuid4

from common.models import Product, ProductBase, ProductPage, ProductStats

from product_service.errors import NotFoundError

logger = logging.getLogger(__name__)

SEED_PRODUCTS = (
    Product(
        id="1",
        name="Laptop",
        description="High-performance laptop with 16GB RAM",
        price=1200,
        category="electronics",
        inStock=True,
    ),
    Product(
        id="2",
        name="Smartphone",
        description="Latest model with 128GB storage",
        price=800,
        category="electronics",
        inStock=True,
    ),
    Product(
        id="3",
        name="Coffee Maker",
        description="Programmable coffee maker with timer",
        price=50,
        category="kitchen",
        inStock=False,
    ),
)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(value: Optional[str]) -> Optional[int]:
    """Read a leading integer from a query value, ``None`` when there is none.

    Trailing characters are ignored, so ``"2abc"`` and ``"2.5"`` both read as 2.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


class ProductStore:
    """Insertion-ordered products keyed by id.

    Every operation holds one lock; records are immutable and replaced whole
    on update, so readers never see a partially updated product.
    """

    def __init__(self, products=SEED_PRODUCTS):
        self._lock = threading.RLock()
        self._seed = tuple(products)
        self._products: dict[str, Product] = {}
        self.reset()

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)

    def reset(self) -> None:
        """Drop all records and restore the seed products."""
        with self._lock:
            self._products = {product.id: product for product in self._seed}

    def list(
        self,
        category: Optional[str] = None,
        page: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> ProductPage:
        with self._lock:
            matching = [
                product
                for product in self._products.values()
                if not category or product.category == category
            ]

        # 0 and unparseable values fall back to the defaults; negatives are
        # left to slice semantics
        page_number = parse_int(page) or 1
        page_size = parse_int(limit) or len(matching)
        start = (page_number - 1) * page_size
        return ProductPage(
            total=len(matching),
            page=page_number,
            limit=page_size,
            products=matching[start : start + page_size],
        )

    def get(self, product_id: str) -> Product:
        with self._lock:
            product = self._products.get(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return product

    def create(self, fields: ProductBase) -> Product:
        product = Product(id=str(uuid4()), **fields.model_dump(by_alias=True))
        with self._lock:
            self._products[product.id] = product
        logger.debug("Created product %s", product.id)
        return product

    def update(self, product_id: str, fields: ProductBase) -> Product:
        with self._lock:
            if product_id not in self._products:
                raise NotFoundError("Product not found")
            product = Product(id=product_id, **fields.model_dump(by_alias=True))
            self._products[product_id] = product
        logger.debug("Updated product %s", product_id)
        return product

    def delete(self, product_id: str) -> None:
        with self._lock:
            if self._products.pop(product_id, None) is None:
                raise NotFoundError("Product not found")
        logger.debug("Deleted product %s", product_id)

    def search(self, name: Optional[str] = None) -> list[Product]:
        needle = (name or "").lower()
        with self._lock:
            return [p for p in self._products.values() if needle in p.name.lower()]

    def stats(self) -> ProductStats:
        counts: dict[str, int] = {}
        with self._lock:
            for product in self._products.values():
                counts[product.category] = counts.get(product.category, 0) + 1
            total = len(self._products)
        return ProductStats(count_by_category=counts, total=total)

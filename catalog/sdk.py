from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .core import (
    ProductNotFound, ProductValidationError,
    describe_validation_error, _make_product_dict
)
from .logger import get_logger
from .models import ProductIn

# This file contains the core logic behind the product endpoints.

log = get_logger("products")

SAMPLE_PRODUCTS = [
    {
        "title": "Smart Watch",
        "description": "Heart-rate tracking, GPS and a week of battery life.",
        "price": 1999,
        "category": "electronics",
        "image": "https://images.unsplash.com/photo-1523275335684-37898b6baf30?q=80&w=800&auto=format&fit=crop",
    },
    {
        "title": "Running Shoes",
        "description": "Lightweight trainers with a cushioned sole.",
        "price": 8999,
        "category": "sports",
        "image": "https://images.unsplash.com/photo-1542291026-7eec264c27ff?q=80&w=800&auto=format&fit=crop",
    },
    {
        "title": "Backpack",
        "description": "Water-resistant 25L daypack with a laptop sleeve.",
        "price": 1299,
        "category": "accessories",
    },
    {
        "title": "Wireless Headphones",
        "description": "Over-ear, noise cancelling, 30 hour battery.",
        "price": 14999,
        "category": "electronics",
    },
]


def list_products_logic(store, q: Optional[str] = None) -> List[Dict[str, Any]]:
    return store.find(title_contains=q or None)


def get_product_logic(store, product_id: str) -> Dict[str, Any]:
    p = store.get(product_id)
    if not p:
        raise ProductNotFound(product_id)
    return p


def create_product_logic(store, payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ProductValidationError("request body must be a JSON object")
    try:
        fields = ProductIn.model_validate(payload)
    except ValidationError as e:
        message = describe_validation_error(e.errors())
        log.debug("rejected product: %s", message)
        raise ProductValidationError(message) from e

    product = store.insert(_make_product_dict(fields))
    log.info("created product %s (%s)", product["id"], product["title"])
    return product


def ensure_seed_data(store) -> int:
    """Insert SAMPLE_PRODUCTS into an empty collection. Returns how many were added."""
    if store.count() > 0:
        return 0
    for p in SAMPLE_PRODUCTS:
        store.insert(_make_product_dict(ProductIn(**p)))
    log.info("seeded %d sample products", len(SAMPLE_PRODUCTS))
    return len(SAMPLE_PRODUCTS)


def health_logic(store) -> Dict[str, Any]:
    reachable = store.ping()
    return {
        "status": "ok" if reachable else "degraded",
        "backend": store.name,
        "database": "connected" if reachable else "unreachable",
    }

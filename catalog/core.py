from typing import Any, Dict, List

from .models import ProductIn

# Errors raised by the catalog logic and translated to HTTP responses in main.py


class CatalogError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ProductNotFound(CatalogError):
    status_code = 404

    def __init__(self, product_id: str):
        super().__init__("product not found")
        self.product_id = product_id


class ProductValidationError(CatalogError):
    status_code = 400


class StoreUnavailable(CatalogError):
    status_code = 503

    def __init__(self, message: str = "store unavailable"):
        super().__init__(message)


def describe_validation_error(errors: List[Dict[str, Any]]) -> str:
    """Flatten pydantic errors into 'field: reason; field: reason'."""
    parts = []
    for err in errors:
        field = ".".join(str(loc) for loc in err.get("loc", ())) or "body"
        reason = err.get("msg", "invalid value")
        if reason.startswith("Value error, "):
            reason = reason[len("Value error, "):]
        parts.append(f"{field}: {reason}")
    return "; ".join(parts) or "invalid product"


def _make_product_dict(p: ProductIn) -> Dict[str, Any]:
    return {
        "title": p.title,
        "description": p.description,
        "price": p.price,
        "image": p.image,
        "stock": p.stock,
        "category": p.category,
    }

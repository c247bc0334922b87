# storefront/client.py
import os
from typing import Any, Dict, List, Optional

import httpx
import requests
from dotenv import load_dotenv
from rich import print

load_dotenv()

DEFAULT_BASE_URL = os.getenv("STORE_API_URL", "http://127.0.0.1:8085")


class ProductNotFound(Exception):
    pass


class InvalidProduct(Exception):
    pass


def _detail(r) -> str:
    try:
        return r.json().get("detail", r.text)
    except ValueError:
        return r.text


class StoreClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: int = 10, session=None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def health(self) -> Dict[str, Any]:
        r = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def list_products(self, q: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {}
        if q:
            params["q"] = q
        r = self.session.get(f"{self.base_url}/api/products", params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_product(self, product_id: str) -> Dict[str, Any]:
        r = self.session.get(f"{self.base_url}/api/products/{product_id}", timeout=self.timeout)
        if r.status_code == 404:
            raise ProductNotFound(product_id)
        r.raise_for_status()
        return r.json()

    def create_product(self, title: str, price: float, **fields) -> Dict[str, Any]:
        payload = {"title": title, "price": price, **fields}
        r = self.session.post(f"{self.base_url}/api/products", json=payload, timeout=self.timeout)
        if r.status_code == 400:
            raise InvalidProduct(_detail(r))
        r.raise_for_status()
        return r.json()

    async def list_products_async(self, q: Optional[str] = None, transport=None) -> List[Dict[str, Any]]:
        params = {"q": q} if q else {}
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=transport) as client:
            r = await client.get("/api/products", params=params)
            r.raise_for_status()
            return r.json()


if __name__ == "__main__":
    import argparse
    from storefront.cart import CartStore, add, checkout, clear, decrement, increment, remove
    from storefront.storage import FileStorage

    parser = argparse.ArgumentParser(description="Storefront CLI")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="Catalog API base URL")
    parser.add_argument("--storage", default=None, help="Cart storage file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---------------------------
    # Product commands
    # ---------------------------
    lp = subparsers.add_parser("list-products", help="List products, newest first")
    lp.add_argument("--q", help="Only products whose title contains this text")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True, help="ID of the product")

    cp = subparsers.add_parser("create-product", help="Create a new product")
    cp.add_argument("--title", required=True, help="Product title")
    cp.add_argument("--price", type=float, required=True, help="Price in cents")
    cp.add_argument("--description", help="Product description")
    cp.add_argument("--category", help="Product category")
    cp.add_argument("--image", help="Image URL")
    cp.add_argument("--stock", type=int, help="Units on hand")

    # ---------------------------
    # Cart commands
    # ---------------------------
    add_p = subparsers.add_parser("add-to-cart", help="Add a product to the local cart")
    add_p.add_argument("--product-id", required=True, help="Product ID")

    for name, help_text in (("increment", "Increase a line's quantity by one"),
                            ("decrement", "Decrease a line's quantity by one (minimum 1)"),
                            ("remove-from-cart", "Remove a line from the cart")):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("--product-id", required=True, help="Product ID")

    subparsers.add_parser("view-cart", help="Show cart contents and total")
    subparsers.add_parser("clear-cart", help="Empty the cart")
    subparsers.add_parser("checkout", help="Mock checkout (clears the cart)")

    # ---------------------------
    # Parse and execute
    # ---------------------------
    args = parser.parse_args()
    c = StoreClient(base_url=args.base_url)
    cart = CartStore(FileStorage(args.storage) if args.storage else FileStorage())

    if args.command == "list-products":
        print(c.list_products(args.q))

    elif args.command == "get-product":
        print(c.get_product(args.product_id))

    elif args.command == "create-product":
        extra = {k: getattr(args, k) for k in ("description", "category", "image", "stock")
                 if getattr(args, k) is not None}
        print(c.create_product(args.title, args.price, **extra))

    elif args.command == "add-to-cart":
        print(cart.dispatch(add(c.get_product(args.product_id))))

    elif args.command == "increment":
        print(cart.dispatch(increment(args.product_id)))

    elif args.command == "decrement":
        print(cart.dispatch(decrement(args.product_id)))

    elif args.command == "remove-from-cart":
        print(cart.dispatch(remove(args.product_id)))

    elif args.command == "view-cart":
        state = cart.get()
        print({"items": [i.model_dump() for i in state.items], "total": state.total})

    elif args.command == "clear-cart":
        print(cart.dispatch(clear()))

    elif args.command == "checkout":
        print(checkout(cart))

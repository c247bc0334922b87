#!/usr/bin/env python
from storefront.cart import CartStore, add, checkout, decrement, format_price, increment, remove
from storefront.client import DEFAULT_BASE_URL, InvalidProduct, StoreClient
from storefront.storage import MemoryStorage


def main():
    c = StoreClient(base_url=DEFAULT_BASE_URL)
    cart = CartStore(MemoryStorage())
    cart.subscribe(lambda state: print(f"  cart: {state.count} item(s), total {format_price(state.total)}"))

    # -----------------------------
    # Create products
    # -----------------------------
    print("Creating products...")
    watch = c.create_product("Smart Watch", 1999, category="electronics")
    shoes = c.create_product("Running Shoes", 8999, category="sports")
    print(watch)
    print(shoes)

    print("\nCreating an invalid product...")
    try:
        c.create_product("Broken", -5)
    except InvalidProduct as e:
        print(f"  rejected: {e}")

    # -----------------------------
    # List and filter
    # -----------------------------
    print("\nListing products...")
    for p in c.list_products():
        print(f"  {p['id']}  {p['title']}  {format_price(p['price'])}")

    print("\nSearching for 'watch'...")
    print(c.list_products("watch"))

    # -----------------------------
    # Cart
    # -----------------------------
    print("\nFilling the cart...")
    cart.dispatch(add(watch))
    cart.dispatch(add(watch))
    cart.dispatch(add(shoes))
    cart.dispatch(increment(shoes["id"]))
    cart.dispatch(decrement(shoes["id"]))
    cart.dispatch(decrement(shoes["id"]))
    cart.dispatch(remove(shoes["id"]))

    # -----------------------------
    # Checkout
    # -----------------------------
    print("\nChecking out...")
    print(checkout(cart))


if __name__ == "__main__":
    main()

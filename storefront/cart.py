# storefront/cart.py
"""
Client-side shopping cart.

The cart is a small state machine: a pure reducer turns (state, action) into
a new immutable state, and CartStore holds the current state, mirrors every
change to local storage and notifies subscribers. Build one CartStore when
the client starts and hand it to whatever needs the cart.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

log = logging.getLogger(__name__)

CART_STORAGE_KEY = "cart"


class CartLineItem(BaseModel):
    """Snapshot of a product taken when it was added, plus a quantity."""
    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    title: str = ""
    description: str = ""
    price: float = Field(0, ge=0)
    image: Optional[str] = None
    stock: int = 100
    category: str = "general"
    qty: int = Field(1, ge=1)

    @property
    def line_total(self) -> float:
        return self.price * self.qty


class CartState(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: Tuple[CartLineItem, ...] = ()

    @property
    def total(self) -> float:
        return sum(item.price * item.qty for item in self.items)

    @property
    def count(self) -> int:
        return sum(item.qty for item in self.items)

    def find(self, product_id: str) -> Optional[CartLineItem]:
        for item in self.items:
            if item.id == product_id:
                return item
        return None


# ---------------------------
# Actions
# ---------------------------
ADD = "add"
INCREMENT = "increment"
DECREMENT = "decrement"
REMOVE = "remove"
CLEAR = "clear"


@dataclass(frozen=True)
class CartAction:
    type: str
    payload: Any = None


def add(product: Mapping[str, Any]) -> CartAction:
    return CartAction(ADD, dict(product))


def increment(product_id: str) -> CartAction:
    return CartAction(INCREMENT, product_id)


def decrement(product_id: str) -> CartAction:
    return CartAction(DECREMENT, product_id)


def remove(product_id: str) -> CartAction:
    return CartAction(REMOVE, product_id)


def clear() -> CartAction:
    return CartAction(CLEAR)


# ---------------------------
# Reducer
# ---------------------------
def _with_qty(state: CartState, product_id: str, change: Callable[[int], int]) -> CartState:
    items = tuple(
        item.model_copy(update={"qty": change(item.qty)}) if item.id == product_id else item
        for item in state.items
    )
    return CartState(items=items)


def cart_reducer(state: CartState, action: CartAction) -> CartState:
    if action.type == ADD:
        product = action.payload
        if "id" not in product:
            raise ValueError("cannot add a product without an id")
        if state.find(product["id"]) is not None:
            return _with_qty(state, product["id"], lambda q: q + 1)
        item = CartLineItem.model_validate({**product, "qty": 1})
        return CartState(items=state.items + (item,))

    if action.type == INCREMENT:
        return _with_qty(state, action.payload, lambda q: q + 1)

    if action.type == DECREMENT:
        # clamps at 1; only REMOVE drops a line
        return _with_qty(state, action.payload, lambda q: max(1, q - 1))

    if action.type == REMOVE:
        return CartState(items=tuple(i for i in state.items if i.id != action.payload))

    if action.type == CLEAR:
        return CartState()

    raise ValueError(f"unknown cart action: {action.type!r}")


# ---------------------------
# Persistence
# ---------------------------
_items_adapter = TypeAdapter(List[CartLineItem])


def dump_items(items: Tuple[CartLineItem, ...]) -> str:
    return _items_adapter.dump_json(list(items)).decode("utf-8")


def load_items(storage) -> Tuple[CartLineItem, ...]:
    raw = storage.get_item(CART_STORAGE_KEY)
    if raw is None:
        return ()
    try:
        items = tuple(_items_adapter.validate_json(raw))
    except ValidationError as e:
        log.warning("discarding unreadable saved cart: %s", e.error_count())
        return ()
    ids = [item.id for item in items]
    if len(set(ids)) != len(ids):
        log.warning("discarding saved cart with repeated product ids")
        return ()
    return items


# ---------------------------
# Store
# ---------------------------
Listener = Callable[[CartState], None]


class CartStore:
    def __init__(self, storage, reducer: Callable[[CartState, CartAction], CartState] = cart_reducer):
        self._storage = storage
        self._reducer = reducer
        self._state = CartState(items=load_items(storage))
        self._listeners: List[Listener] = []

    def get(self) -> CartState:
        return self._state

    def dispatch(self, action: CartAction) -> CartState:
        self._state = self._reducer(self._state, action)
        self._storage.set_item(CART_STORAGE_KEY, dump_items(self._state.items))
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


def format_price(amount: float) -> str:
    # prices are stored in cents
    return f"${amount / 100:.2f}"


def checkout(store: CartStore) -> str:
    """Mock checkout: build the success notice, then empty the cart."""
    state = store.get()
    notice = (
        f"Order placed! {state.count} item(s), total {format_price(state.total)}. "
        "Thank you for shopping with us."
    )
    store.dispatch(clear())
    return notice

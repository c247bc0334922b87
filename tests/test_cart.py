# tests/test_cart.py
import pytest

from storefront.cart import (
    CART_STORAGE_KEY, CartAction, CartState, CartStore, add, cart_reducer, checkout,
    clear, decrement, increment, load_items, remove
)
from storefront.storage import MemoryStorage

WATCH = {"id": "p1", "title": "Smart Watch", "price": 1999}
SHOES = {"id": "p2", "title": "Running Shoes", "price": 8999, "createdAt": "2024-01-01T00:00:00Z"}


def reduce_all(*actions, state=None):
    state = state or CartState()
    for action in actions:
        state = cart_reducer(state, action)
    return state


def test_add_same_product_merges():
    state = reduce_all(add({"id": "p1", "price": 1999}), add({"id": "p1"}))
    assert len(state.items) == 1
    assert state.items[0].qty == 2
    assert state.total == 3998


def test_repeated_adds_count_up():
    state = reduce_all(*[add(WATCH) for _ in range(7)], add(SHOES), add(WATCH))
    assert [(i.id, i.qty) for i in state.items] == [("p1", 8), ("p2", 1)]


def test_add_keeps_product_snapshot():
    state = reduce_all(add(SHOES))
    item = state.items[0]
    assert item.title == "Running Shoes"
    assert item.category == "general"
    assert item.model_dump()["createdAt"] == "2024-01-01T00:00:00Z"


def test_add_requires_id():
    with pytest.raises(ValueError):
        reduce_all(add({"title": "nameless"}))


def test_increment_and_decrement_clamp_at_one():
    state = reduce_all(add(WATCH), increment("p1"), increment("p1"))
    assert state.find("p1").qty == 3
    state = reduce_all(decrement("p1"), decrement("p1"), decrement("p1"), decrement("p1"), state=state)
    assert state.find("p1").qty == 1
    assert len(state.items) == 1


def test_quantity_changes_on_missing_lines_are_noops():
    state = reduce_all(add(WATCH))
    assert reduce_all(increment("zz"), decrement("zz"), remove("zz"), state=state) == state


def test_remove_drops_only_that_line():
    state = reduce_all(add(WATCH), add(SHOES), remove("p1"))
    assert [i.id for i in state.items] == ["p2"]
    assert state.total == 8999


def test_clear_empties_any_state():
    assert reduce_all(clear()).items == ()
    assert reduce_all(add(WATCH), add(SHOES), increment("p2"), clear()).items == ()


def test_actions_return_new_state():
    before = reduce_all(add(WATCH))
    after = cart_reducer(before, increment("p1"))
    assert before.items[0].qty == 1
    assert after.items[0].qty == 2


def test_total_follows_items():
    state = reduce_all(add(WATCH), add(SHOES), increment("p2"))
    assert state.total == 1999 + 2 * 8999
    state = cart_reducer(state, decrement("p2"))
    assert state.total == 1999 + 8999
    assert state.total == sum(i.price * i.qty for i in state.items)


def test_unknown_action():
    with pytest.raises(ValueError):
        cart_reducer(CartState(), CartAction("explode"))


def test_store_persists_every_change():
    storage = MemoryStorage()
    store = CartStore(storage)
    store.dispatch(add(WATCH))
    store.dispatch(add(SHOES))
    store.dispatch(increment("p2"))
    assert load_items(storage) == store.get().items

    rehydrated = CartStore(storage)
    assert rehydrated.get() == store.get()
    assert rehydrated.get().total == store.get().total


def test_store_starts_empty_on_missing_or_bad_data():
    assert CartStore(MemoryStorage()).get().items == ()
    assert CartStore(MemoryStorage({CART_STORAGE_KEY: "{not json"})).get().items == ()
    assert CartStore(MemoryStorage({CART_STORAGE_KEY: '[{"id": "p1", "qty": 0}]'})).get().items == ()

    repeated = '[{"id": "p1", "qty": 1}, {"id": "p1", "qty": 2}]'
    store = CartStore(MemoryStorage({CART_STORAGE_KEY: repeated}))
    assert store.get().items == ()
    store.dispatch(add({"id": "p1"}))
    assert [(i.id, i.qty) for i in store.get().items] == [("p1", 1)]


def test_subscribe_and_unsubscribe():
    store = CartStore(MemoryStorage())
    seen = []
    unsubscribe = store.subscribe(seen.append)
    store.dispatch(add(WATCH))
    unsubscribe()
    store.dispatch(add(WATCH))
    assert len(seen) == 1
    assert seen[0].items[0].qty == 1
    assert store.get().items[0].qty == 2


def test_checkout_clears_cart():
    storage = MemoryStorage()
    store = CartStore(storage)
    store.dispatch(add(WATCH))
    store.dispatch(add(WATCH))
    notice = checkout(store)
    assert "2 item(s)" in notice
    assert "$39.98" in notice
    assert store.get().items == ()
    assert load_items(storage) == ()

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from common.models import ProductBase

from product_service.errors import NotFoundError
from product_service.store import ProductStore, parse_int


def _fields(**overrides):
    fields = {
        "name": "Kettle",
        "description": "Electric kettle",
        "price": 30,
        "category": "kitchen",
        "inStock": True,
    }
    fields.update(overrides)
    return ProductBase.model_validate(fields)


@pytest.fixture
def store():
    return ProductStore()


@pytest.mark.parametrize(
    "raw, expected",
    [(None, None), ("", None), ("abc", None), ("3", 3), ("2abc", 2), ("2.5", 2), (" 4", 4), ("-1", -1)],
)
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


def test_seed_products(store):
    assert len(store) == 3
    assert [p.name for p in store.list().products] == ["Laptop", "Smartphone", "Coffee Maker"]


def test_list_filters_by_category(store):
    page = store.list(category="electronics")
    assert page.total == 2
    assert page.limit == 2
    assert {p.id for p in page.products} == {"1", "2"}


def test_list_paginates(store):
    page = store.list(page="2", limit="1")
    assert (page.total, page.page, page.limit) == (3, 2, 1)
    assert [p.id for p in page.products] == ["2"]


def test_list_past_the_end_is_empty(store):
    page = store.list(page="5", limit="2")
    assert page.total == 3
    assert page.products == []


def test_list_defaults_for_zero_and_garbage(store):
    page = store.list(page="0", limit="nope")
    assert (page.page, page.limit) == (1, 3)
    assert len(page.products) == 3


def test_list_negative_page_uses_slice_semantics(store):
    page = store.list(page="-1", limit="1")
    assert page.page == -1
    assert [p.id for p in page.products] == ["2"]


def test_get_unknown_raises(store):
    with pytest.raises(NotFoundError):
        store.get("missing")


def test_create_assigns_unique_ids(store):
    first = store.create(_fields())
    second = store.create(_fields())
    assert first.id != second.id
    assert store.get(first.id) == first
    assert store.list().products[-1] == second


def test_update_replaces_fields_in_place(store):
    updated = store.update("1", _fields(name="Gaming Laptop", category="electronics"))
    assert updated.id == "1"
    assert updated.name == "Gaming Laptop"
    assert store.list().products[0] == updated
    assert len(store) == 3


def test_update_unknown_raises_and_keeps_size(store):
    with pytest.raises(NotFoundError):
        store.update("missing", _fields())
    assert len(store) == 3


def test_delete(store):
    store.delete("3")
    assert len(store) == 2
    with pytest.raises(NotFoundError):
        store.delete("3")


def test_search_is_case_insensitive(store):
    assert [p.name for p in store.search("LAP")] == ["Laptop"]
    assert store.search("nothing like it") == []
    assert len(store.search("")) == 3
    assert len(store.search(None)) == 3


def test_stats(store):
    stats = store.stats()
    assert stats.count_by_category == {"electronics": 2, "kitchen": 1}
    assert stats.total == 3


def test_reset_restores_seed(store):
    store.delete("1")
    store.create(_fields())
    store.reset()
    assert [p.id for p in store.list().products] == ["1", "2", "3"]


def test_concurrent_writes_and_reads_stay_consistent(store):
    seen = []
    seen_lock = threading.Lock()

    def write(i):
        created = store.create(_fields(name=f"Item {i}", category=f"cat-{i % 4}"))
        store.update(created.id, _fields(name=f"Item {i} v2", category=f"cat-{i % 4}", price=i))
        store.update("1", _fields(name=f"Laptop {i}", category="electronics", price=i))
        return created.id

    def read(_):
        products = store.list().products
        stats = store.stats()
        assert stats.total == sum(stats.count_by_category.values())
        with seen_lock:
            seen.extend(products)

    with ThreadPoolExecutor(max_workers=16) as pool:
        writes = [pool.submit(write, i) for i in range(200)]
        reads = [pool.submit(read, i) for i in range(200)]
        ids = [f.result() for f in writes]
        for f in reads:
            f.result()

    assert len(set(ids)) == 200
    assert len(store) == 203
    assert store.stats().total == 203
    assert len({p.id for p in store.list().products}) == 203
    for product in seen:
        # an updated record carries every field from one update, never a mix
        if product.name.startswith("Item ") and product.name.endswith(" v2"):
            assert product.price == int(product.name.split()[1])
        elif product.id == "1" and product.name != "Laptop":
            assert product.price == int(product.name.split()[1])
            assert product.category == "electronics"

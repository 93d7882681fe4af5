from datetime import datetime, timedelta

import pytest

from meat_inventory.catalog import category_page, paginate, product_badges, route_for, search_products


def test_paginate_first_and_last_page():
    items = list(range(30))
    first = paginate(items, 1)
    assert first.items == list(range(12))
    assert first.total_pages == 3
    assert first.total_count == 30

    last = paginate(items, 3)
    assert last.items == list(range(24, 30))


def test_paginate_past_the_end_is_empty():
    page = paginate(list(range(5)), 4, per_page=2)
    assert page.items == []
    assert page.total_pages == 3


def test_paginate_empty():
    page = paginate([], 1)
    assert page.items == []
    assert page.total_pages == 0


@pytest.mark.parametrize("page, per_page", [(0, 12), (1, 0)])
def test_paginate_rejects_bad_arguments(page, per_page):
    with pytest.raises(ValueError):
        paginate([1, 2, 3], page, per_page)


def test_category_page_newest_first(records, record_factory):
    extra = [
        record_factory(str(i), f"Beef cut {i}", "beef", created=datetime(2024, 5, 1) + timedelta(days=i))
        for i in range(10, 25)
    ]
    page = category_page(records + extra, "Beef", page=1)
    assert page.total_count == 17
    assert page.total_pages == 2
    assert [r.id for r in page.items[:3]] == ["5", "1", "24"]
    assert len(page.items) == 12

    second = category_page(records + extra, "Beef", page=2)
    assert [r.id for r in second.items] == ["14", "13", "12", "11", "10"]


def test_category_page_unknown_category(records):
    assert category_page(records, "Lamb").total_count == 0


def test_product_badges(records, today):
    ribeye, pork, chicken, tilapia, brisket = records
    assert product_badges(ribeye, today) == {"stock": "Low Stock", "expiration": "Expiring Soon"}
    assert product_badges(pork, today) == {"stock": "In Stock", "expiration": None}
    assert product_badges(chicken, today) == {"stock": "Low Stock", "expiration": "Expired"}
    assert product_badges(tilapia, today) == {"stock": "Low Stock", "expiration": None}
    assert product_badges(brisket, today)["expiration"] == "Expiring Soon"


def test_route_for():
    assert route_for("Chicken") == "/chicken"
    assert route_for("Lamb") == "/products"


# =============================================================================
# search_products
# =============================================================================


@pytest.fixture
def skued(records):
    skus = ["BF-RIB-01", "PK-BEL-02", "CH-THI-03", "FS-TIL-04", "BF-BRI-05"]
    return [r.model_copy(update={"sku": sku}) for r, sku in zip(records, skus)]


def test_search_matches_name_case_insensitively(skued):
    page = search_products(skued, "RIB")
    assert [r.id for r in page.items] == ["1"]

    page = search_products(skued, "  b ")
    # name hits and SKU hits are the same three products
    assert [r.id for r in page.items] == ["5", "2", "1"]


def test_search_matches_sku(skued):
    page = search_products(skued, "bf-")
    assert [r.id for r in page.items] == ["5", "1"]
    assert page.per_page == 10


def test_search_no_match(skued):
    page = search_products(skued, "lamb")
    assert page.items == []
    assert page.total_count == 0
    assert page.total_pages == 0


@pytest.mark.parametrize("query", [None, "", "   "])
def test_search_empty_query_lists_everything(skued, query):
    page = search_products(skued, query, per_page=2)
    assert page.total_count == 5
    assert page.total_pages == 3
    assert [r.id for r in page.items] == ["5", "4"]


def test_search_ignores_missing_sku(records):
    assert search_products(records, "bf").total_count == 0

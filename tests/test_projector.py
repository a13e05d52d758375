from datetime import datetime

from amanice.catalog.projector import (
    EMPTY_PLACEHOLDER,
    featured_items,
    price_display,
    project,
    recently_added,
    resolve_category_card,
    stock_display,
)
from amanice.integrations.response_wrappers import normalize_product
from amanice.utils.config_loader import ProjectorConfig


def _p(**fields):
    fields.setdefault("id", fields.get("type", "x"))
    return normalize_product(fields)


def test_sneakers_become_fixed_link_not_a_group():
    products = [_p(id="1", type="Nike Sneaker", category="men"), _p(id="2", type="T-Shirt", category="men")]

    view = project(products, "men")

    assert [g.type_name for g in view.groups] == ["T-Shirt"]
    assert [(l.label, l.href) for l in view.special_links] == [("Sneakers", "sneakers.html")]
    assert view.placeholder is None


def test_groups_collapse_by_type_and_sort_case_insensitively():
    products = [
        _p(id="1", type="shorts", category="men"),
        _p(id="2", type="Polo Shirt", category="men"),
        _p(id="3", type="Polo Shirt ", category="MEN"),
        _p(id="4", type="Jacket", category="men"),
    ]

    view = project(products, "Men")

    assert [g.type_name for g in view.groups] == ["Jacket", "Polo Shirt", "shorts"]
    polo = view.groups[1]
    assert len(polo.products) == 2
    assert polo.link.href == "product-type.html?type=Polo%20Shirt&category=men"
    assert [l.label for l in view.links] == ["Jacket", "Polo Shirt", "shorts", "Sneakers"]


def test_shoe_flag_and_takkies_are_excluded():
    products = [
        _p(id="1", type="Formal", category="women", isShoe=True),
        _p(id="2", type="Ladies Takkies", category="women"),
    ]

    view = project(products, "women")

    assert view.groups == []
    assert view.placeholder == EMPTY_PLACEHOLDER
    assert [l.href for l in view.links] == ["sneakers.html"]


def test_kids_packs_become_fixed_link():
    products = [_p(id="1", type="Kids Clothing Pack", category="kids"), _p(id="2", type="Tracksuit", category="kids")]

    view = project(products, "kids")

    assert [g.type_name for g in view.groups] == ["Tracksuit"]
    assert [(l.label, l.href) for l in view.special_links] == [("Kids Clothing Packs", "kids-packs.html")]


def test_products_without_type_are_skipped():
    view = project([_p(id="1", type="  ", category="men")], "men")
    assert view.placeholder == EMPTY_PLACEHOLDER


def test_prefix_fallback_only_when_nothing_matches_exactly():
    products = [_p(id="1", type="Hoodie", category="mens")]

    assert [g.type_name for g in project(products, "men").groups] == ["Hoodie"]
    assert project(products, "men", ProjectorConfig(prefix_fallback=False)).groups == []

    mixed = products + [_p(id="2", type="Cap", category="men")]
    assert [g.type_name for g in project(mixed, "men").groups] == ["Cap"]


def test_card_resolution_by_title_then_index():
    titles = ["Men's Corner", "Ladies", "Kids Zone"]

    assert resolve_category_card(titles, "men") == 0
    assert resolve_category_card(titles, "kids") == 2
    assert resolve_category_card(titles, "women") == 1
    assert resolve_category_card(titles, "women", ProjectorConfig(index_fallback=False)) is None
    assert resolve_category_card(["Men's", "Women's"], "men") == 1
    assert resolve_category_card(["Men's"], "kids") is None


def test_featured_items_use_defaults_when_nothing_matches():
    items = featured_items([])

    assert [i.title for i in items] == ["Men's Sneakers", "Women's Sneakers", "Kids Clothing Packs"]
    assert [i.price for i in items] == ["R100 - R790", "R100 - R590", "R120"]
    assert items[0].image == "Assets/images/Mens sneakers.jpg"
    assert [i.link for i in items] == ["sneakers.html", "sneakers.html", "kids-packs.html"]


def test_featured_items_take_first_matching_product():
    products = [
        _p(id="1", type="Jordan Sneaker", category="men", image="Assets/uploads/j.jpg", priceRange="R900"),
        _p(id="2", type="Kids Pack", category="kids", description="Summer pack"),
    ]

    men, women, kids = featured_items(products)

    assert (men.image, men.price) == ("Assets/uploads/j.jpg", "R900")
    assert women.image == "Assets/images/Ladies takkies.jpg"
    assert kids.description == "Summer pack"
    assert kids.price == "R120"


def test_recently_added_newest_first_without_defaults():
    products = [
        _p(id="1", type="A", category="men", dateAdded="2024-01-01T10:00:00"),
        _p(id="2", type="B", category="men", dateAdded="2024-03-01T10:00:00"),
        _p(id="3", type="C", category="men", dateAdded="2024-05-01T10:00:00", isDefault=True),
        _p(id="4", type="D", category="men"),
        _p(id="5", type="E", category="men", dateAdded="2024-02-01T10:00:00+00:00"),
    ]

    assert [p.id for p in recently_added(products)] == ["2", "5", "1"]
    assert [p.id for p in recently_added(products, limit=1)] == ["2"]


def test_price_and_stock_display():
    assert price_display(_p(id="1", type="A", category="men", priceRange="R50-R100", price=10)) == "R50-R100"
    assert price_display(_p(id="2", type="A", category="men", price=99.5)) == "R99.50"
    assert price_display(_p(id="3", type="A", category="men")) == "Price on request"

    shoe = _p(id="4", type="Sneaker", category="men", isShoe=True, shoeSizes='[{"size": "8", "qty": 2}, {"size": "9", "qty": 5}]')
    assert stock_display(shoe) == "7 available"
    assert stock_display(_p(id="5", type="A", category="men", stockQuantity=3)) == "3 available"


def test_empty_category_matches_nothing():
    products = [_p(id="1", type="Shirt", category=""), _p(id="2", type="Dress", category="women")]

    view = project(products, "  ")

    assert view.groups == []
    assert view.placeholder == EMPTY_PLACEHOLDER


def test_zero_price_is_shown_not_hidden():
    assert price_display(_p(id="1", type="Freebie", category="kids", price=0)) == "R0.00"

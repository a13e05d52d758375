import pytest

from amanice.errors import NotFoundError, ValidationError
from amanice.integrations.contracts.interfaces import WriteSource


def _new_product(**overrides):
    payload = {"type": "Polo", "category": "men", "image": "Assets/uploads/polo.jpg", "priceRange": "R90"}
    payload.update(overrides)
    return payload


def test_refresh_merges_catalog_and_remote(engine, remote):
    remote.create_product(_new_product())

    products = engine.refresh()

    assert [p.id for p in products] == ["101", "102", "103", "104", "1"]
    assert [p.is_default for p in products] == [True, True, True, True, False]


def test_catalog_is_loaded_once(engine, catalog_source):
    engine.refresh()
    engine.refresh()
    engine.products()
    assert catalog_source.load_count == 1


def test_refresh_falls_back_to_local_overrides(engine, remote, local_store):
    remote.available = False
    local_store.add_product(engine._build(_new_product(type="Cap"), "admin-1"))

    products = engine.refresh()

    assert "admin-1" in [p.id for p in products]
    assert len(products) == 5


def test_save_normalizes_category(engine, remote):
    receipt = engine.save_product(_new_product(category="MEN"))

    assert receipt.source is WriteSource.REMOTE
    saved = engine.get_product(receipt.product_id)
    assert saved.category == "men"
    assert saved.is_default is False


def test_save_rejects_invalid_category_before_any_write(engine, remote, local_store):
    with pytest.raises(ValidationError) as exc:
        engine.save_product(_new_product(category="invalid"))

    assert "category" in exc.value.field_errors
    assert "create" not in remote.calls
    assert local_store.load_products() == []


def test_save_requires_type_category_and_image(engine):
    with pytest.raises(ValidationError) as exc:
        engine.save_product({"priceRange": "R10"})
    assert set(exc.value.field_errors) == {"type", "category", "image"}


def test_save_falls_back_to_local_store(engine, remote, local_store):
    remote.available = False

    receipt = engine.save_product(_new_product())

    assert receipt.source is WriteSource.LOCAL
    assert receipt.product_id == "admin-1700000000000"
    assert [p.id for p in local_store.load_products()] == ["admin-1700000000000"]
    assert "admin-1700000000000" in [p.id for p in engine.refresh()]


def test_new_remote_product_visible_without_refetch(engine, remote):
    engine.refresh()
    receipt = engine.save_product(_new_product())

    assert receipt.product_id in [p.id for p in engine.products()]


def test_editing_catalog_product_creates_replacement(engine, remote):
    receipt = engine.update_product("101", {"type": "Updated Shirt"})

    products = engine.refresh()
    ids = [p.id for p in products]
    assert "101" not in ids
    replacement = next(p for p in products if p.id == receipt.product_id)
    assert replacement.type == "Updated Shirt"
    assert replacement.original_id == "101"
    assert replacement.price_range == "R50-R100"


def test_editing_superseded_catalog_id_updates_the_replacement(engine, remote):
    first = engine.update_product("101", {"type": "Shirt v2"})
    second = engine.update_product("101", {"type": "Shirt v3"})

    assert second.product_id == first.product_id
    assert len(remote.list_products().value) == 1
    assert engine.get_product("101").type == "Shirt v3"


def test_update_remote_product(engine, remote):
    receipt = engine.save_product(_new_product())

    engine.update_product(receipt.product_id, {"priceRange": "R120", "category": "Women"})

    updated = next(p for p in engine.products() if p.id == receipt.product_id)
    assert updated.price_range == "R120"
    assert updated.category == "women"


def test_update_falls_back_to_local_when_remote_down(engine, remote, local_store):
    receipt = engine.save_product(_new_product())
    remote.available = False

    result = engine.update_product(receipt.product_id, {"description": "now local"})

    assert result.source is WriteSource.LOCAL
    assert local_store.find_product(receipt.product_id).description == "now local"


def test_update_unknown_product(engine):
    with pytest.raises(NotFoundError):
        engine.update_product("999", {"type": "Ghost"})


def test_update_with_invalid_category_is_rejected(engine, remote):
    with pytest.raises(ValidationError):
        engine.update_product("101", {"category": "pets"})
    assert "create" not in remote.calls


def test_delete_catalog_product_adds_tombstone(engine, local_store):
    receipt = engine.delete_product("103")

    assert receipt.source is WriteSource.LOCAL
    assert engine.is_deleted("103")
    assert local_store.tombstones() == ["103"]
    assert "103" not in [p.id for p in engine.refresh()]


def test_delete_remote_product(engine, remote):
    receipt = engine.save_product(_new_product())

    result = engine.delete_product(receipt.product_id)

    assert result.source is WriteSource.REMOTE
    assert remote.list_products().value == []
    assert receipt.product_id not in [p.id for p in engine.products()]


def test_delete_falls_back_to_local_when_remote_down(engine, remote, local_store):
    remote.available = False
    receipt = engine.save_product(_new_product())

    result = engine.delete_product(receipt.product_id)

    assert result.source is WriteSource.LOCAL
    assert local_store.load_products() == []


def test_remote_delete_failure_hides_product_locally(engine, remote, local_store):
    receipt = engine.save_product(_new_product())
    engine.refresh()
    remote.available = False

    result = engine.delete_product(receipt.product_id)

    assert result.source is WriteSource.LOCAL
    assert local_store.is_deleted(receipt.product_id)
    remote.available = True
    assert receipt.product_id not in [p.id for p in engine.refresh()]


def test_delete_unknown_product(engine):
    with pytest.raises(NotFoundError):
        engine.delete_product("nope")


def test_get_product_and_category_filter(engine):
    shirt = engine.get_product(101)
    assert shirt.type == "Shirt"
    assert shirt.is_default is True
    assert engine.get_product("missing") is None
    assert [p.id for p in engine.products_by_category("WOMEN")] == ["103"]

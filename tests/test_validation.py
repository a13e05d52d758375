import pytest

from amanice.errors import ValidationError
from amanice.integrations.contracts.products import validate_category
from amanice.validation import validate_new_product, validate_product_updates


def test_new_product_is_normalized_to_camel_case():
    data = validate_new_product(
        {
            "type": " Polo ",
            "category": "WOMEN",
            "imagePath": "Assets/uploads/polo.jpg",
            "price_range": "R90",
            "stock_quantity": "4",
            "is_shoe": "false",
            "original_id": 7,
        }
    )

    assert data["type"] == "Polo"
    assert data["category"] == "women"
    assert data["image"] == "Assets/uploads/polo.jpg"
    assert data["priceRange"] == "R90"
    assert data["stockQuantity"] == 4
    assert data["isShoe"] is False
    assert data["originalId"] == "7"


def test_single_error_becomes_the_message():
    with pytest.raises(ValidationError) as exc:
        validate_new_product({"type": "Polo", "category": "men"})
    assert exc.value.message == "Product image is required"


def test_negative_stock_and_bad_sizes_are_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_new_product(
            {"type": "Jordan", "category": "men", "image": "j.jpg", "stockQuantity": -1, "shoeSizes": "not json"}
        )
    assert set(exc.value.field_errors) == {"stockQuantity", "shoeSizes"}


def test_updates_keep_only_supplied_fields():
    assert validate_product_updates({"priceRange": "R10", "category": "Kids"}) == {"priceRange": "R10", "category": "kids"}


def test_empty_update_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_product_updates({})
    assert exc.value.message == "No fields to update"


def test_validate_category():
    assert validate_category("MEN") == "men"
    with pytest.raises(ValidationError):
        validate_category("invalid")

import json

import httpx
import pytest

from amanice.catalog.engine import ProductMergeEngine
from amanice.errors import NotFoundError, TransportError, ValidationError
from amanice.integrations.clients.real_http.catalog_source import HttpCatalogSource
from amanice.integrations.clients.real_http.remote_products import RemoteStoreClient
from amanice.integrations.contracts.interfaces import ShoeProduct, WriteSource


def _client(handler):
    return RemoteStoreClient(base_url="https://shop.example", transport=httpx.MockTransport(handler))


def test_list_products_normalizes_rows():
    def handler(request):
        assert request.url.path == "/admin/getProducts.php"
        return httpx.Response(
            200,
            json=[
                {"id": 5, "type": "Jordan", "category": "Men", "price": "450.00", "is_shoe": "1", "shoe_sizes": '[{"brand": "Nike", "size": "9", "qty": 2}]'},
                {"id": 4, "type": "Dress", "category": "women", "price_range": "R200", "stock_quantity": "3"},
                {"type": "no id"},
            ],
        )

    result = _client(handler).list_products()

    assert result.ok
    shoe, dress = result.value
    assert isinstance(shoe, ShoeProduct)
    assert (shoe.id, shoe.category, shoe.price, shoe.total_stock) == ("5", "men", 450.0, 2)
    assert (dress.price_range, dress.stock_quantity) == ("R200", 3)


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="boom"),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"status": "error", "message": "Database connection failed"}),
    ],
)
def test_list_products_failures_are_returned_not_raised(response):
    result = _client(lambda request: response).list_products()
    assert not result.ok
    assert result.error.message


def test_list_products_transport_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    result = _client(handler).list_products()
    assert not result.ok
    assert "unreachable" in result.error.message


def test_unconfigured_client_fails_without_request():
    client = RemoteStoreClient(base_url="", transport=httpx.MockTransport(lambda r: pytest.fail("no request expected")))
    client.base_url = ""
    assert not client.list_products().ok
    with pytest.raises(TransportError):
        client.create_product({"type": "x"})


def test_create_product_posts_payload_and_returns_id():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"status": "success", "id": 42})

    new_id = _client(handler).create_product({"type": "Cap", "category": "men", "image": "x.jpg"})

    assert new_id == "42"
    assert seen["path"] == "/admin/saveProduct.php"
    assert seen["body"]["type"] == "Cap"


def test_update_and_delete_send_id():
    bodies = []

    def handler(request):
        bodies.append((request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"status": "success"})

    client = _client(handler)
    client.update_product("7", {"priceRange": "R10"})
    client.delete_product("7")

    assert bodies == [
        ("/admin/updateProduct.php", {"id": "7", "priceRange": "R10"}),
        ("/admin/deleteProduct.php", {"id": "7"}),
    ]


def test_write_error_mapping():
    def not_found(request):
        return httpx.Response(404, json={"status": "error", "message": "Product not found"})

    def invalid(request):
        return httpx.Response(400, json={"status": "error", "message": "Invalid category. Must be one of: men, women, kids"})

    def server(request):
        return httpx.Response(500, json={"status": "error", "message": "Database error"})

    with pytest.raises(NotFoundError):
        _client(not_found).delete_product("1")
    with pytest.raises(ValidationError):
        _client(invalid).create_product({"category": "pets"})
    with pytest.raises(TransportError):
        _client(server).update_product("1", {"type": "x"})


def test_create_without_id_is_transport_error():
    with pytest.raises(TransportError):
        _client(lambda request: httpx.Response(200, json={"status": "success"})).create_product({"type": "x"})


def test_http_catalog_source():
    def handler(request):
        return httpx.Response(200, json={"products": [{"id": "1", "type": "Shirt", "category": "men"}]})

    source = HttpCatalogSource("https://shop.example/products.json", transport=httpx.MockTransport(handler))
    assert [p.id for p in source.load()] == ["1"]

    broken = HttpCatalogSource("https://shop.example/products.json", transport=httpx.MockTransport(lambda r: httpx.Response(404)))
    assert broken.load() == []


@pytest.mark.parametrize("status_code", [401, 403, 404])
def test_bare_http_error_without_store_message_is_transport_error(status_code):
    client = _client(lambda request: httpx.Response(status_code, text="<html>Forbidden</html>"))

    with pytest.raises(TransportError) as exc:
        client.create_product({"type": "Cap", "category": "men", "image": "x.jpg"})
    assert exc.value.payload == {"status_code": status_code}


def test_engine_saves_locally_when_remote_answers_bare_403(catalog_source, local_store):
    remote = _client(lambda request: httpx.Response(403, text="<html>Forbidden</html>"))
    engine = ProductMergeEngine(catalog_source, remote, local_store, clock=lambda: 1_700_000_000.0)

    receipt = engine.save_product({"type": "Cap", "category": "men", "image": "Assets/uploads/cap.jpg"})

    assert receipt.source is WriteSource.LOCAL
    assert [p.id for p in local_store.load_products()] == ["admin-1700000000000"]

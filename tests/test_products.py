"""Tests for the product pages and form handlers."""
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from catalog.services.product_service import ProductService


def _create(client, **overrides):
    data = {"name": "Pen", "description": "", "price": "1.5", "stock": "10", "imageUrl": ""}
    data.update(overrides)
    return client.post("/products", data=data, follow_redirects=False)


def test_create_product_redirects_to_list(client):
    """Creating a product redirects to the listing, which shows it."""
    response = _create(client)

    assert response.status_code == 302
    assert response.headers["location"] == "/products"

    listing = client.get("/products")
    assert listing.status_code == 200
    assert "Pen" in listing.text
    assert "$1.50" in listing.text


def test_create_product_empty_name(client, product_count):
    """An empty name re-renders the form with the error and stores nothing."""
    response = _create(client, name="", description="Blue ink")

    assert response.status_code == 200
    assert "Create New Product" in response.text
    assert "Product name cannot be empty" in response.text
    # Submitted values are kept in the form
    assert "Blue ink" in response.text
    assert product_count() == 0


def test_create_product_reports_every_error(client, product_count):
    response = _create(client, name="", price="-1", stock="abc")

    assert response.status_code == 200
    assert "Product name cannot be empty" in response.text
    assert "Price must be greater than or equal to 0" in response.text
    assert "Stock must be an integer" in response.text
    assert product_count() == 0


def test_create_product_unknown_field(client, product_count):
    response = _create(client, color="blue")

    assert response.status_code == 200
    assert "Unknown field" in response.text
    assert product_count() == 0


def test_list_products_empty(client):
    response = client.get("/products")

    assert response.status_code == 200
    assert "No products found." in response.text


def test_create_form(client):
    response = client.get("/products/create")

    assert response.status_code == 200
    assert 'action="/products"' in response.text
    assert 'name="imageUrl"' in response.text


def test_get_product(client):
    _create(client, description="Blue ink")

    response = client.get("/products/1")

    assert response.status_code == 200
    assert "Pen" in response.text
    assert "Blue ink" in response.text
    assert "$1.50" in response.text
    assert "10 units" in response.text


def test_get_product_not_found(client):
    response = client.get("/products/999999")

    assert response.status_code == 404
    assert "Product not found" in response.text


def test_non_numeric_id_not_found(client):
    assert client.get("/products/abc").status_code == 404


def test_edit_form_prefilled(client):
    _create(client, imageUrl="https://example.com/pen.png")

    response = client.get("/products/1/edit")

    assert response.status_code == 200
    assert 'action="/products/1?_method=PUT"' in response.text
    assert 'value="Pen"' in response.text
    assert 'value="1.50"' in response.text
    assert 'value="10"' in response.text
    assert "https://example.com/pen.png" in response.text


def test_edit_form_not_found(client):
    assert client.get("/products/999999/edit").status_code == 404


def test_update_product_via_method_override(client):
    """HTML forms reach the update handler with POST ?_method=PUT."""
    _create(client)

    response = client.post(
        "/products/1?_method=PUT",
        data={"name": "Marker", "description": "Black", "price": "3.25", "stock": "4", "imageUrl": ""},
        follow_redirects=False
    )

    assert response.status_code == 302
    assert response.headers["location"] == "/products/1"

    detail = client.get("/products/1")
    assert "Marker" in detail.text
    assert "$3.25" in detail.text
    assert "4 units" in detail.text


def test_update_product_with_put(client):
    _create(client)

    response = client.put(
        "/products/1",
        data={"name": "Marker", "price": "2", "stock": "1"},
        follow_redirects=False
    )

    assert response.status_code == 302
    assert "Marker" in client.get("/products/1").text


def test_update_product_invalid_price(client):
    """A negative price re-renders the edit form and leaves the row alone."""
    _create(client)

    response = client.post(
        "/products/1?_method=PUT",
        data={"name": "Pen", "price": "-5", "stock": "10"},
        follow_redirects=False
    )

    assert response.status_code == 200
    assert "Edit Product" in response.text
    assert "Price must be greater than or equal to 0" in response.text
    assert 'value="-5"' in response.text

    detail = client.get("/products/1")
    assert "$1.50" in detail.text


def test_update_product_not_found(client):
    response = client.post(
        "/products/999999?_method=PUT",
        data={"name": "Pen", "price": "1", "stock": "1"}
    )

    assert response.status_code == 404


def test_delete_product_via_method_override(client):
    _create(client)

    response = client.post("/products/1?_method=DELETE", follow_redirects=False)

    assert response.status_code == 302
    assert response.headers["location"] == "/products"

    assert client.get("/products/1").status_code == 404
    assert 'href="/products/1"' not in client.get("/products").text


def test_delete_product_not_found(client):
    assert client.delete("/products/999999").status_code == 404


def test_unsupported_method_override_ignored(client):
    """Only PUT, PATCH and DELETE may be tunnelled; anything else stays a POST."""
    _create(client)

    response = client.post("/products/1?_method=GET")

    assert response.status_code == 405
    assert client.get("/products/1").status_code == 200


def test_unknown_route(client):
    response = client.get("/does-not-exist")

    assert response.status_code == 404
    assert "Page not found" in response.text


def test_storage_error_renders_500(app, monkeypatch):
    """Database failures surface as a 500 error page with the message."""
    def broken_list_all(self):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(ProductService, "list_all", broken_list_all)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/products")

    assert response.status_code == 500
    assert "500 Error" in response.text
    assert "database is locked" in response.text
    # Tracebacks are only shown in development
    assert "Traceback" not in response.text


def test_storage_error_shows_traceback_in_development(settings, monkeypatch):
    from catalog.main import create_app

    def broken_list_all(self):
        raise RuntimeError("boom")

    monkeypatch.setattr(ProductService, "list_all", broken_list_all)
    app = create_app(settings.model_copy(update={"ENV": "development"}))

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/products")

    assert response.status_code == 500
    assert "boom" in response.text
    assert "Traceback" in response.text


def test_create_product_price_too_large(client, product_count):
    """Out-of-range prices re-render the form instead of failing the request."""
    response = _create(client, price="1e30")

    assert response.status_code == 200
    assert "Price must be at most 99999999.99" in response.text
    assert product_count() == 0


def test_create_product_stock_too_large(client, product_count):
    response = _create(client, stock="99999999999999999999")

    assert response.status_code == 200
    assert "Stock must be at most 2147483647" in response.text
    assert product_count() == 0


def test_update_product_price_too_large(client):
    _create(client)

    response = client.post(
        "/products/1?_method=PUT",
        data={"name": "Pen", "price": "100000000", "stock": "10"},
        follow_redirects=False
    )

    assert response.status_code == 200
    assert "Price must be at most 99999999.99" in response.text
    assert "$1.50" in client.get("/products/1").text

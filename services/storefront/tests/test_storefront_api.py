from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.fixture()
def app(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ORDERDESK_ORDER_SERVICE", "mock")
    monkeypatch.setenv("ORDERDESK_REDIRECT_DELAY_MS", "3000")

    import services.storefront.app.services.order_service_factory as factory
    from services.storefront.app.main import app
    from services.storefront.app.services.store import store

    monkeypatch.setattr(factory, "_MOCK_SERVICE", None)
    store.clear()
    return app


@pytest.fixture()
def client(app) -> TestClient:
    with TestClient(app) as c:
        yield c


def _fill(client: TestClient, **overrides: str) -> dict:
    values = {
        "customer_name": "Jane Doe",
        "product_id": "1",
        "quantity": "3",
        "customer_email": "jane@x.com",
    }
    values.update(overrides)
    data = {}
    for name, value in values.items():
        resp = client.post("/composer/field", json={"name": name, "value": value})
        assert resp.status_code == 200
        data = resp.json()
    return data


def _place_order(client: TestClient) -> str:
    client.get("/")
    _fill(client)
    resp = client.post("/composer/submit")
    assert resp.status_code == 200
    data = resp.json()
    assert data["outcome"] == "PLACED"
    return data["order"]["order_id"]


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_composer_mount_lists_catalog(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert "orderdesk_session" in resp.cookies

    data = resp.json()
    assert data["draft"] == {
        "customer_name": "",
        "product_id": "",
        "quantity": "",
        "customer_email": "",
    }
    assert data["products"][0] == {"value": "1", "label": "Widget - 10.00"}
    assert data["total_cost"] == "0.00"
    assert data["can_submit"] is False


def test_filling_the_form_prices_the_order(client: TestClient) -> None:
    client.get("/")
    data = _fill(client)

    assert data["total_cost"] == "30.00"
    assert data["can_submit"] is True


def test_blur_reports_field_error(client: TestClient) -> None:
    client.get("/")
    client.post("/composer/field", json={"name": "quantity", "value": "0"})

    data = client.post("/composer/blur", json={"name": "quantity"}).json()

    assert data["errors"] == {"quantity": "Quantity must be at least 1"}
    assert data["can_submit"] is False


def test_unknown_field_is_422(client: TestClient) -> None:
    resp = client.post("/composer/field", json={"name": "coupon", "value": "FREE"})
    assert resp.status_code == 422


def test_invalid_submit_returns_errors(client: TestClient) -> None:
    client.get("/")
    _fill(client, customer_email="not-an-email")

    data = client.post("/composer/submit").json()

    assert data["outcome"] == "INVALID"
    assert data["notification"] is None
    assert data["view"]["errors"] == {"customer_email": "Please enter a valid email address"}
    assert data["view"]["draft"]["customer_email"] == "not-an-email"


def test_submit_resets_the_form(client: TestClient) -> None:
    client.get("/")
    _fill(client)

    data = client.post("/composer/submit").json()

    assert data["outcome"] == "PLACED"
    assert data["notification"]["level"] == "success"
    assert data["order"]["status"] == "Order Placed"
    assert data["order"]["total_cost"] == "30.00"
    assert data["view"]["draft"]["customer_name"] == ""
    assert data["view"]["total_cost"] == "0.00"


def test_sessions_keep_separate_drafts(app) -> None:
    with TestClient(app) as alice, TestClient(app) as bob:
        alice.get("/")
        bob.get("/")
        _fill(alice)

        assert bob.get("/").json()["draft"]["customer_name"] == ""
        assert alice.get("/").json()["draft"]["customer_name"] == "Jane Doe"


def test_confirmation_flow_confirms_once(client: TestClient) -> None:
    order_id = _place_order(client)

    resp = client.get(f"/confirm-order/{order_id}")
    assert resp.status_code == 200
    assert resp.headers["Refresh"] == "3; url=/"

    data = resp.json()
    assert data["state"] == "Confirmed"
    assert data["details"]["order_id"] == order_id
    assert data["details"]["product_name"] == "Widget"
    assert data["details"]["quantity"] == 3
    assert data["notifications"] == [
        {"level": "success", "message": "Order confirmed! You will receive a confirmation email."}
    ]

    # Rendering the same visit again must not hit the Order Service a second time; the
    # mock would reject a second confirm and flip the state to ConfirmFailed.
    again = client.get(f"/confirm-order/{order_id}").json()
    assert again == data


def test_new_session_sees_already_confirmed(app, client: TestClient) -> None:
    order_id = _place_order(client)
    client.get(f"/confirm-order/{order_id}")

    with TestClient(app) as other:
        data = other.get(f"/confirm-order/{order_id}").json()

    assert data["state"] == "AlreadyConfirmed"
    assert data["headline"] == "Order already confirmed"
    assert data["details"] is None
    assert data["notifications"][0]["level"] == "info"


def test_missing_order_reports_fetch_failure(client: TestClient) -> None:
    resp = client.get("/confirm-order/does-not-exist")

    assert resp.status_code == 200
    assert resp.headers["Refresh"] == "3; url=/"
    data = resp.json()
    assert data["state"] == "Error"
    assert data["notifications"][0]["message"] == "Failed to fetch order details."


def test_unknown_adapter_is_500(monkeypatch: pytest.MonkeyPatch, app) -> None:
    monkeypatch.setenv("ORDERDESK_ORDER_SERVICE", "nope")

    with TestClient(app) as c:
        resp = c.get("/")

    assert resp.status_code == 500
    assert "Unknown ORDERDESK_ORDER_SERVICE" in resp.json()["detail"]

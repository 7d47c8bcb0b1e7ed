from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import SQLAlchemyError

from app.data.models import CartItemModel, OrderModel, PaymentModel, ProductModel
from app.domain.errors import NoValidItems
from app.services.checkout_service import CheckoutService
from app.services.lock_service import LockService


def add(client, user, product_id, quantity):
    resp = client.post("/cart", json={"productId": product_id, "quantity": quantity}, headers=user["headers"])
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def checkout(client, user, item_ids):
    payload = {
        "cartItemIds": item_ids,
        "billingAddress": "1 Billing St",
        "shippingAddress": "2 Shipping Ave",
    }
    return client.post("/billing", json=payload, headers=user["headers"])


def test_signup_login_add_checkout_scenario(client, make_product):
    resp = client.post("/auth/signup", json={"email": "a@x.com", "password": "secret1"})
    assert resp.status_code == 200

    login = client.post("/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert login.status_code == 200
    assert client.post("/auth/login", json={"email": "a@x.com", "password": "nope123"}).status_code == 401

    user = {"headers": {"Authorization": f"Bearer {login.json()['data']['accessToken']}"}}
    p1 = make_product(price="100.00")
    item = add(client, user, p1.id, 2)

    resp = checkout(client, user, [item["id"]])

    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Order created successfully"
    assert body["data"]["totalAmount"] == 200.0
    assert body["data"]["paymentIntentId"] == "pi_test_1"
    assert body["data"]["clientSecret"] == "pi_test_1_secret_abc"


def test_checkout_creates_order_items_and_payment(client, user, make_product, fake_stripe, session_factory):
    p1 = make_product(price="100.00", name="P1")
    p2 = make_product(price="19.99", name="P2")
    i1 = add(client, user, p1.id, 2)
    i2 = add(client, user, p2.id, 3)

    data = checkout(client, user, [i1["id"], i2["id"]]).json()["data"]

    assert data["totalAmount"] == 259.97

    intent = fake_stripe.PaymentIntent.created[0]
    assert intent["amount"] == 25997
    assert intent["currency"] == "usd"
    assert intent["metadata"] == {"orderId": str(data["orderId"]), "userId": str(user["id"])}
    assert intent["idempotency_key"].startswith(f"order_{data['orderId']}_")

    with session_factory() as s:
        order = s.get(OrderModel, data["orderId"])
        assert order.status == "PENDING"
        assert order.total_amount == Decimal("259.97")
        assert order.payment_intent_id == "pi_test_1"
        assert order.billing_address == "1 Billing St"
        assert order.shipping_address == "2 Shipping Ave"
        assert sum(i.price * i.quantity for i in order.items) == order.total_amount

        payment = s.query(PaymentModel).filter_by(order_id=order.id).one()
        assert payment.status == "PENDING"
        assert payment.amount == Decimal("259.97")
        assert payment.payment_intent_id == "pi_test_1"


def test_order_item_prices_are_frozen(client, user, make_product, db):
    product = make_product(price="100.00")
    item = add(client, user, product.id, 2)
    order_id = checkout(client, user, [item["id"]]).json()["data"]["orderId"]

    db.get(ProductModel, product.id).price = Decimal("999.00")
    db.commit()

    order = client.get(f"/orders/{order_id}", headers=user["headers"]).json()["data"]
    assert order["totalAmount"] == 200.0
    assert [(i["productId"], i["quantity"], i["price"]) for i in order["items"]] == [(product.id, 2, 100.0)]
    assert order["payment"]["status"] == "PENDING"


def test_checkout_removes_only_consumed_items(client, user, make_product, session_factory):
    p1 = make_product(name="P1")
    p2 = make_product(name="P2")
    bought = add(client, user, p1.id, 1)
    kept = add(client, user, p2.id, 1)

    assert checkout(client, user, [bought["id"]]).status_code == 200

    with session_factory() as s:
        remaining = [i.id for i in s.query(CartItemModel).filter_by(user_id=user["id"])]
    assert remaining == [kept["id"]]


@pytest.mark.parametrize("ids", [[], [12345]])
def test_checkout_without_valid_items(client, user, ids, session_factory):
    resp = checkout(client, user, ids)

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "No valid cart items found"}
    with session_factory() as s:
        assert s.query(OrderModel).count() == 0


def test_checkout_ignores_foreign_cart_items(client, user, other_user, make_product, session_factory, fake_stripe):
    product = make_product()
    foreign = add(client, other_user, product.id, 4)

    resp = checkout(client, user, [foreign["id"]])

    assert resp.status_code == 400
    assert fake_stripe.PaymentIntent.created == []
    with session_factory() as s:
        # pozycja drugiego usera nietknieta
        assert s.get(CartItemModel, foreign["id"]).quantity == 4


def test_checkout_mixed_ids_uses_only_own_items(client, user, other_user, make_product):
    product = make_product(price="50.00")
    own = add(client, user, product.id, 1)
    foreign = add(client, other_user, product.id, 10)

    data = checkout(client, user, [own["id"], foreign["id"], own["id"]]).json()["data"]

    assert data["totalAmount"] == 50.0


def test_payment_provider_failure_leaves_no_order(app, user, make_product, fake_stripe, session_factory):
    product = make_product()
    client = TestClient(app, raise_server_exceptions=False)
    item = add(client, user, product.id, 1)
    fake_stripe.PaymentIntent.fail_create = True

    resp = checkout(client, user, [item["id"]])

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Internal server error"}
    with session_factory() as s:
        assert s.query(OrderModel).count() == 0
        assert s.query(PaymentModel).count() == 0
        assert s.get(CartItemModel, item["id"]) is not None


def test_concurrent_checkout_is_rejected(client, user, make_product, lock_service, session_factory):
    product = make_product()
    item = add(client, user, product.id, 1)
    lock_service.acquire(LockService.checkout_key(user["id"]), "other-request", 30)

    resp = checkout(client, user, [item["id"]])

    assert resp.status_code == 409
    assert resp.json()["error"] == "Checkout already in progress"
    with session_factory() as s:
        assert s.query(OrderModel).count() == 0


def test_checkout_releases_lock(client, user, make_product, lock_service):
    product = make_product()
    item = add(client, user, product.id, 1)

    checkout(client, user, [item["id"]])
    checkout(client, user, [item["id"]])

    assert lock_service.locks == {}


def test_commit_failure_cancels_payment_intent(client, user, make_product, db, payment_gateway, lock_service, fake_stripe, session_factory):
    product = make_product()
    item = add(client, user, product.id, 1)

    svc = CheckoutService(db, payment_gateway=payment_gateway, lock_service=lock_service)

    def broken_commit():
        raise SQLAlchemyError("disk full")

    svc.orders.commit = broken_commit

    with pytest.raises(SQLAlchemyError):
        svc.checkout(user["id"], [item["id"]], "billing", "shipping")

    assert fake_stripe.PaymentIntent.cancelled == ["pi_test_1"]
    assert lock_service.locks == {}
    with session_factory() as s:
        assert s.query(OrderModel).count() == 0
        assert s.get(CartItemModel, item["id"]) is not None


def test_checkout_after_compensation_uses_new_idempotency_key(client, user, make_product, db, payment_gateway, lock_service, fake_stripe, session_factory):
    product = make_product()
    item = add(client, user, product.id, 1)

    svc = CheckoutService(db, payment_gateway=payment_gateway, lock_service=lock_service)

    def broken_commit():
        raise SQLAlchemyError("disk full")

    svc.orders.commit = broken_commit

    with pytest.raises(SQLAlchemyError):
        svc.checkout(user["id"], [item["id"]], "billing", "shipping")

    resp = checkout(client, user, [item["id"]])
    assert resp.status_code == 200
    data = resp.json()["data"]

    first, second = [i["idempotency_key"] for i in fake_stripe.PaymentIntent.created]
    assert first != second
    assert second.startswith(f"order_{data['orderId']}_")
    assert fake_stripe.PaymentIntent.cancelled == ["pi_test_1"]
    assert data["paymentIntentId"] == "pi_test_2"

    with session_factory() as s:
        order = s.get(OrderModel, data["orderId"])
        assert order.payment_intent_id == "pi_test_2"


def test_cart_delete_failure_keeps_order(user, make_product, db, payment_gateway, lock_service, session_factory, client):
    product = make_product()
    item = add(client, user, product.id, 1)

    svc = CheckoutService(db, payment_gateway=payment_gateway, lock_service=lock_service)

    def broken_delete(user_id, item_ids):
        raise SQLAlchemyError("cart table locked")

    svc.carts.delete_items = broken_delete

    result = svc.checkout(user["id"], [item["id"]], "billing", "shipping")

    assert result.payment_intent_id == "pi_test_1"
    assert lock_service.locks == {}
    with session_factory() as s:
        assert s.query(OrderModel).count() == 1
        assert s.get(OrderModel, result.order_id).payment_intent_id == "pi_test_1"
        assert s.get(CartItemModel, item["id"]) is not None


def test_cancel_failure_does_not_mask_commit_error(client, user, make_product, db, payment_gateway, lock_service, fake_stripe, session_factory):
    product = make_product()
    item = add(client, user, product.id, 1)

    svc = CheckoutService(db, payment_gateway=payment_gateway, lock_service=lock_service)

    def broken_commit():
        raise SQLAlchemyError("disk full")

    def broken_cancel(intent, **kwargs):
        raise RuntimeError("stripe is down")

    svc.orders.commit = broken_commit
    fake_stripe.PaymentIntent.cancel = broken_cancel

    with pytest.raises(SQLAlchemyError, match="disk full"):
        svc.checkout(user["id"], [item["id"]], "billing", "shipping")

    assert lock_service.locks == {}
    with session_factory() as s:
        assert s.query(OrderModel).count() == 0
        assert s.get(CartItemModel, item["id"]) is not None


def test_service_raises_no_valid_items(db, payment_gateway, lock_service):
    svc = CheckoutService(db, payment_gateway=payment_gateway, lock_service=lock_service)

    with pytest.raises(NoValidItems):
        svc.checkout(1, [], "billing", "shipping")


def test_orders_are_scoped_to_owner(client, user, other_user, make_product):
    product = make_product()
    item = add(client, user, product.id, 1)
    order_id = checkout(client, user, [item["id"]]).json()["data"]["orderId"]

    assert client.get(f"/orders/{order_id}", headers=other_user["headers"]).status_code == 404
    assert client.get("/orders", headers=other_user["headers"]).json()["data"] == []

    mine = client.get("/orders", headers=user["headers"]).json()["data"]
    assert [o["id"] for o in mine] == [order_id]


@pytest.mark.parametrize(
    "payload",
    [
        {"billingAddress": "a", "shippingAddress": "b"},
        {"cartItemIds": [1], "shippingAddress": "b"},
        {"cartItemIds": "1", "billingAddress": "a", "shippingAddress": "b"},
    ],
)
def test_billing_validation(client, user, payload):
    resp = client.post("/billing", json=payload, headers=user["headers"])

    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid input data"

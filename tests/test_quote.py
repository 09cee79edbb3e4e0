from asyncio import run

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from app.core.exceptions import ForbiddenError, InvalidStateError, ResourceNotFoundError, ValidationError
from app.services import quote_service
from app.services.quote_service import build_quote_items, parse_items_list


def _set_credit(db, account_id, credit):
    run(db.users.update_one({"_id": ObjectId(account_id)}, {"$set": {"credit": credit}}))


def _credit(db, account_id):
    return run(db.users.find_one({"_id": ObjectId(account_id)}))["credit"]


def _quote_count(db):
    return run(db.quotes.count_documents({}))


def _setup_shop(session, prices):
    """Creates one category/sub-category and a product per (label, price)."""
    category = session.post("/api/category/create", json={"name": "General"}).json()["category"]
    sub = session.post(
        "/api/subcategory/create", json={"name": "All", "category": category["_id"]}
    ).json()["subCategory"]
    products = {}
    for label, price in prices.items():
        product = session.post(
            "/api/product/create",
            json={"label": label, "sellingPrice": price, "subCategory": sub["_id"]}
        ).json()["product"]
        products[label] = product["_id"]
    return products


def _customer(session, name="Sharma Hardware"):
    return session.post(
        "/api/customer/create", json={"name": name, "number": "9811111111", "address": "Sector 5"}
    ).json()["customer"]["_id"]


@pytest.fixture
def shop(login, db):
    session = login("9000000001", name="Ravi")
    products = _setup_shop(session, {"prodX": 100, "prodY": 40, "prodZ": 12.5})
    customer_id = _customer(session)
    return session, products, customer_id


def test_quote_scenario_drops_zero_quantity(shop, db):
    session, products, customer_id = shop
    _set_credit(db, session.account_id, 5)

    response = session.post("/api/quote/create", json={
        "customerId": customer_id,
        "itemsList": {products["prodX"]: 2, products["prodY"]: 0},
    })

    assert response.status_code == 201
    data = response.json()
    quote = data["quote"]
    assert quote["totalAmount"] == 200
    assert quote["status"] == "Draft"
    assert quote["customer"] == customer_id
    assert quote["items"] == [{
        "product": products["prodX"],
        "productLabel": "prodX",
        "sellingPrice": 100,
        "quantity": 2,
    }]
    assert data["newCredit"] == 4
    assert _credit(db, session.account_id) == 4


def test_total_is_sum_of_stored_price_times_quantity(shop, db):
    session, products, customer_id = shop

    response = session.post("/api/quote/create", json={
        "customerId": customer_id,
        "itemsList": {products["prodX"]: 3, products["prodY"]: 2, products["prodZ"]: 4},
    })

    assert response.status_code == 201
    assert response.json()["quote"]["totalAmount"] == 100 * 3 + 40 * 2 + 12.5 * 4


def test_client_supplied_price_is_ignored(shop, db):
    session, products, customer_id = shop

    response = session.post("/api/quote/create", json={
        "customerId": customer_id,
        "itemsList": {products["prodX"]: 1},
        "sellingPrice": 1,
        "totalAmount": 1,
    })

    assert response.json()["quote"]["totalAmount"] == 100


def test_empty_items_list_is_rejected(shop, db):
    session, _, customer_id = shop

    for body in [{"customerId": customer_id, "itemsList": {}}, {"customerId": customer_id}, {"itemsList": {"x": 1}}]:
        response = session.post("/api/quote/create", json=body)
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    assert _quote_count(db) == 0


def test_all_non_positive_quantities_is_invalid_state(shop, db):
    session, products, customer_id = shop
    before = _credit(db, session.account_id)

    response = session.post("/api/quote/create", json={
        "customerId": customer_id,
        "itemsList": {products["prodX"]: 0, products["prodY"]: -3},
    })

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STATE"
    assert response.json()["message"] == "No valid items to quote."
    assert _quote_count(db) == 0
    assert _credit(db, session.account_id) == before


def test_bad_quantities_are_validation_errors(shop, db):
    session, products, customer_id = shop

    for quantity in ["2", True, 0.5, None]:
        response = session.post("/api/quote/create", json={
            "customerId": customer_id,
            "itemsList": {products["prodX"]: quantity},
        })
        assert response.status_code == 400, quantity

    bad_key = session.post("/api/quote/create", json={"customerId": customer_id, "itemsList": {"nope": 1}})
    assert bad_key.status_code == 400
    assert _quote_count(db) == 0


def test_foreign_customer_is_not_found(shop, login, db):
    session, products, _ = shop
    intruder = login("9000000002")
    foreign_customer = _customer(intruder, "Not Yours")
    before = _credit(db, session.account_id)

    response = session.post("/api/quote/create", json={
        "customerId": foreign_customer,
        "itemsList": {products["prodX"]: 1},
    })

    assert response.status_code == 404
    assert response.json()["message"] == "Customer not found."
    assert _quote_count(db) == 0
    assert _credit(db, session.account_id) == before


def test_foreign_products_are_not_priced(shop, login, db):
    session, products, customer_id = shop
    intruder = login("9000000002")
    intruder_customer = _customer(intruder)

    only_foreign = intruder.post("/api/quote/create", json={
        "customerId": intruder_customer,
        "itemsList": {products["prodX"]: 1},
    })
    assert only_foreign.status_code == 400
    assert only_foreign.json()["code"] == "INVALID_STATE"

    unknown_mixed = session.post("/api/quote/create", json={
        "customerId": customer_id,
        "itemsList": {products["prodY"]: 1, str(ObjectId()): 5},
    })
    assert unknown_mixed.status_code == 201
    assert unknown_mixed.json()["quote"]["totalAmount"] == 40


def test_no_credit_left_is_forbidden(shop, db):
    session, products, customer_id = shop
    _set_credit(db, session.account_id, 0)

    response = session.post("/api/quote/create", json={
        "customerId": customer_id,
        "itemsList": {products["prodX"]: 1},
    })

    assert response.status_code == 403
    assert _quote_count(db) == 0
    assert _credit(db, session.account_id) == 0


def test_snapshot_survives_price_change(shop, db):
    session, products, customer_id = shop
    created = session.post("/api/quote/create", json={
        "customerId": customer_id,
        "itemsList": {products["prodX"]: 2},
    }).json()["quote"]

    run(db.products.update_one({"_id": ObjectId(products["prodX"])}, {"$set": {"selling_price": 999, "label": "renamed"}}))

    fetched = session.get(f"/api/quote/{created['_id']}").json()["quote"]
    assert fetched["items"][0]["sellingPrice"] == 100
    assert fetched["items"][0]["productLabel"] == "prodX"
    assert fetched["totalAmount"] == 200


def test_idempotency_key_prevents_double_billing(shop, db):
    session, products, customer_id = shop
    _set_credit(db, session.account_id, 3)
    body = {
        "customerId": customer_id,
        "itemsList": {products["prodX"]: 1},
        "idempotencyKey": "draft-42",
    }

    first = session.post("/api/quote/create", json=body)
    second = session.post("/api/quote/create", json=body)

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["quote"]["_id"] == second.json()["quote"]["_id"]
    assert second.json()["newCredit"] == 2
    assert _quote_count(db) == 1
    assert _credit(db, session.account_id) == 2


def test_my_quotes_and_detail(shop, login, db):
    session, products, customer_id = shop
    first = session.post("/api/quote/create", json={
        "customerId": customer_id, "itemsList": {products["prodX"]: 1},
    }).json()["quote"]
    second = session.post("/api/quote/create", json={
        "customerId": customer_id, "itemsList": {products["prodY"]: 1},
    }).json()["quote"]

    quotes = session.get("/api/quote/get-my-quotes").json()["quotes"]
    assert [q["_id"] for q in quotes] == [second["_id"], first["_id"]]
    assert quotes[0]["customer"] == {
        "_id": customer_id,
        "name": "Sharma Hardware",
        "number": "9811111111",
        "address": None,
    }

    detail = session.get(f"/api/quote/{first['_id']}").json()["quote"]
    assert detail["customer"]["address"] == "Sector 5"

    intruder = login("9000000002")
    assert intruder.get("/api/quote/get-my-quotes").json()["quotes"] == []
    assert intruder.get(f"/api/quote/{first['_id']}").status_code == 404


# ----------------------------------------------------------------
# Service level
# ----------------------------------------------------------------

def test_parse_items_list_keeps_order():
    a, b = ObjectId(), ObjectId()
    parsed = parse_items_list({str(b): 1, str(a): 2})
    assert list(parsed.items()) == [(b, 1), (a, 2)]

    with pytest.raises(ValidationError):
        parse_items_list([])


def test_build_quote_items_uses_stored_prices_only():
    x, y, missing = ObjectId(), ObjectId(), ObjectId()
    products = [
        {"_id": x, "label": "X", "selling_price": 100},
        {"_id": y, "label": "Y", "selling_price": 7},
    ]

    items, total = build_quote_items(products, {x: 2, y: 0, missing: 4})

    assert total == 200
    assert items == [{"product": x, "product_label": "X", "selling_price": 100, "quantity": 2}]


class _FailingInserts:
    def __init__(self, inner):
        self._inner = inner

    def __getattr__(self, name):
        return getattr(self._inner, name)

    async def insert_one(self, *args, **kwargs):
        raise PyMongoError("write failed")


def test_failed_insert_refunds_credit(shop, db, monkeypatch):
    session, products, customer_id = shop
    _set_credit(db, session.account_id, 5)
    monkeypatch.setattr(quote_service, "get_quotes_collection", lambda: _FailingInserts(db["quotes"]))

    with pytest.raises(PyMongoError):
        run(quote_service.create_quote(ObjectId(session.account_id), customer_id, {products["prodX"]: 1}))

    assert _credit(db, session.account_id) == 5
    assert _quote_count(db) == 0


def test_service_errors(shop, db):
    session, products, customer_id = shop
    account_id = ObjectId(session.account_id)

    with pytest.raises(ResourceNotFoundError):
        run(quote_service.create_quote(account_id, str(ObjectId()), {products["prodX"]: 1}))

    with pytest.raises(InvalidStateError):
        run(quote_service.create_quote(account_id, customer_id, {products["prodX"]: 0}))

    _set_credit(db, session.account_id, 0)
    with pytest.raises(ForbiddenError):
        run(quote_service.create_quote(account_id, customer_id, {products["prodX"]: 1}))


@pytest.mark.parametrize("token", ["NaN", "Infinity", "-Infinity"])
def test_non_finite_quantities_are_rejected(shop, db, token):
    session, products, customer_id = shop
    before = _credit(db, session.account_id)
    # Raw body: the JSON parser accepts these bare tokens, httpx will not emit them
    body = f'{{"customerId": "{customer_id}", "itemsList": {{"{products["prodX"]}": {token}}}}}'

    response = session.post("/api/quote/create", content=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert _quote_count(db) == 0
    assert _credit(db, session.account_id) == before
    assert session.get("/api/quote/get-my-quotes").status_code == 200


def test_parse_items_list_rejects_non_finite():
    for quantity in [float("nan"), float("inf"), float("-inf")]:
        with pytest.raises(ValidationError):
            parse_items_list({str(ObjectId()): quantity})

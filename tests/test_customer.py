def test_create_customer(login):
    session = login()

    response = session.post(
        "/api/customer/create",
        json={"name": "Sharma Hardware", "address": "Sector 5", "number": "9811111111"}
    )

    assert response.status_code == 201
    customer = response.json()["customer"]
    assert customer["name"] == "Sharma Hardware"
    assert customer["address"] == "Sector 5"
    assert customer["number"] == "9811111111"
    assert customer["user"] == session.account_id


def test_customer_requires_name_and_number(login):
    session = login()

    no_name = session.post("/api/customer/create", json={"number": "9811111111"})
    assert no_name.status_code == 400
    assert no_name.json()["message"] == "Customer name is required."

    no_number = session.post("/api/customer/create", json={"name": "Sharma"})
    assert no_number.status_code == 400
    assert no_number.json()["message"] == "Customer number is required."


def test_my_customers_newest_first_and_scoped(login):
    owner = login("9000000001")
    other = login("9000000002")

    for name in ["First", "Second", "Third"]:
        owner.post("/api/customer/create", json={"name": name, "number": "9811111111"})
    other.post("/api/customer/create", json={"name": "Elsewhere", "number": "9822222222"})

    names = [c["name"] for c in owner.get("/api/customer/get-my-customers").json()["customers"]]
    assert names == ["Third", "Second", "First"]

    others = [c["name"] for c in other.get("/api/customer/get-my-customers").json()["customers"]]
    assert others == ["Elsewhere"]

CUSTOMER_PHONE = "+254700000001"
OWNER_PHONE = "+254711111111"


def register_pair(client):
    customer = client.post("/customers", json={"phone_number": CUSTOMER_PHONE, "name": "Asha"})
    business = client.post(
        "/businesses",
        json={"phone_number": OWNER_PHONE, "name": "Glow Salon", "category": "salon"},
    )
    assert customer.status_code == 201
    assert business.status_code == 201
    return customer.json(), business.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_end_to_end_check_ins(client):
    _, business = register_pair(client)

    first = client.post(
        f"/businesses/{business['id']}/check-ins",
        json={"customer_phone": CUSTOMER_PHONE, "points": 10},
    )
    assert first.status_code == 201
    assert first.json()["points_earned"] == 10

    points = client.get(f"/customers/{CUSTOMER_PHONE}/points").json()
    assert points["available_points"] == 10
    assert points["total_visits"] == 1

    client.post(
        f"/businesses/{business['id']}/check-ins",
        json={"customer_phone": CUSTOMER_PHONE, "points": 15},
    )
    points = client.get(f"/customers/{CUSTOMER_PHONE}/points").json()
    assert points["available_points"] == 25
    assert points["total_visits"] == 2

    visits = client.get(f"/businesses/{business['id']}/visits", params={"limit": 1}).json()["visits"]
    assert len(visits) == 1
    assert visits[0]["points_earned"] == 15
    assert visits[0]["customer_name"] == "Asha"


def test_identity_lookup(client):
    response = client.get(f"/identity/customer/{CUSTOMER_PHONE}")
    assert response.json() == {
        "status": "not_found",
        "role": "customer",
        "registration_required": True,
        "customer": None,
        "business": None,
    }

    register_pair(client)
    body = client.get(f"/identity/business/{OWNER_PHONE}").json()
    assert body["status"] == "found"
    assert body["business"]["name"] == "Glow Salon"
    assert body["business"]["type"] == "salon"


def test_unknown_role_is_validation_error(client):
    response = client.get(f"/identity/admin/{CUSTOMER_PHONE}")
    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"


def test_duplicate_registration(client):
    register_pair(client)
    response = client.post("/customers", json={"phone_number": CUSTOMER_PHONE, "name": "Other"})
    assert response.status_code == 409
    assert response.json()["error"] == "duplicate_key"


def test_check_in_unregistered_customer(client, fake_db):
    _, business = register_pair(client)
    response = client.post(
        f"/businesses/{business['id']}/check-ins",
        json={"customer_phone": "+254799999999", "points": 10},
    )
    assert response.status_code == 404
    assert response.json()["error"] == "customer_not_found"
    assert fake_db.tables["visits"] == []


def test_check_in_points_above_maximum(client, fake_db):
    _, business = register_pair(client)
    response = client.post(
        f"/businesses/{business['id']}/check-ins",
        json={"customer_phone": CUSTOMER_PHONE, "points": 101},
    )
    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"
    assert fake_db.tables["visits"] == []


def test_bad_category(client):
    response = client.post(
        "/businesses",
        json={"phone_number": OWNER_PHONE, "name": "Iron Gym", "category": "gym"},
    )
    assert response.status_code == 422
    assert response.json()["error"] == "validation_error"


def test_short_phone(client):
    response = client.post("/customers", json={"phone_number": "0700", "name": "Asha"})
    assert response.status_code == 422
    assert response.json()["detail"] == "Please enter a valid phone number"


def test_store_timeout_surfaces_as_503(client, fake_db):
    import httpx

    fake_db.pending_errors = [httpx.ReadTimeout("timed out")]
    response = client.get(f"/customers/{CUSTOMER_PHONE}/points")
    assert response.status_code == 503
    assert response.json()["error"] == "persistence_failure"


def test_customer_dashboard(client, fake_db):
    _, business = register_pair(client)
    fake_db.insert_row("rewards", {
        "business_id": business["id"],
        "name": "Free wash",
        "points_required": 10,
    })
    client.post(
        f"/businesses/{business['id']}/check-ins",
        json={"customer_phone": CUSTOMER_PHONE},
    )

    body = client.get(f"/customers/{CUSTOMER_PHONE}/dashboard").json()
    assert body["points"]["available_points"] == 10
    assert body["rewards"][0]["redeemable"] is True
    assert body["rewards"][0]["business_name"] == "Glow Salon"
    assert len(body["insights"]) == 4


def test_customer_dashboard_unknown_phone(client):
    body = client.get("/customers/+254799999999/dashboard").json()
    assert body["status"] == "not_found"
    assert body["registration_required"] is True


def test_business_dashboard_and_rewards(client, fake_db):
    _, business = register_pair(client)
    fake_db.insert_row("rewards", {
        "business_id": business["id"],
        "name": "Free wash",
        "points_required": 10,
    })

    dashboard = client.get(f"/businesses/{business['id']}/dashboard").json()
    assert dashboard["analytics"]["total_customers"] == 0
    assert dashboard["recent_visits"] == []
    assert dashboard["insights"][1] == "🎯 Start by getting your first customers!"

    rewards = client.get(f"/businesses/{business['id']}/rewards").json()["rewards"]
    assert [r["name"] for r in rewards] == ["Free wash"]
    assert rewards[0]["redeemable"] is None

    catalogue = client.get("/rewards").json()["rewards"]
    assert catalogue[0]["business_type"] == "salon"


def test_unknown_business_dashboard(client, fake_db):
    response = client.get("/businesses/00000000-0000-0000-0000-000000000000/dashboard")
    assert response.status_code == 404
    assert response.json()["error"] == "business_not_found"


def test_malformed_business_id_is_validation_error(client, fake_db):
    register_pair(client)
    for method, path in [
        ("post", "/businesses/abc/check-ins"),
        ("get", "/businesses/abc/analytics"),
        ("get", "/businesses/abc/visits"),
        ("get", "/businesses/abc/rewards"),
        ("get", "/businesses/abc/dashboard"),
    ]:
        response = client.request(method, path, json={"customer_phone": CUSTOMER_PHONE, "points": 10})
        assert response.status_code == 422, path
        assert response.json()["error"] == "validation_error"
    assert fake_db.tables["visits"] == []


def test_business_analytics_by_owner_phone(client):
    _, business = register_pair(client)
    client.post(
        f"/businesses/{business['id']}/check-ins",
        json={"customer_phone": CUSTOMER_PHONE, "points": 10},
    )

    body = client.get(f"/identity/business/{OWNER_PHONE}/analytics").json()
    assert body["total_customers"] == 1
    assert body["total_visits"] == 1

    response = client.get("/identity/business/+254799999999/analytics")
    assert response.status_code == 404
    assert response.json()["error"] == "business_not_found"

from decimal import Decimal


def _register(client, username="jan", email="jan@example.com", password="secret123"):
    return client.post("/api/auth/register", json={"username": username, "email": email, "password": password})


def test_register_returns_user_and_token(client):
    resp = _register(client)

    assert resp.status_code == 201
    body = resp.json()
    assert body["user"]["email"] == "jan@example.com"
    assert body["user"]["role"] == "customer"
    assert "password_hash" not in body["user"]

    profile = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {body['token']}"})
    assert profile.status_code == 200
    assert profile.json()["user"]["username"] == "jan"


def test_register_validation_and_duplicates(client):
    assert _register(client, password="123").status_code == 422
    assert _register(client, email="not-an-email").status_code == 422
    assert _register(client).status_code == 201

    resp = _register(client, username="other")

    assert resp.status_code == 409


def test_login(client):
    _register(client)

    ok = client.post("/api/auth/login", json={"email": "JAN@example.com", "password": "secret123"})
    assert ok.status_code == 200
    assert ok.json()["message"] == "Login successful"

    bad = client.post("/api/auth/login", json={"email": "jan@example.com", "password": "wrong-one"})
    assert bad.status_code == 401
    assert bad.json() == {"detail": "Invalid credentials"}

    unknown = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "secret123"})
    assert unknown.status_code == 401


def test_profile_needs_a_valid_token(client):
    assert client.get("/api/auth/profile").json() == {"detail": "Authorization header required"}
    resp = client.get("/api/auth/profile", headers={"Authorization": "Token abc"})
    assert resp.status_code == 401
    assert "Bearer" in resp.json()["detail"]
    resp = client.get("/api/auth/profile", headers={"Authorization": "Bearer abc"})
    assert resp.json() == {"detail": "Invalid or expired token"}


def test_points_and_wallet(client, make_user, auth_headers, admin_headers):
    user = make_user(wallet_balance="100.00")
    headers = auth_headers(user)

    assert Decimal(client.get("/api/points", headers=headers).json()["balance"]) == Decimal("100")

    resp = client.post(f"/api/admin/users/{user.id}/wallet", json={"amount": "50.00"}, headers=admin_headers)
    assert resp.status_code == 200
    assert Decimal(resp.json()["balance"]) == Decimal("150")

    resp = client.post(f"/api/admin/users/{user.id}/wallet", json={"amount": "-200.00"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json() == {"detail": "insufficient balance"}
    assert Decimal(client.get("/api/points", headers=headers).json()["balance"]) == Decimal("150")

    resp = client.post(f"/api/admin/users/{user.id}/wallet", json={"amount": "-150.00"}, headers=admin_headers)
    assert Decimal(resp.json()["balance"]) == Decimal("0")

    assert client.post(f"/api/admin/users/{user.id}/wallet", json={"amount": "0"}, headers=admin_headers).status_code == 400
    assert client.post("/api/admin/users/999/wallet", json={"amount": "5"}, headers=admin_headers).status_code == 404
    assert client.post(f"/api/admin/users/{user.id}/wallet", json={"amount": "5"}, headers=headers).status_code == 403


def test_admin_lists_customers_only(client, make_user, admin_headers):
    make_user()
    make_user()

    body = client.get("/api/admin/customers", headers=admin_headers).json()

    assert body["total"] == 2
    assert all(c["role"] == "customer" for c in body["customers"])


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_username_is_trimmed_and_must_not_be_blank(client):
    assert _register(client, username="   ").status_code == 422

    resp = _register(client, username="  ann  ", email="ann@example.com")

    assert resp.status_code == 201
    assert resp.json()["user"]["username"] == "ann"

from gamereview.models import Activity


def test_register_returns_token_and_records_activity(client, db):
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "newbie", "email": "newbie@example.com", "password": "hunter22"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"]
    assert body["user"]["username"] == "newbie"
    assert body["user"]["role"] == "user"
    assert db.query(Activity).filter(Activity.type == "user_registered").count() == 1


def test_register_duplicate_email_conflicts(client, user):
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "someone_else", "email": user.email, "password": "hunter22"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "CONFLICT"


def test_register_validates_body(client):
    response = client.post(
        "/api/v1/auth/register",
        json={"username": "ab", "email": "not-an-email", "password": "x"},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_login_and_me(client, user, password):
    response = client.post("/api/v1/auth/login", json={"email": user.email, "password": password})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == user.id


def test_login_wrong_password(client, user):
    response = client.post("/api/v1/auth/login", json={"email": user.email, "password": "wrong-one"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials", "code": "AUTHENTICATION_ERROR"}


def test_me_requires_token(client):
    assert client.get("/api/v1/auth/me").status_code == 401
    bad = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer garbage"})
    assert bad.status_code == 401
    assert bad.json()["code"] == "AUTHENTICATION_ERROR"

from users_service.services.tokens import TokenService

REGISTRATION = {
    "email": "a@x.com",
    "firstName": "A",
    "lastName": "B",
    "password": "secret1",
}


def test_register_returns_token_and_public_projection(client, users_collection, hasher):
    res = client.post("/api/auth/register", json=REGISTRATION)

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["data"]["token"]
    user = body["data"]["user"]
    assert user["email"] == "a@x.com"
    assert user["firstName"] == "A"
    assert user["role"] == "user"
    assert "password" not in user
    assert "passwordHash" not in user
    assert "secret1" not in res.text

    stored = users_collection.find_one({"email": "a@x.com"})
    assert stored["passwordHash"] != "secret1"
    assert "secret1" not in str(stored)
    assert hasher.verify("secret1", stored["passwordHash"])


def test_register_with_optional_profile_fields(client):
    address = {"street": "123 Test St", "city": "Test City", "state": "TS", "zipCode": "12345", "country": "USA"}
    res = client.post(
        "/api/auth/register",
        json={**REGISTRATION, "phoneNumber": "+1234567890", "address": address},
    )

    assert res.status_code == 201
    user = res.json()["data"]["user"]
    assert user["phoneNumber"] == "+1234567890"
    assert user["address"] == address


def test_register_normalizes_email(client):
    res = client.post("/api/auth/register", json={**REGISTRATION, "email": "  Mixed@Case.COM "})

    assert res.status_code == 201
    assert res.json()["data"]["user"]["email"] == "mixed@case.com"


def test_register_missing_fields(client):
    res = client.post("/api/auth/register", json={"email": "a@x.com"})

    assert res.status_code == 400
    assert res.json() == {
        "success": False,
        "error": "Email, firstName, lastName, and password are required",
    }


def test_register_invalid_email(client):
    res = client.post("/api/auth/register", json={**REGISTRATION, "email": "invalid-email"})

    assert res.status_code == 400
    assert "valid email" in res.json()["error"]


def test_register_short_password(client):
    res = client.post("/api/auth/register", json={**REGISTRATION, "password": "123"})

    assert res.status_code == 400
    assert "6 characters" in res.json()["error"]


def test_register_duplicate_email(client):
    assert client.post("/api/auth/register", json=REGISTRATION).status_code == 201

    res = client.post("/api/auth/register", json={**REGISTRATION, "email": "A@X.COM"})

    assert res.status_code == 409
    assert res.json()["success"] is False
    assert "already exists" in res.json()["error"]


def test_register_duplicate_caught_by_unique_index(client, repository, monkeypatch):
    assert client.post("/api/auth/register", json=REGISTRATION).status_code == 201
    monkeypatch.setattr(repository, "email_taken", lambda email, exclude_id=None: False)

    res = client.post("/api/auth/register", json=REGISTRATION)

    assert res.status_code == 409
    assert res.json() == {"success": False, "error": "User with this email already exists"}


def test_register_rejects_non_ascii_email(client):
    res = client.post("/api/auth/register", json={**REGISTRATION, "email": "élève@école.fr"})

    assert res.status_code == 400
    assert res.json()["error"] == "Please enter a valid email address"


def test_register_rejects_wrongly_typed_body(client):
    res = client.post("/api/auth/register", json={**REGISTRATION, "email": ["a@x.com"]})

    assert res.status_code == 400
    assert res.json()["success"] is False


def test_login_success(client, make_user):
    user = make_user(email="test@example.com", password="password123")

    res = client.post("/api/auth/login", json={"email": "TEST@example.com", "password": "password123"})

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["user"]["id"] == user.id
    assert "password" not in data["user"]
    assert "passwordHash" not in data["user"]
    assert TokenService("test-jwt-secret-key").verify(data["token"]) == user.id


def test_login_missing_fields(client):
    res = client.post("/api/auth/login", json={"email": "test@example.com"})

    assert res.status_code == 400
    assert "required" in res.json()["error"]


def test_login_failures_are_indistinguishable(client, make_user):
    make_user(email="test@example.com", password="password123")

    wrong_password = client.post("/api/auth/login", json={"email": "test@example.com", "password": "nope-nope"})
    unknown_email = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "password123"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json()
    assert wrong_password.json()["error"] == "Invalid email or password"


def test_login_account_without_password(client, make_user):
    make_user(email="nopass@example.com", password=None)

    res = client.post("/api/auth/login", json={"email": "nopass@example.com", "password": "anything"})

    assert res.status_code == 401
    assert res.json()["error"] == "Invalid email or password"


def test_me_returns_fresh_profile(client, make_user, auth_headers, repository):
    user = make_user()
    repository.update_profile(user.id, {"first_name": "Renamed"})

    res = client.get("/api/auth/me", headers=auth_headers(user))

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["email"] == user.email
    assert data["firstName"] == "Renamed"
    assert "password" not in data


def test_me_requires_token(client):
    res = client.get("/api/auth/me")

    assert res.status_code == 401
    assert res.json() == {"success": False, "error": "Access token is required"}


def test_me_rejects_invalid_token(client):
    res = client.get("/api/auth/me", headers={"Authorization": "Bearer invalid-token"})

    assert res.status_code == 401
    assert res.json()["error"] == "Invalid or expired token"


def test_me_rejects_token_from_another_key(client, make_user):
    user = make_user()
    foreign = TokenService("some-other-secret").issue(user.id)

    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {foreign}"})

    assert res.status_code == 401
    assert res.json()["error"] == "Invalid or expired token"


def test_token_for_deleted_account_is_rejected(client, make_user, auth_headers, repository):
    user = make_user()
    headers = auth_headers(user)
    repository.delete_user(user.id)

    res = client.get("/api/auth/me", headers=headers)

    assert res.status_code == 401
    assert res.json()["error"] == "Invalid or expired token"


def test_change_password(client, make_user, auth_headers, users_collection, hasher):
    user = make_user(password="password123")

    res = client.patch(
        "/api/auth/password",
        json={"currentPassword": "password123", "newPassword": "brand-new-pass"},
        headers=auth_headers(user),
    )

    assert res.status_code == 200
    assert res.json()["message"] == "Password updated successfully"
    stored = users_collection.find_one({"email": user.email})["passwordHash"]
    assert hasher.verify("brand-new-pass", stored)
    assert not hasher.verify("password123", stored)

    login = client.post("/api/auth/login", json={"email": user.email, "password": "brand-new-pass"})
    assert login.status_code == 200


def test_change_password_requires_current_password(client, make_user, auth_headers):
    user = make_user(password="password123")

    res = client.patch(
        "/api/auth/password",
        json={"currentPassword": "wrong-one", "newPassword": "brand-new-pass"},
        headers=auth_headers(user),
    )

    assert res.status_code == 401
    assert res.json()["error"] == "Current password is incorrect"

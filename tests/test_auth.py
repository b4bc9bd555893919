import pytest

# Test data
test_user_data = {
    "name": "Test User",
    "email": "test@example.com",
    "password": "TestPassword123",
}

test_login_data = {
    "email": "test@example.com",
    "password": "TestPassword123"
}


class TestAuthentication:

    def test_register_user(self, client):
        """Test user registration."""
        response = client.post("/api/register", json=test_user_data)
        assert response.status_code == 201

        data = response.json()
        assert data["message"] == "User created successfully"
        assert data["userId"]
        assert "password" not in data

    def test_register_duplicate_email(self, client):
        """Test registration with duplicate email."""
        client.post("/api/register", json=test_user_data)

        response = client.post("/api/register", json=test_user_data)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "USER_EXISTS"

    def test_register_duplicate_email_different_case(self, client):
        client.post("/api/register", json=test_user_data)

        shouted = dict(test_user_data, email="TEST@example.com")
        response = client.post("/api/register", json=shouted)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "USER_EXISTS"

    def test_register_invalid_password(self, client):
        """Test registration with a too-short password."""
        invalid_data = test_user_data.copy()
        invalid_data["password"] = "weak"

        response = client.post("/api/register", json=invalid_data)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_register_invalid_email(self, client):
        invalid_data = dict(test_user_data, email="not-an-email")

        response = client.post("/api/register", json=invalid_data)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_register_creates_patient(self, client):
        client.post("/api/register", json=test_user_data)

        response = client.post("/api/login", json=test_login_data)
        assert response.json()["role"] == "patient"

    def test_login_success(self, client):
        """Test successful login."""
        client.post("/api/register", json=test_user_data)

        response = client.post("/api/login", json=test_login_data)
        assert response.status_code == 200

        data = response.json()
        assert data["token"]
        assert data["role"] == "patient"

    def test_login_unknown_email(self, client):
        """Test login with invalid credentials."""
        invalid_login = {
            "email": "nonexistent@example.com",
            "password": "wrongpassword"
        }

        response = client.post("/api/login", json=invalid_login)
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    @pytest.mark.parametrize("password", [
        "wrongpassword",
        "TestPassword12",
        "TestPassword1234",
        "testpassword123",
        " TestPassword123",
    ])
    def test_login_wrong_password(self, client, password):
        """Near misses fail exactly like wild guesses."""
        client.post("/api/register", json=test_user_data)

        wrong_login = dict(test_login_data, password=password)
        response = client.post("/api/login", json=wrong_login)
        assert response.status_code == 401
        assert response.json() == {
            "error": {
                "code": "INVALID_CREDENTIALS",
                "message": "Invalid email or password",
            }
        }

    def test_login_missing_fields(self, client):
        response = client.post("/api/login", json={"email": "test@example.com"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "OK"
    assert data["timestamp"].endswith("Z")


def test_unknown_route(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_process_time_header(client):
    response = client.get("/health")
    assert "X-Process-Time" in response.headers

from sqlalchemy.exc import SQLAlchemyError

from proofviral.api import auth as auth_api
from proofviral.models.business import Business
from proofviral.models.user import User

from tests.conftest import PASSWORD, auth_headers, signup


def test_signup_creates_user_and_free_business(client):
    data = signup(client)

    assert data["access_token"]
    assert data["refresh_token"]
    business = data["business"]
    assert business["plan"] == "free"
    assert business["business_name"] == "Acme Coffee"
    assert business["widget_id"]
    assert business["user_id"] == data["user"]["id"]

    assert User.query.count() == 1
    assert Business.query.filter_by(user_id=data["user"]["id"]).count() == 1


def test_widget_ids_are_unique_per_business(client):
    first = signup(client, email="a@acme.test")
    second = signup(client, email="b@acme.test")
    assert first["business"]["widget_id"] != second["business"]["widget_id"]


def test_signup_rejects_duplicate_email(client):
    signup(client)
    response = client.post('/api/auth/signup', json={
        "email": "owner@acme.test",
        "password": PASSWORD,
        "business_name": "Other",
        "business_url": "https://other.test"
    })
    assert response.status_code == 400
    assert response.get_json()["error"] == "Email already registered"
    assert Business.query.count() == 1


def test_signup_validates_password_and_url(client):
    response = client.post('/api/auth/signup', json={
        "email": "owner@acme.test",
        "password": "short",
        "business_name": "Acme",
        "business_url": "not a url"
    })
    assert response.status_code == 400
    details = response.get_json()["details"]
    assert "password" in details
    assert "business_url" in details
    assert User.query.count() == 0


def test_login_returns_tokens(client):
    signup(client)
    response = client.post('/api/auth/login', json={"email": "owner@acme.test", "password": PASSWORD})
    assert response.status_code == 200
    data = response.get_json()
    assert data["access_token"]
    assert data["business"]["business_name"] == "Acme Coffee"


def test_login_with_wrong_password_is_refused(client):
    signup(client)
    response = client.post('/api/auth/login', json={"email": "owner@acme.test", "password": "WrongPass123"})
    assert response.status_code == 401


def test_me_requires_token(client):
    response = client.get('/api/auth/me')
    assert response.status_code == 401


def test_me_returns_current_user(client, account, headers):
    response = client.get('/api/auth/me', headers=headers)
    assert response.status_code == 200
    data = response.get_json()
    assert data["user"]["email"] == "owner@acme.test"
    assert data["business"]["id"] == account["business"]["id"]


def test_logout_revokes_the_token(client, account, headers):
    response = client.post('/api/auth/logout', headers=headers)
    assert response.status_code == 200

    response = client.get('/api/auth/me', headers=headers)
    assert response.status_code == 401
    assert response.get_json()["error"] == "Token has been revoked"

    response = client.post('/api/auth/refresh', headers={
        "Authorization": f"Bearer {account['refresh_token']}"
    })
    assert response.status_code == 401
    assert response.get_json()["error"] == "Token has been revoked"


def test_logout_ends_refreshed_tokens_of_the_same_session(client, account):
    response = client.post('/api/auth/refresh', headers={
        "Authorization": f"Bearer {account['refresh_token']}"
    })
    refreshed = auth_headers({"access_token": response.get_json()["access_token"]})

    assert client.post('/api/auth/logout', headers=auth_headers(account)).status_code == 200

    assert client.get('/api/auth/me', headers=refreshed).status_code == 401


def test_logout_leaves_other_sessions_signed_in(client, account):
    response = client.post('/api/auth/login', json={"email": "owner@acme.test", "password": PASSWORD})
    other = auth_headers(response.get_json())

    client.post('/api/auth/logout', headers=auth_headers(account))

    assert client.get('/api/auth/me', headers=other).status_code == 200


def test_refresh_issues_new_access_token(client, account):
    response = client.post('/api/auth/refresh', headers={
        "Authorization": f"Bearer {account['refresh_token']}"
    })
    assert response.status_code == 200
    new_token = response.get_json()["access_token"]

    response = client.get('/api/auth/me', headers=auth_headers({"access_token": new_token}))
    assert response.status_code == 200


def test_health(client):
    assert client.get('/api/health').get_json() == {"status": "ok"}


def test_login_database_failure_returns_json_error(client, monkeypatch):
    signup(client)

    def broken_sign_in(email, password):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(auth_api, 'sign_in', broken_sign_in)

    response = client.post('/api/auth/login', json={"email": "owner@acme.test", "password": PASSWORD})

    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to sign in"}


def test_me_database_failure_returns_json_error(client, headers, monkeypatch):
    def broken_get_current_user(session):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(auth_api, 'get_current_user', broken_get_current_user)

    response = client.get('/api/auth/me', headers=headers)

    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to load account"}


def test_refresh_database_failure_returns_json_error(client, account, monkeypatch):
    def broken_refresh(user_id, jwt_payload):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(auth_api, 'refresh_access_token', broken_refresh)

    response = client.post('/api/auth/refresh', headers={
        "Authorization": f"Bearer {account['refresh_token']}"
    })

    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to refresh token"}

import redis
from sqlalchemy.exc import OperationalError

from ehealth.models.user import User
from ehealth.services.gateway import PersistenceGateway

from .utils import alice, bob, login, register, register_and_login

class UnreachableRedis:
    def setex(self, key, ttl, value):
        raise redis.ConnectionError("Connection refused")

    def get(self, key):
        raise redis.ConnectionError("Connection refused")

    def delete(self, key):
        raise redis.ConnectionError("Connection refused")

class TestAuthentication:

    def test_register_redirects_to_login(self, client):
        """Test user registration."""
        response = register(client, alice)
        assert response.status_code == 302
        assert response.headers["location"] == "/login"

    def test_register_stores_hash_not_password(self, client, db_session):
        register(client, alice)

        user = db_session.query(User).filter(User.email == alice["email"]).one()
        assert user.name == "Alice"
        assert user.password_hash != alice["password"]
        assert user.password_hash.startswith("$2b$10$")

    def test_register_duplicate_email(self, client, db_session):
        """Test registration with duplicate email."""
        register(client, alice)

        response = register(client, {**alice, "name": "Other Alice"})
        assert response.status_code == 400
        assert "email already exists" in response.text
        assert db_session.query(User).filter(User.email == alice["email"]).count() == 1

    def test_register_missing_field(self, client):
        response = client.post("/register", data={"email": "x@x.com"})
        assert response.status_code == 422

    def test_login_success(self, client):
        """Test successful login."""
        register(client, alice)

        response = login(client, alice)
        assert response.status_code == 302
        assert response.headers["location"] == "/book"
        assert client.app.state.settings.SESSION_COOKIE_NAME in response.cookies

        # Protected page is now reachable
        response = client.get("/book")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]

    def test_login_unknown_email(self, client):
        response = login(client, alice)
        assert response.status_code == 401
        assert response.text == "Invalid email or password"

    def test_login_wrong_password_never_succeeds(self, client):
        """Test login with wrong password."""
        register(client, alice)

        for _ in range(5):
            response = login(client, {**alice, "password": "wrongpassword"})
            assert response.status_code == 401
            assert response.text == "Invalid email or password"
            assert not response.cookies

        assert client.get("/book").status_code == 302

    def test_login_replaces_previous_session(self, client):
        register(client, alice)
        register(client, bob)
        cookie_name = client.app.state.settings.SESSION_COOKIE_NAME

        login(client, alice)
        first_cookie = client.cookies.get(cookie_name)
        login(client, bob)

        # The earlier session was destroyed when the client logged in again
        client.cookies.clear()
        client.cookies.set(cookie_name, first_cookie)
        assert client.get("/book").status_code == 302

    def test_logout(self, client):
        """Test user logout."""
        register_and_login(client, alice)
        cookie_name = client.app.state.settings.SESSION_COOKIE_NAME
        old_cookie = client.cookies.get(cookie_name)

        response = client.get("/logout")
        assert response.status_code == 302
        assert response.headers["location"] == "/"

        # Replaying the old cookie does not revive the session
        client.cookies.set(cookie_name, old_cookie)
        response = client.get("/manage")
        assert response.status_code == 302
        assert response.headers["location"] == "/login"

    def test_logout_without_session(self, client):
        response = client.get("/logout")
        assert response.status_code == 302
        assert response.headers["location"] == "/"

    def test_tampered_cookie_is_anonymous(self, client):
        register_and_login(client, alice)
        cookie_name = client.app.state.settings.SESSION_COOKIE_NAME
        cookie = client.cookies.get(cookie_name)

        client.cookies.clear()
        client.cookies.set(cookie_name, cookie[:-4] + "abcd")
        response = client.get("/book")
        assert response.status_code == 302
        assert response.headers["location"] == "/login"

    def test_hashing_failure_is_server_error(self, client, db_session, monkeypatch):
        from ehealth.core import security

        class BrokenContext:
            def hash(self, password):
                raise MemoryError("out of memory")

        monkeypatch.setattr(security, "pwd_context", BrokenContext())

        response = register(client, alice)
        assert response.status_code == 500
        assert response.text == "Server error."
        assert db_session.query(User).count() == 0

class TestBackendFailures:

    def test_login_database_error(self, client, monkeypatch):
        register(client, alice)

        def fail(self, email):
            raise OperationalError("SELECT", {}, Exception("database is down"))

        monkeypatch.setattr(PersistenceGateway, "find_user_by_email", fail)

        response = login(client, alice)
        assert response.status_code == 500
        assert response.text == "Server error"
        assert not response.cookies

    def test_register_database_error(self, client, monkeypatch):
        def fail(self, name, email, password_hash):
            raise OperationalError("INSERT", {}, Exception("database is down"))

        monkeypatch.setattr(PersistenceGateway, "create_user", fail)

        response = register(client, alice)
        assert response.status_code == 500
        assert response.text == "Error registering user. Maybe email already exists."

    def test_login_session_store_down(self, client):
        register(client, alice)
        client.app.state.session_store.client = UnreachableRedis()

        response = login(client, alice)
        assert response.status_code == 500
        assert response.text == "Server error"

    def test_guarded_route_session_store_down(self, client):
        register_and_login(client, alice)
        client.app.state.session_store.client = UnreachableRedis()

        response = client.get("/book")
        assert response.status_code == 500
        assert response.text == "Server error"

    def test_logout_session_store_down(self, client):
        register_and_login(client, alice)
        client.app.state.session_store.client = UnreachableRedis()

        response = client.get("/logout")
        assert response.status_code == 500
        assert response.text == "Server error"

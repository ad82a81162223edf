"""Shared request helpers and sample users for the route tests."""

# Test data
alice = {"name": "Alice", "email": "alice@x.com", "password": "pw123"}
bob = {"name": "Bob", "email": "bob@x.com", "password": "hunter2"}

def register(client, user):
    return client.post("/register", data=user)

def login(client, user):
    return client.post(
        "/login",
        data={"email": user["email"], "password": user["password"]}
    )

def register_and_login(client, user):
    register(client, user)
    response = login(client, user)
    assert response.status_code == 302
    return response

"""API endpoint tests for auth, health, clients and domains."""

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from pushhub.models import Client, Domain, PushSubscription, User


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["database"]["status"] == "connected"


def test_health_check_database_down(client, db):
    """Health reports 503 when the database cannot be reached."""
    with patch.object(db, "execute", side_effect=OperationalError("SELECT 1", {}, Exception())):
        response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"
    assert response.json()["database"]["status"] == "disconnected"


# Auth


def test_login(client, master_headers):
    """Test master login."""
    response = client.post(
        "/api/v1/auth/login", json={"email": master_headers.email, "password": "MasterPass123"}
    )
    assert response.status_code == 200
    data = response.json()
    assert "access_token" in data
    assert data["token_type"] == "bearer"
    assert data["user"]["role"] == "master"


def test_login_is_case_insensitive_on_email(client, master_headers):
    """Emails are matched regardless of case."""
    response = client.post(
        "/api/v1/auth/login", json={"email": "MASTER@example.com", "password": "MasterPass123"}
    )
    assert response.status_code == 200


def test_login_wrong_password(client, master_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/v1/auth/login", json={"email": master_headers.email, "password": "WrongPass123"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"


def test_login_unknown_user(client):
    """Unknown users get the same error as a wrong password."""
    response = client.post(
        "/api/v1/auth/login", json={"email": "nobody@example.com", "password": "Whatever123"}
    )
    assert response.status_code == 401


def test_get_current_user(client, client_headers):
    """Test getting current user info."""
    response = client.get("/api/v1/auth/me", headers=client_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == client_headers.email
    assert data["role"] == "client"
    assert data["client_id"] == client_headers.client_id


def test_verify_and_logout(client, client_headers):
    """A valid token verifies and logout acknowledges."""
    assert client.post("/api/v1/auth/verify", headers=client_headers).status_code == 200
    assert client.post("/api/v1/auth/logout", headers=client_headers).status_code == 200


def test_invalid_token(client):
    """Garbage tokens are rejected."""
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_inactive_tenant_cannot_login(client, master_headers, client_headers):
    """Users of a deactivated client are locked out."""
    client.patch(f"/api/v1/clients/{client_headers.client_id}/status", headers=master_headers)

    response = client.post(
        "/api/v1/auth/login", json={"email": client_headers.email, "password": "ClientPass123"}
    )
    assert response.status_code == 403


# Clients


def test_create_client(client, master_headers, db):
    """Creating a client also creates its login account."""
    response = client.post(
        "/api/v1/clients",
        headers=master_headers,
        json={"name": "Globex", "email": "Admin@Globex.example.com", "password": "Globex1234"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["client"]["name"] == "Globex"
    assert data["client"]["status"] == "active"
    assert data["user"]["email"] == "admin@globex.example.com"
    assert data["user"]["role"] == "client"
    assert data["user"]["client_id"] == data["client"]["id"]
    assert db.query(User).filter(User.client_id == data["client"]["id"]).count() == 1


def test_create_client_duplicate_email(client, master_headers, client_headers, db):
    """An email can only belong to one user."""
    response = client.post(
        "/api/v1/clients",
        headers=master_headers,
        json={"name": "Copycat", "email": client_headers.email, "password": "Copycat123"},
    )
    assert response.status_code == 409
    assert db.query(Client).filter(Client.name == "Copycat").count() == 0


def test_create_client_weak_password(client, master_headers):
    """Passwords need upper case, lower case and a digit."""
    response = client.post(
        "/api/v1/clients",
        headers=master_headers,
        json={"name": "Weak", "email": "weak@example.com", "password": "alllowercase"},
    )
    assert response.status_code == 422


def test_create_client_sanitizes_name(client, master_headers):
    """Markup characters are stripped from client names."""
    response = client.post(
        "/api/v1/clients",
        headers=master_headers,
        json={
            "name": "<b>Initech</b>",
            "email": "ops@initech.example.com",
            "password": "Initech123",
        },
    )
    assert response.status_code == 201
    assert response.json()["client"]["name"] == "bInitech/b"


def test_list_clients(client, master_headers, client_headers):
    """Test listing clients with search and status filters."""
    client.post(
        "/api/v1/clients",
        headers=master_headers,
        json={"name": "Globex", "email": "admin@globex.example.com", "password": "Globex1234"},
    )

    response = client.get("/api/v1/clients", headers=master_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["pagination"]["total_items"] == 2
    assert {c["name"] for c in data["clients"]} == {"Acme Corp", "Globex"}

    response = client.get("/api/v1/clients?search=glob", headers=master_headers)
    assert [c["name"] for c in response.json()["clients"]] == ["Globex"]

    response = client.get("/api/v1/clients?status=inactive", headers=master_headers)
    assert response.json()["clients"] == []


def test_list_clients_pagination(client, master_headers, db):
    """Pagination reports pages and neighbours."""
    db.add_all([Client(name=f"Tenant {i}") for i in range(3)])
    db.commit()

    response = client.get("/api/v1/clients?page=2&limit=2", headers=master_headers)
    pagination = response.json()["pagination"]
    assert pagination["current_page"] == 2
    assert pagination["total_pages"] == 2
    assert pagination["has_prev_page"] is True
    assert pagination["has_next_page"] is False
    assert len(response.json()["clients"]) == 1


def test_client_stats(client, master_headers, client_headers):
    """Stats count active and inactive clients."""
    client.patch(f"/api/v1/clients/{client_headers.client_id}/status", headers=master_headers)

    response = client.get("/api/v1/clients/stats", headers=master_headers)
    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats == {"total_clients": 1, "active_clients": 0, "inactive_clients": 1}
    assert len(response.json()["recent_clients"]) == 1


def test_get_client_with_counts(client, master_headers, client_headers, db):
    """Client details include domain, subscriber and notification counts."""
    client.post("/api/v1/domains", headers=client_headers, json={"domain_name": "acme.com"})

    response = client.get(f"/api/v1/clients/{client_headers.client_id}", headers=master_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Acme Corp"
    assert data["domain_count"] == 1
    assert data["subscriber_count"] == 0
    assert data["notification_count"] == 0


def test_get_client_not_found(client, master_headers):
    """Unknown clients return 404."""
    response = client.get("/api/v1/clients/99999", headers=master_headers)
    assert response.status_code == 404


def test_update_client(client, master_headers, client_headers):
    """Test updating a client's name, logo and status."""
    response = client.put(
        f"/api/v1/clients/{client_headers.client_id}",
        headers=master_headers,
        json={"name": "Acme Inc", "brand_logo_url": "", "status": "inactive"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Acme Inc"
    assert data["brand_logo_url"] is None
    assert data["status"] == "inactive"


def test_toggle_client_status(client, master_headers, client_headers):
    """Toggling flips between active and inactive."""
    url = f"/api/v1/clients/{client_headers.client_id}/status"

    assert client.patch(url, headers=master_headers).json()["status"] == "inactive"
    assert client.patch(url, headers=master_headers).json()["status"] == "active"


def test_delete_client_cascades(client, master_headers, client_headers, db):
    """Deleting a client removes its users, domains and subscriptions."""
    client.post("/api/v1/domains", headers=client_headers, json={"domain_name": "acme.com"})
    client.post(
        "/api/v1/subscribe",
        json={
            "client_id": client_headers.client_id,
            "subscription": {
                "endpoint": "https://fcm.googleapis.com/fcm/send/xyz",
                "keys": {"p256dh": "p256dh-key", "auth": "auth-key"},
            },
        },
    )

    response = client.delete(f"/api/v1/clients/{client_headers.client_id}", headers=master_headers)
    assert response.status_code == 200
    assert db.get(Client, client_headers.client_id) is None
    assert db.query(User).filter(User.email == client_headers.email).count() == 0
    assert db.query(Domain).count() == 0
    assert db.query(PushSubscription).count() == 0


def test_client_user_cannot_manage_clients(client, client_headers):
    """Client management is reserved for master administrators."""
    response = client.get("/api/v1/clients", headers=client_headers)
    assert response.status_code == 403


def test_clients_require_authentication(client):
    """Requests without a token are rejected."""
    response = client.get("/api/v1/clients")
    assert response.status_code in (401, 403)


# Domains


def test_create_domain(client, client_headers):
    """Domains are stored lower-cased."""
    response = client.post(
        "/api/v1/domains", headers=client_headers, json={"domain_name": " Shop.Acme.COM "}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["domain_name"] == "shop.acme.com"
    assert data["client_id"] == client_headers.client_id
    assert data["status"] == "active"


def test_create_domain_localhost_and_ip(client, client_headers):
    """Local development hosts are accepted."""
    for name in ("localhost:3000", "192.168.1.10:8080"):
        response = client.post(
            "/api/v1/domains", headers=client_headers, json={"domain_name": name}
        )
        assert response.status_code == 201


def test_create_domain_invalid(client, client_headers):
    """Malformed domains are rejected."""
    response = client.post(
        "/api/v1/domains", headers=client_headers, json={"domain_name": "not a domain!"}
    )
    assert response.status_code == 422


def test_create_domain_duplicate(client, client_headers):
    """A domain can only be registered once per client."""
    client.post("/api/v1/domains", headers=client_headers, json={"domain_name": "acme.com"})
    response = client.post(
        "/api/v1/domains", headers=client_headers, json={"domain_name": "ACME.com"}
    )
    assert response.status_code == 409


def test_list_and_stats_domains(client, client_headers):
    """Test listing domains and domain stats."""
    for name in ("acme.com", "shop.acme.com"):
        client.post("/api/v1/domains", headers=client_headers, json={"domain_name": name})

    response = client.get("/api/v1/domains", headers=client_headers)
    assert response.status_code == 200
    assert response.json()["total_domains"] == 2

    response = client.get("/api/v1/domains/stats", headers=client_headers)
    assert response.json()["total_domains"] == 2
    assert len(response.json()["recent_domains"]) == 2


def test_update_domain(client, client_headers):
    """Renaming a domain validates and normalizes the new name."""
    created = client.post(
        "/api/v1/domains", headers=client_headers, json={"domain_name": "acme.com"}
    ).json()
    client.post("/api/v1/domains", headers=client_headers, json={"domain_name": "taken.com"})
    url = f"/api/v1/domains/{created['id']}"

    response = client.put(url, headers=client_headers, json={"domain_name": "New.Acme.com"})
    assert response.status_code == 200
    assert response.json()["domain_name"] == "new.acme.com"

    response = client.put(url, headers=client_headers, json={"domain_name": "taken.com"})
    assert response.status_code == 409


def test_delete_domain(client, client_headers):
    """Test deleting a domain."""
    created = client.post(
        "/api/v1/domains", headers=client_headers, json={"domain_name": "acme.com"}
    ).json()

    response = client.delete(f"/api/v1/domains/{created['id']}", headers=client_headers)
    assert response.status_code == 200

    response = client.get(f"/api/v1/domains/{created['id']}", headers=client_headers)
    assert response.status_code == 404


def test_domains_are_tenant_scoped(client, client_headers, tenant, db):
    """A client cannot see another client's domains."""
    foreign = Domain(client_id=tenant.id, domain_name="tenant.example.com")
    db.add(foreign)
    db.commit()

    response = client.get(f"/api/v1/domains/{foreign.id}", headers=client_headers)
    assert response.status_code == 404
    assert client.get("/api/v1/domains", headers=client_headers).json()["total_domains"] == 0


def test_master_cannot_manage_domains(client, master_headers):
    """Domains belong to client users only."""
    response = client.get("/api/v1/domains", headers=master_headers)
    assert response.status_code == 403


def test_inactive_tenant_token_is_rejected(client, master_headers, client_headers):
    """An existing token stops working once the client is deactivated."""
    client.patch(f"/api/v1/clients/{client_headers.client_id}/status", headers=master_headers)

    response = client.get("/api/v1/domains", headers=client_headers)
    assert response.status_code == 403

import asyncio

from fastapi.testclient import TestClient

from golinks_app.config import settings
from golinks_app.dependencies import get_store
from tests.fakes import FailingKVStore

LINKS = "/api/v1/domains/go.example.org/links"


class TestAdminAPI:
    """Test the bearer protected admin API"""

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_requires_access_key(self, client: TestClient):
        """Test that a wrong key is refused"""
        response = client.get(f"{LINKS}/", headers={"Authorization": "Bearer wrong"})

        assert response.status_code == 401
        assert response.json()["detail"] == "This maze wasn't meant for you"

    def test_unconfigured_access_key(self, client: TestClient, monkeypatch):
        monkeypatch.setattr(settings, "access_key", "")

        response = client.get(f"{LINKS}/", headers={"Authorization": "Bearer "})

        assert response.status_code == 500

    def test_create_link(self, client: TestClient, auth_headers, store):
        response = client.post(
            f"{LINKS}/", json={"slug": "/ex/", "url": "https://example.com"}, headers=auth_headers
        )
        assert response.status_code == 201

        data = response.json()
        assert data["slug"] == "ex"
        assert data["short_url"] == "https://go.example.org/ex"
        assert data["hits"] == 0
        assert asyncio.run(store.get("go.example.org:ex")) == '{"redirect_url":"https://example.com","hits":0}'

    def test_create_duplicate_rejected(self, client: TestClient, auth_headers):
        body = {"slug": "ex", "url": "https://example.com"}
        client.post(f"{LINKS}/", json=body, headers=auth_headers)

        response = client.post(f"{LINKS}/", json=body, headers=auth_headers)

        assert response.status_code == 409

    def test_create_invalid_url(self, client: TestClient, auth_headers):
        response = client.post(f"{LINKS}/", json={"slug": "ex", "url": "not-a-valid-url"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid URL. Please provide a valid URL"

    def test_create_on_unknown_domain(self, client: TestClient, auth_headers):
        response = client.post(
            "/api/v1/domains/other.example/links/",
            json={"slug": "ex", "url": "https://example.com"},
            headers=auth_headers,
        )

        assert response.status_code == 400

    def test_stats(self, client: TestClient, auth_headers):
        client.post(f"{LINKS}/", json={"slug": "ex", "url": "https://example.com"}, headers=auth_headers)

        response = client.get(f"{LINKS}/ex/stats", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"slug": "ex", "redirect_url": "https://example.com", "hits": 0}

    def test_stats_not_found(self, client: TestClient, auth_headers):
        response = client.get(f"{LINKS}/missing/stats", headers=auth_headers)
        assert response.status_code == 404

    def test_list_skips_malformed(self, client: TestClient, auth_headers, store):
        asyncio.run(store.put("go.example.org:good", '{"redirect_url":"https://example.com","hits":5}'))
        asyncio.run(store.put("go.example.org:bad", "oops"))
        asyncio.run(store.put("other.example:elsewhere", '{"redirect_url":"https://example.com","hits":0}'))

        response = client.get(f"{LINKS}/", headers=auth_headers)

        assert response.status_code == 200
        assert [link["slug"] for link in response.json()] == ["good"]

    def test_delete(self, client: TestClient, auth_headers):
        client.post(f"{LINKS}/", json={"slug": "ex", "url": "https://example.com"}, headers=auth_headers)

        response = client.delete(f"{LINKS}/ex", headers=auth_headers)
        assert response.status_code == 204

        response = client.get(f"{LINKS}/ex/stats", headers=auth_headers)
        assert response.status_code == 404

    def test_delete_not_found(self, client: TestClient, auth_headers):
        response = client.delete(f"{LINKS}/missing", headers=auth_headers)
        assert response.status_code == 404

    def test_delete_store_failure(self, client: TestClient, auth_headers):
        """Test that a failed delete reports the store as unavailable"""
        from main import app

        failing = FailingKVStore({"go.example.org:ex": '{"redirect_url":"https://example.com","hits":0}'})
        app.dependency_overrides[get_store] = lambda: failing

        response = client.delete(f"{LINKS}/ex", headers=auth_headers)

        assert response.status_code == 503
        assert response.json()["detail"] == "store is read-only"

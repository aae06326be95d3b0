"""Tests for /api/urls endpoints and the redirect route."""

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient
from sqlalchemy import delete, func, select, update

from shortener.db.models import ClickEvent, ShortURL, User


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestCreateShortURL:
    """Test POST /api/urls."""

    def test_anonymous(self, client):
        response = client.post("/api/urls", json={"url": "https://example.com/page"})

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "URL shortened successfully"

        data = body["data"]
        assert len(data["shortCode"]) == 6
        assert data["shortCode"].isalnum()
        assert data["shortUrl"] == f"http://localhost:3000/{data['shortCode']}"
        assert data["originalUrl"] == "https://example.com/page"
        assert data["expiresAt"] is None

    def test_custom_code(self, shorten):
        data = shorten(customCode="my-link")
        assert data["shortCode"] == "my-link"
        assert data["shortUrl"].endswith("/my-link")

    def test_custom_code_taken(self, client, shorten):
        shorten(customCode="my-link")

        response = client.post("/api/urls", json={"url": "https://other.com", "customCode": "my-link"})

        assert response.status_code == 409
        assert response.json() == {"success": False, "error": "Custom code already exists"}

    def test_custom_code_reserved(self, client):
        response = client.post("/api/urls", json={"url": "https://example.com", "customCode": "health"})
        assert response.status_code == 409
        assert response.json()["error"] == "Custom code is reserved"

    def test_invalid_custom_code(self, client):
        for code in ["ab", "has space", "x" * 21]:
            response = client.post("/api/urls", json={"url": "https://example.com", "customCode": code})
            assert response.status_code == 400, code
            assert response.json()["error"] == (
                "Custom code must be 3-20 characters, alphanumeric, hyphens, and underscores only"
            )

    def test_missing_url(self, client):
        response = client.post("/api/urls", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "URL is required"

    def test_invalid_url(self, client):
        for url in ["not-a-url", "ftp://example.com", "javascript:alert(1)"]:
            response = client.post("/api/urls", json={"url": url})
            assert response.status_code == 400, url
            assert response.json()["error"] == "Invalid URL format"

    def test_expiration(self, shorten):
        before = datetime.now(timezone.utc)
        data = shorten(expiresInDays=30)
        after = datetime.now(timezone.utc)

        expires_at = parse_timestamp(data["expiresAt"])
        assert before + timedelta(days=30) - timedelta(seconds=1) <= expires_at
        assert expires_at <= after + timedelta(days=30) + timedelta(seconds=1)

    def test_non_positive_expiration_means_never(self, shorten):
        assert shorten(expiresInDays=0)["expiresAt"] is None
        assert shorten(expiresInDays=-3)["expiresAt"] is None

    def test_non_numeric_expiration(self, client):
        response = client.post("/api/urls", json={"url": "https://example.com", "expiresInDays": "ten"})
        assert response.status_code == 400
        assert response.json()["error"] == "expiresInDays must be a number"

    def test_owned_by_caller_with_token(self, client, register, shorten):
        token = register("alice")["token"]
        data = shorten(token=token)

        listing = client.get("/api/urls", headers=bearer(token)).json()["data"]
        assert [url["shortCode"] for url in listing] == [data["shortCode"]]

    def test_invalid_token_rejected(self, client):
        response = client.post(
            "/api/urls",
            json={"url": "https://example.com"},
            headers=bearer("garbage"),
        )
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid or expired token"

    def test_generated_codes_are_unique(self, shorten):
        codes = {shorten()["shortCode"] for _ in range(20)}
        assert len(codes) == 20


class TestRedirect:
    """Test GET /{code}."""

    def test_redirect_records_clicks(self, client, db, register, shorten):
        token = register("alice")["token"]
        code = shorten("https://example.com/landing", token=token)["shortCode"]

        for _ in range(3):
            response = client.get(
                f"/{code}",
                headers={
                    "User-Agent": "pytest-browser",
                    "Referer": "https://referrer.example",
                    "X-Forwarded-For": "203.0.113.9, 10.0.0.1",
                },
                follow_redirects=False,
            )
            assert response.status_code == 302
            assert response.headers["location"] == "https://example.com/landing"

        short_url = db.scalars(select(ShortURL).where(ShortURL.short_code == code)).one()
        assert short_url.clicks == 3

        events = db.scalars(select(ClickEvent).where(ClickEvent.url_id == short_url.id)).all()
        assert len(events) == 3
        assert {event.ip_address for event in events} == {"203.0.113.9"}
        assert {event.user_agent for event in events} == {"pytest-browser"}
        assert {event.referer for event in events} == {"https://referrer.example"}

    def test_unknown_client_ip(self, client, db, shorten):
        code = shorten()["shortCode"]

        client.get(f"/{code}", follow_redirects=False)

        event = db.scalars(select(ClickEvent)).one()
        assert event.ip_address == "unknown"

    def test_unknown_code(self, client):
        response = client.get("/nope123", follow_redirects=False)
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "URL not found"}

    def test_expired(self, client, db, shorten):
        code = shorten(expiresInDays=1)["shortCode"]
        db.execute(
            update(ShortURL)
            .where(ShortURL.short_code == code)
            .values(expires_at=datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(minutes=1))
        )
        db.commit()

        response = client.get(f"/{code}", follow_redirects=False)

        assert response.status_code == 410
        assert response.json() == {"success": False, "error": "URL has expired"}
        assert db.scalar(select(func.count()).select_from(ClickEvent)) == 0
        assert db.scalar(select(ShortURL.clicks).where(ShortURL.short_code == code)) == 0


class TestListURLs:
    """Test GET /api/urls."""

    def test_requires_token(self, client):
        response = client.get("/api/urls")
        assert response.status_code == 401
        assert response.json()["error"] == "No token provided"

    def test_newest_first_and_only_own(self, client, register, shorten):
        alice = register("alice")["token"]
        bob = register("bob")["token"]

        shorten("https://one.example", token=alice, customCode="first")
        shorten("https://two.example", token=alice, customCode="second")
        shorten("https://bob.example", token=bob, customCode="bobs")
        shorten("https://anon.example", customCode="anon")
        shorten("https://three.example", token=alice, customCode="third")

        response = client.get("/api/urls", headers=bearer(alice))

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Success"
        assert [url["shortCode"] for url in body["data"]] == ["third", "second", "first"]

        entry = body["data"][0]
        assert set(entry) == {
            "id", "shortCode", "shortUrl", "originalUrl", "clicks", "createdAt", "expiresAt",
        }
        assert entry["shortUrl"] == "http://localhost:3000/third"
        assert entry["clicks"] == 0

    def test_empty(self, client, register):
        token = register("alice")["token"]
        response = client.get("/api/urls", headers=bearer(token))
        assert response.json()["data"] == []


class TestAnalytics:
    """Test GET /api/urls/{code}/analytics."""

    def test_owner_sees_clicks(self, client, register, shorten):
        token = register("alice")["token"]
        code = shorten(token=token)["shortCode"]
        for _ in range(4):
            client.get(f"/{code}", follow_redirects=False)

        response = client.get(f"/api/urls/{code}/analytics", headers=bearer(token))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["shortCode"] == code
        assert data["totalClicks"] == 4
        assert data["clicksByDay"] == [
            {"date": datetime.now(timezone.utc).date().isoformat(), "clicks": 4}
        ]

    def test_no_clicks(self, client, register, shorten):
        token = register("alice")["token"]
        code = shorten(token=token)["shortCode"]

        data = client.get(f"/api/urls/{code}/analytics", headers=bearer(token)).json()["data"]

        assert data["totalClicks"] == 0
        assert data["clicksByDay"] == []

    def test_days_newest_first(self, client, db, register, shorten):
        token = register("alice")["token"]
        code = shorten(token=token)["shortCode"]
        url_id = db.scalar(select(ShortURL.id).where(ShortURL.short_code == code))
        db.add_all([
            ClickEvent(url_id=url_id, ip_address="unknown", clicked_at=datetime(2026, 1, 1, 12)),
            ClickEvent(url_id=url_id, ip_address="unknown", clicked_at=datetime(2026, 1, 3, 8)),
            ClickEvent(url_id=url_id, ip_address="unknown", clicked_at=datetime(2026, 1, 3, 20)),
        ])
        db.commit()

        data = client.get(f"/api/urls/{code}/analytics", headers=bearer(token)).json()["data"]

        assert data["clicksByDay"] == [
            {"date": "2026-01-03", "clicks": 2},
            {"date": "2026-01-01", "clicks": 1},
        ]

    def test_other_user_forbidden(self, client, register, shorten):
        alice = register("alice")["token"]
        bob = register("bob")["token"]
        code = shorten(token=alice)["shortCode"]

        response = client.get(f"/api/urls/{code}/analytics", headers=bearer(bob))

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Unauthorized"}

    def test_anonymous_url_forbidden(self, client, register, shorten):
        token = register("alice")["token"]
        code = shorten()["shortCode"]

        response = client.get(f"/api/urls/{code}/analytics", headers=bearer(token))

        assert response.status_code == 403

    def test_unknown_code(self, client, register):
        token = register("alice")["token"]
        response = client.get("/api/urls/missing/analytics", headers=bearer(token))
        assert response.status_code == 404
        assert response.json()["error"] == "URL not found"


class TestDeleteURL:
    """Test DELETE /api/urls/{code}."""

    def test_owner_deletes(self, client, db, register, shorten):
        token = register("alice")["token"]
        code = shorten(token=token)["shortCode"]
        client.get(f"/{code}", follow_redirects=False)

        response = client.delete(f"/api/urls/{code}", headers=bearer(token))

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "URL deleted successfully",
            "data": None,
        }
        assert client.get(f"/{code}", follow_redirects=False).status_code == 404
        # click events go with the URL
        assert db.scalar(select(func.count()).select_from(ClickEvent)) == 0

    def test_other_user_and_unknown_code_look_the_same(self, client, register, shorten):
        alice = register("alice")["token"]
        bob = register("bob")["token"]
        code = shorten(token=alice)["shortCode"]

        not_owner = client.delete(f"/api/urls/{code}", headers=bearer(bob))
        missing = client.delete("/api/urls/missing", headers=bearer(bob))

        assert not_owner.status_code == missing.status_code == 404
        assert not_owner.json() == missing.json() == {
            "success": False,
            "error": "URL not found or unauthorized",
        }
        assert client.get(f"/{code}", follow_redirects=False).status_code == 302

    def test_requires_token(self, client, shorten):
        code = shorten()["shortCode"]
        response = client.delete(f"/api/urls/{code}")
        assert response.status_code == 401


class TestCascade:
    def test_deleting_user_removes_urls_and_clicks(self, client, db, register, shorten):
        user = register("alice")
        code = shorten(token=user["token"])["shortCode"]
        anonymous_code = shorten()["shortCode"]
        client.get(f"/{code}", follow_redirects=False)

        db.execute(delete(User).where(User.id == user["user"]["id"]))
        db.commit()

        assert db.scalars(select(ShortURL.short_code)).all() == [anonymous_code]
        assert db.scalar(select(func.count()).select_from(ClickEvent)) == 0


class TestAppSettings:
    """Links follow the settings the app was built with."""

    def test_base_url_and_code_length(self, app_factory):
        with TestClient(app_factory(BASE_URL="https://sho.rt", SHORT_CODE_LENGTH=8)) as client:
            registered = client.post(
                "/api/auth/register",
                json={"username": "alice", "email": "alice@example.com", "password": "Password1"},
            ).json()["data"]
            headers = bearer(registered["token"])

            created = client.post("/api/urls", json={"url": "https://example.com"}, headers=headers)
            listing = client.get("/api/urls", headers=headers).json()["data"]

        data = created.json()["data"]
        assert len(data["shortCode"]) == 8
        assert data["shortUrl"] == f"https://sho.rt/{data['shortCode']}"
        assert listing[0]["shortUrl"] == f"https://sho.rt/{data['shortCode']}"

    def test_expiration_rules_documented(self, client):
        operation = client.get("/openapi.json").json()["paths"]["/api/urls"]["post"]
        assert "expiresInDays must be a number" in operation["description"]
        assert "never expires" in operation["description"]

"""Integration tests for health, metrics and the page route table."""


class TestHealth:
    def test_health_reports_sessions(self, client, start_session):
        start_session()

        body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["services"]["supabase"]["status"] == "healthy"
        assert body["active_sessions"] == 1

    def test_degraded_when_backend_down(self, client, fake_supabase):
        fake_supabase.fail("collections", "select")

        assert client.get("/health").json()["status"] == "degraded"
        assert client.get("/health/ready").status_code == 503

    def test_liveness(self, client):
        assert client.get("/health/live").json()["status"] == "alive"


def test_metrics_endpoint(client, searched_session):
    response = client.get("/metrics/")

    assert response.status_code == 200
    assert "cityguide_guide_search_total" in response.text


class TestPageRoutes:
    def test_route_table(self, client):
        body = client.get("/api/v1/routes").json()

        protected = {route["path"] for route in body["routes"] if route["requires_auth"]}
        assert "/collections" in protected
        assert "/admin-dashboard" in protected
        assert body["sign_in_path"] == "/auth"

    def test_protected_page_redirects_when_signed_out(self, client):
        body = client.get("/api/v1/routes/check", params={"path": "/collections"}).json()
        assert body == {
            "path": "/collections",
            "page": "Collections",
            "allowed": False,
            "redirect_to": "/auth",
        }

    def test_protected_page_allowed_when_signed_in(self, client, member_headers):
        body = client.get(
            "/api/v1/routes/check", params={"path": "/collections"}, headers=member_headers
        ).json()
        assert body["allowed"] is True

    def test_parameterised_and_unknown_paths(self, client):
        shared = client.get("/api/v1/routes/check", params={"path": "/shared/abc123"}).json()
        missing = client.get("/api/v1/routes/check", params={"path": "/no/such/page"}).json()

        assert shared["page"] == "SharedCollection"
        assert shared["allowed"] is True
        assert missing["page"] == "NotFound"

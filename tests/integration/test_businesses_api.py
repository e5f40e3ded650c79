"""Integration tests for owner business registration and editing."""

MINE = "/api/v1/businesses/mine"


def _register(client, headers, **overrides):
    payload = {"business_name": "Golden Grill", "business_type": "restaurant"}
    payload.update(overrides)
    return client.post(MINE, json=payload, headers=headers)


class TestBusinessProfileApi:
    def test_signed_out_is_redirected(self, client):
        response = _register(client, {})
        assert response.status_code == 401
        assert response.json()["redirect_to"] == "/auth"

    def test_register_and_fetch(self, client, member_headers, user):
        created = _register(
            client, member_headers, email="owner@example.com", website="https://goldengrill.com"
        )

        assert created.status_code == 201
        body = created.json()
        assert body["user_id"] == user.id
        assert body["status"] == "pending"
        assert body["website"].startswith("https://goldengrill.com")

        fetched = client.get(MINE, headers=member_headers).json()
        assert fetched["id"] == body["id"]

    def test_no_business_yet(self, client, member_headers):
        response = client.get(MINE, headers=member_headers)
        assert response.status_code == 404

    def test_second_registration_rejected(self, client, member_headers):
        _register(client, member_headers)

        response = _register(client, member_headers, business_name="Other")

        assert response.status_code == 400
        assert response.json()["notice"]["title"] == "Business Already Registered"

    def test_invalid_fields(self, client, member_headers):
        assert _register(client, member_headers, email="not-an-email").status_code == 422
        assert _register(client, member_headers, description="x" * 181).status_code == 422
        missing = _register(client, member_headers, business_type="")
        assert missing.status_code == 400
        assert missing.json()["notice"]["title"] == "Missing Information"

    def test_edit_keeps_moderation_fields(self, client, member_headers, admin_headers):
        business = _register(client, member_headers).json()
        client.patch(
            f"/api/v1/admin/businesses/{business['id']}/status",
            json={"status": "approved"},
            headers=admin_headers,
        )

        response = client.patch(
            MINE,
            json={"description": "Wood-fired grill", "email": "", "city": "Austin"},
            headers=member_headers,
        )

        body = response.json()
        assert response.status_code == 200
        assert body["description"] == "Wood-fired grill"
        assert body["city"] == "Austin"
        assert body["email"] is None
        assert body["status"] == "approved"
        assert body["business_name"] == "Golden Grill"

    def test_owners_only_see_their_own(self, client, member_headers, other_headers):
        _register(client, member_headers)

        assert client.get(MINE, headers=other_headers).status_code == 404
        assert client.patch(MINE, json={"city": "Austin"}, headers=other_headers).status_code == 404

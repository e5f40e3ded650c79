"""Integration tests for the guide flow over HTTP.

Session -> selection -> search -> CSV/HTML, end to end through the FastAPI
app with no search delay.
"""

import csv
import io


BASE = "/api/v1/guide/sessions"


class TestSelectionFlow:
    """Stage gating and the cascade over HTTP."""

    def test_new_session_only_category_enabled(self, client):
        response = client.post(BASE)

        body = response.json()
        assert response.status_code == 201
        assert body["enabled_stages"] == ["category"]
        assert body["selection"]["ready"] is False
        assert body["result_count_options"] == []

    def test_stage_options(self, client, start_session):
        session_id = start_session()

        categories = client.get(f"{BASE}/{session_id}/options/category").json()
        regions = client.get(f"{BASE}/{session_id}/options/region").json()

        assert categories["options"] == ["Eat", "Stay", "Drink", "Play"]
        assert regions == {"stage": "region", "enabled": False, "options": []}

    def test_disabled_stage_is_a_notice(self, client, start_session):
        session_id = start_session()

        response = client.put(f"{BASE}/{session_id}/selection/city", json={"value": "Austin"})

        assert response.status_code == 400
        assert response.json()["notice"]["title"] == "Step Not Available"

    def test_changing_category_resets_downstream(self, client, start_session, walk_selection):
        session_id = start_session()
        walk_selection(session_id)

        response = client.put(f"{BASE}/{session_id}/selection/category", json={"value": "Eat"})

        selection = response.json()["selection"]
        assert selection == {
            "category": "Eat",
            "region": None,
            "country": None,
            "city": None,
            "result_count": None,
            "ready": False,
        }

    def test_result_count_offered_once_city_chosen(self, client, start_session, walk_selection):
        session_id = start_session()
        body = walk_selection(session_id, count=10)
        assert body["result_count_options"] == [1, 5, 10, 20]
        assert body["selection"]["ready"] is True

    def test_unknown_session(self, client):
        response = client.get(f"{BASE}/does-not-exist")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_delete_session(self, client, start_session):
        session_id = start_session()
        assert client.delete(f"{BASE}/{session_id}").status_code == 204
        assert client.get(f"{BASE}/{session_id}").status_code == 404


class TestSearch:
    def test_new_york_returns_ten_eat_records(self, client, start_session, walk_selection):
        session_id = start_session()
        walk_selection(session_id, city="New York", count=10)

        response = client.post(f"{BASE}/{session_id}/search")

        body = response.json()
        assert response.status_code == 200
        assert len(body["records"]) == 10
        assert {r["source"] for r in body["records"]} <= {"Google Reviews", "Yelp", "TripAdvisor"}
        assert body["notice"]["title"] == "Success!"
        assert [entry["kind"] for entry in body["feed"]].count("promo") == 1
        assert "restaurants" in body["tagline"]

    def test_non_us_country_rejected(self, client, start_session, walk_selection):
        session_id = start_session()
        walk_selection(session_id, country="Canada", city="Toronto")

        response = client.post(f"{BASE}/{session_id}/search")

        body = response.json()
        assert response.status_code == 200
        assert body["notice"]["title"] == "USA Cities Only"
        assert body["records"] == []
        assert client.get(f"{BASE}/{session_id}/results").json()["records"] == []

    def test_incomplete_selection_rejected(self, client, start_session):
        session_id = start_session()
        client.put(f"{BASE}/{session_id}/selection/category", json={"value": "Play"})

        response = client.post(f"{BASE}/{session_id}/search")

        assert response.json()["notice"]["title"] == "All Steps Required"

    def test_results_cleared_when_selection_changes(self, client, searched_session):
        assert len(client.get(f"{BASE}/{searched_session}/results").json()["records"]) == 5

        client.put(f"{BASE}/{searched_session}/selection/city", json={"value": "Boston"})

        assert client.get(f"{BASE}/{searched_session}/results").json()["records"] == []

    def test_optional_fields_are_omitted(self, client, searched_session):
        records = client.get(f"{BASE}/{searched_session}/results").json()["records"]
        for record in records:
            assert None not in record["contact"].values()
            assert None not in record["social_links"].values()


class TestCitySearch:
    def test_substring_selects_paris(self, client, start_session):
        session_id = start_session()
        for stage, value in [("category", "Eat"), ("region", "Europe"), ("country", "France")]:
            client.put(f"{BASE}/{session_id}/selection/{stage}", json={"value": value})

        response = client.post(f"{BASE}/{session_id}/city-search", json={"text": "Pari"})

        body = response.json()
        assert body["notice"]["title"] == "City Found"
        assert body["session"]["selection"]["city"] == "Paris"

    def test_unknown_city(self, client, start_session, walk_selection):
        session_id = start_session()
        walk_selection(session_id)

        response = client.post(f"{BASE}/{session_id}/city-search", json={"text": "Gotham"})

        assert response.status_code == 200
        assert response.json()["notice"]["title"] == "City Not Found"
        assert response.json()["session"]["selection"]["city"] == "Austin"

    def test_refused_before_country_chosen(self, client, start_session):
        session_id = start_session()
        client.put(f"{BASE}/{session_id}/selection/category", json={"value": "Eat"})

        response = client.post(f"{BASE}/{session_id}/city-search", json={"text": "Pari"})

        assert response.status_code == 400
        assert response.json()["notice"]["title"] == "Step Not Available"
        session = client.get(f"{BASE}/{session_id}").json()
        assert session["selection"]["city"] is None
        assert session["result_count_options"] == []


class TestExport:
    def test_csv_download(self, client, searched_session):
        response = client.get(f"{BASE}/{searched_session}/results.csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.headers["content-disposition"] == 'attachment; filename="Eat_places.csv"'
        rows = list(csv.reader(io.StringIO(response.text)))
        assert len(rows) == 6
        assert rows[0][0] == "Name"

    def test_csv_without_results(self, client, start_session):
        session_id = start_session()

        response = client.get(f"{BASE}/{session_id}/results.csv")

        assert response.status_code == 400
        assert response.json()["notice"]["title"] == "No Results"

    def test_html_rendering(self, client, searched_session):
        response = client.get(f"{BASE}/{searched_session}/results.html")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "Get Exclusive Austin Eat Alerts" in response.text


class TestTaxonomyApi:
    def test_regions(self, client):
        regions = client.get("/api/v1/taxonomy/regions").json()["options"]
        assert regions[0] == "North America"

    def test_unknown_region(self, client):
        assert client.get("/api/v1/taxonomy/regions/Atlantis/countries").status_code == 404

    def test_resolve(self, client):
        body = client.get("/api/v1/taxonomy/resolve", params={"q": "pari"}).json()
        assert body["city"] == "Paris"

    def test_tagline(self, client):
        body = client.get("/api/v1/guide/tagline", params={"category": "Stay"}).json()
        assert "hotels and accommodations" in body["tagline"]

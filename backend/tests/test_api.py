"""
HTTP API tests.

All tests share one app and database; each test works on its own city names.
"""

import pytest

from cpi_app.api.auth import authenticate
from cpi_engine.indicators import INDICATORS


def _submit(client, auth, city, key, inputs, country="testland"):
    return client.post(
        f"/api/indicators/{key}/submit",
        json={"city": city, "country": country, "inputs": inputs},
        auth=auth,
    )


def _aggregates(client, auth, city, country="testland"):
    response = client.get("/api/aggregates", params={"city": city, "country": country}, auth=auth)
    assert response.status_code == 200
    return response.json()


def _sub_dimension(view, key):
    for dimension in view["dimensions"]:
        for sub_dimension in dimension.get("sub_dimensions", []):
            if sub_dimension["key"] == key:
                return sub_dimension
    return None


# =============================================================================
# AUTHENTICATION
# =============================================================================

class TestAuth:

    def test_missing_credentials(self, client):
        assert client.get("/api/history").status_code == 401

    def test_wrong_password(self, client):
        assert client.get("/api/history", auth=("tester", "nope")).status_code == 401

    def test_primary_user_is_admin(self, client, auth):
        body = client.get("/api/auth/me", auth=auth).json()
        assert (body["username"], body["role"]) == ("tester", "admin")
        assert body["city_records"] >= 0

    def test_extra_user(self, client, other_auth):
        body = client.get("/api/auth/me", auth=other_auth).json()
        assert (body["username"], body["role"]) == ("other", "user")

    def test_login(self, client, auth):
        response = client.post("/api/auth/login", auth=auth)
        assert response.status_code == 200
        assert response.json()["username"] == "tester"

    def test_check(self, client, auth):
        assert client.get("/api/auth/check", auth=auth).json() == {"authenticated": True, "username": "tester"}

    def test_authenticate(self):
        accounts = {"a": "pw-a", "b": "pw-b"}
        assert authenticate("b", "pw-b", accounts).username == "b"
        assert authenticate("b", "pw-a", accounts) is None
        assert authenticate("c", "", accounts) is None


# =============================================================================
# INDICATORS
# =============================================================================

class TestIndicators:

    def test_catalog(self, client):
        response = client.get("/api/indicators")
        assert response.status_code == 200
        assert len(response.json()) == len(INDICATORS)

    def test_definition(self, client):
        body = client.get("/api/indicators/co2_emissions").json()
        assert body["sub_dimension"] == "air_quality"
        assert body["params"]["t_min"] == 0.39
        assert [f["name"] for f in body["inputs"]] == ["co2"]

    def test_input_dependent_benchmarks(self, client):
        body = client.get("/api/indicators/economic_specialization").json()
        assert body["params"] is None

    def test_unknown_indicator(self, client):
        response = client.get("/api/indicators/happiness")
        assert response.status_code == 404
        assert response.json()["field"] == "indicator"

    def test_preview(self, client, auth):
        response = client.post(
            "/api/indicators/pm25_concentration/preview", json={"inputs": {"pm25": 15}}, auth=auth
        )
        assert response.status_code == 200
        assert response.json()["standardized"] == pytest.approx(50)

    def test_invalid_inputs(self, client, auth):
        response = _submit(client, auth, "invalid-city", "pm25_concentration", {"pm25": -1})
        assert response.status_code == 422
        assert response.json()["field"] == "pm25"
        view = _aggregates(client, auth, "invalid-city")
        assert view["index"]["status"] == "no data"

    def test_missing_city(self, client, auth):
        response = _submit(client, auth, "", "pm25_concentration", {"pm25": 5})
        assert response.status_code == 422
        assert response.json()["field"] == "city"


# =============================================================================
# SUBMIT AND AGGREGATE
# =============================================================================

class TestSubmitAndAggregate:

    def test_submit_updates_aggregates(self, client, auth):
        response = _submit(client, auth, "agg-city", "pm25_concentration", {"pm25": 15})
        assert response.status_code == 200
        assert response.json()["comment"] == "MODERATELY WEAK"

        view = _aggregates(client, auth, "agg-city")
        assert view["index"]["average"] == pytest.approx(50)
        assert _sub_dimension(view, "air_quality")["average"] == pytest.approx(50)

        _submit(client, auth, "agg-city", "co2_emissions", {"co2": 0.39 ** 5})
        view = _aggregates(client, auth, "agg-city")
        assert _sub_dimension(view, "air_quality")["average"] == pytest.approx(75)

    def test_absent_levels(self, client, auth):
        _submit(client, auth, "sparse-city", "voter_turnout", {"votes_cast": 40, "eligible_voters": 100})
        view = _aggregates(client, auth, "sparse-city")
        statuses = {d["key"]: d["status"] for d in view["dimensions"]}
        assert statuses["urban_governance_and_legislation"] == "ok"
        assert statuses["productivity"] == "no data"

    def test_records_are_per_user(self, client, auth, other_auth):
        _submit(client, auth, "private-city", "pm25_concentration", {"pm25": 5})
        view = _aggregates(client, other_auth, "private-city")
        assert view["index"]["status"] == "no data"

    def test_hierarchy(self, client):
        body = client.get("/api/hierarchy").json()
        assert len(body["dimensions"]) == 6


# =============================================================================
# HISTORY
# =============================================================================

class TestHistory:

    def test_raw_upsert_counts_in_aggregates(self, client, auth):
        response = client.post("/api/history", json={
            "city": "water-city",
            "country": "testland",
            "city_name": "Water City",
            "fields": {"improved_water_standardized": 90, "improved_water_comment": "VERY SOLID"},
        }, auth=auth)
        assert response.status_code == 200
        assert response.json()["city_name"] == "Water City"

        view = _aggregates(client, auth, "water-city")
        assert _sub_dimension(view, "housing_infrastructure")["average"] == pytest.approx(90)

    def test_upsert_rejects_unknown_field(self, client, auth):
        response = client.post("/api/history", json={
            "city": "bad-city", "country": "testland", "fields": {"cpi": 99},
        }, auth=auth)
        assert response.status_code == 422
        assert response.json()["field"] == "cpi"

    def test_upsert_rejects_non_finite_value(self, client, auth):
        body = '{"city": "nan-city", "country": "testland", "fields": {"co2_emissions": NaN}}'
        response = client.post(
            "/api/history", content=body, headers={"Content-Type": "application/json"}, auth=auth
        )
        assert response.status_code == 422
        assert response.json()["field"] == "co2_emissions"
        records = client.get("/api/history", auth=auth).json()
        assert all(r["city"] != "nan-city" for r in records)

    def test_get_and_delete(self, client, auth, other_auth):
        _submit(client, auth, "history-city", "co2_emissions", {"co2": 1})
        records = client.get("/api/history", auth=auth).json()
        record = next(r for r in records if r["city"] == "history-city")
        record_id = record["id"]
        assert "co2_emissions_standardized" in record["fields"]

        assert client.get(f"/api/history/{record_id}", auth=auth).status_code == 200
        assert client.get(f"/api/history/{record_id}", auth=other_auth).status_code == 403
        assert client.delete(f"/api/history/{record_id}", auth=other_auth).status_code == 404

        response = client.delete(f"/api/history/{record_id}", auth=auth)
        assert response.json() == {"status": "deleted", "id": record_id}
        assert client.get(f"/api/history/{record_id}", auth=auth).status_code == 404


# =============================================================================
# COMPARISONS
# =============================================================================

class TestComparisons:

    def test_compare(self, client, auth):
        _submit(client, auth, "compare-a", "pm25_concentration", {"pm25": 15})
        _submit(client, auth, "compare-b", "pm25_concentration", {"pm25": 5})
        response = client.get(
            "/api/comparisons/compare",
            params={"cities": "compare-b:testland,missing:testland,compare-a:testland"},
            auth=auth,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert [c["record"]["city"] for c in body["cities"]] == ["compare-b", "compare-a"]
        deltas = body["cities"][1]["deltas"]
        assert deltas["air_quality"]["difference"] == pytest.approx(-50)
        assert deltas["air_quality"]["trend"] == "Lower"

    def test_compare_bad_cities(self, client, auth):
        response = client.get("/api/comparisons/compare", params={"cities": "nocountry"}, auth=auth)
        assert response.status_code == 422
        assert response.json()["field"] == "cities"

    def test_saved_comparisons(self, client, auth, other_auth):
        response = client.post("/api/comparisons", json={
            "name": "Pair",
            "cities": [{"city": "compare-a", "country": "testland"}],
        }, auth=auth)
        assert response.status_code == 200
        comparison_id = response.json()["id"]

        names = [c["name"] for c in client.get("/api/comparisons", auth=auth).json()]
        assert "Pair" in names
        assert client.delete(f"/api/comparisons/{comparison_id}", auth=other_auth).status_code == 404
        assert client.delete(f"/api/comparisons/{comparison_id}", auth=auth).status_code == 200
        assert client.delete(f"/api/comparisons/{comparison_id}", auth=auth).status_code == 404


class TestHealth:

    def test_root(self, client):
        assert client.get("/").json()["status"] == "ok"

    def test_health(self, client):
        assert client.get("/api/health").json()["status"] == "healthy"

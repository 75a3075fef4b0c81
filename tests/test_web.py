#!/usr/bin/env python3
"""Tests for the Flask web UI."""

import shutil
from pathlib import Path

import pytest
import yaml

from web.app import app

EXAMPLE = Path(__file__).parent.parent / "garage.example.yaml"
TODAY = "today=2025-06-15"


@pytest.fixture
def garage_file(tmp_path):
    path = tmp_path / "garage.yaml"
    shutil.copy(EXAMPLE, path)
    return path


@pytest.fixture
def anon_client(garage_file):
    app.config["TESTING"] = True
    app.config["GARAGE_FILE"] = str(garage_file)
    return app.test_client()


@pytest.fixture
def client(anon_client):
    anon_client.post("/login", data={"user_id": "alice"})
    return anon_client


def read_yaml(path):
    with open(path) as fp:
        return yaml.safe_load(fp)


class TestSignIn:
    """Tests for sign-in and sign-out."""

    def test_anonymous_redirected_to_login(self, anon_client):
        response = anon_client.get("/")
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/login")

    def test_login_page_renders(self, anon_client):
        response = anon_client.get("/login")
        assert response.status_code == 200
        assert b"Sign in" in response.data

    def test_login_sets_user(self, anon_client):
        response = anon_client.post(
            "/login", data={"user_id": "bob"}, follow_redirects=True
        )
        assert response.status_code == 200
        assert b"Signed in as bob" in response.data
        with anon_client.session_transaction() as sess:
            assert sess["user_id"] == "bob"

    def test_login_requires_user_id(self, anon_client):
        response = anon_client.post(
            "/login", data={"user_id": " "}, follow_redirects=True
        )
        assert b"Please enter a user id" in response.data
        assert anon_client.get("/").status_code == 302

    def test_logout(self, client):
        response = client.post("/logout")
        assert response.status_code == 302
        assert client.get("/").status_code == 302

    def test_other_browser_stays_signed_out(self, client):
        """Signing in one client does not sign in anyone else."""
        assert client.get(f"/?{TODAY}").status_code == 200

        stranger = app.test_client()
        response = stranger.get(f"/?{TODAY}")
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/login")

    def test_logout_only_affects_own_client(self, client):
        other = app.test_client()
        other.post("/login", data={"user_id": "bob"})

        client.post("/logout")

        assert client.get("/").status_code == 302
        assert other.get("/").status_code == 200

    def test_each_client_sees_own_garage(self, client):
        other = app.test_client()
        other.post("/login", data={"user_id": "bob"})
        response = other.get(f"/?{TODAY}")
        assert response.status_code == 200
        assert b"Vario" not in response.data
        assert b"Vario" in client.get(f"/?{TODAY}").data


class TestDashboard:
    """Tests for the dashboard page."""

    def test_lists_due_items(self, client):
        response = client.get(f"/?{TODAY}")
        assert response.status_code == 200
        assert b"oil change" in response.data
        assert b"drive belt" in response.data
        assert b"wiper blades" in response.data
        assert b"Marked for replacement" in response.data
        assert b"in 35 days" in response.data
        assert b"tune-up" not in response.data

    def test_empty_garage(self, client, garage_file):
        garage_file.write_text("vehicles: []\n")
        response = client.get("/")
        assert response.status_code == 200
        assert b"No upcoming services" in response.data
        assert b"No parts need replacing" in response.data
        assert b"No upcoming taxes" in response.data

    def test_capped_count_marked(self, client, garage_file):
        data = read_yaml(garage_file)
        data["policy"] = {"listLimit": 1}
        garage_file.write_text(yaml.dump(data))
        response = client.get(f"/?{TODAY}")
        assert b"1+" in response.data
        assert b"wiper blades" not in response.data

    def test_load_failure_is_not_an_empty_dashboard(self, client, garage_file):
        garage_file.write_text("vehicles: [unclosed\n")
        response = client.get("/")
        assert response.status_code == 503
        assert b"Could not load your garage" in response.data
        assert b"No upcoming services" not in response.data


class TestListPages:
    """Tests for services, parts and taxes pages."""

    def test_services(self, client):
        response = client.get(f"/services?{TODAY}")
        assert response.status_code == 200
        assert b"oil change" in response.data
        assert b"tune-up" in response.data

    def test_services_vehicle_filter(self, client):
        response = client.get("/services?vehicle=avanza")
        assert b"tune-up" in response.data
        assert b"oil change" not in response.data

    def test_parts(self, client):
        response = client.get("/parts")
        assert response.status_code == 200
        assert b"drive belt" in response.data
        assert b"Overdue" in response.data

    def test_taxes(self, client):
        response = client.get(f"/taxes?{TODAY}")
        assert response.status_code == 200
        assert b"five-year" in response.data
        assert b"Paid" in response.data
        assert b"Mark as paid" in response.data


class TestVehiclePages:
    """Tests for the vehicle detail page and odometer updates."""

    def test_detail(self, client):
        response = client.get(f"/vehicle/vario?{TODAY}")
        assert response.status_code == 200
        assert b"Honda Vario 125" in response.data
        assert b"oil change" in response.data
        assert b"tune-up" not in response.data

    def test_unknown_vehicle(self, client):
        response = client.get("/vehicle/nope", follow_redirects=True)
        assert response.status_code == 200
        assert b"not found" in response.data

    def test_update_mileage(self, client, garage_file):
        response = client.post(
            "/vehicle/vario/mileage", data={"mileage": "20.500"}, follow_redirects=True
        )
        assert b"Updated odometer to 20,500 km" in response.data
        assert read_yaml(garage_file)["vehicles"][0]["currentMileage"] == 20500

    def test_update_mileage_invalid(self, client, garage_file):
        before = garage_file.read_text()
        response = client.post(
            "/vehicle/vario/mileage", data={"mileage": "lots"}, follow_redirects=True
        )
        assert b"Invalid odometer value" in response.data
        assert garage_file.read_text() == before

    def test_update_mileage_unknown_vehicle(self, client):
        response = client.post(
            "/vehicle/nope/mileage", data={"mileage": "100"}, follow_redirects=True
        )
        assert b"Unknown vehicle" in response.data


class TestMarkTaxPaid:
    """Tests for the mark-as-paid action."""

    def test_marks_paid(self, client, garage_file):
        response = client.post("/tax/tax-vario/paid", data={"next": "/taxes"})
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/taxes")
        assert read_yaml(garage_file)["taxes"][0]["isPaid"] is True

    @pytest.mark.parametrize(
        "next_url",
        [
            "https://example.com/",
            "//evil.example/",
            "/\\evil.example/",
            "javascript:alert(1)",
            "",
        ],
    )
    def test_offsite_next_ignored(self, client, next_url):
        response = client.post("/tax/tax-vario/paid", data={"next": next_url})
        location = response.headers["Location"]
        assert location.endswith("/taxes")
        assert "evil" not in location
        assert "example.com" not in location

    def test_unknown_tax(self, client):
        response = client.post("/tax/nope/paid", follow_redirects=True)
        assert b"Tax &#39;nope&#39; not found" in response.data


class TestEvaluationDate:
    """The `?today=` override only applies under test configuration."""

    def test_override_used_when_testing(self, client):
        response = client.get("/taxes?today=2025-06-15")
        assert b"in 35 days" in response.data

    def test_override_ignored_in_production(self, client):
        app.config["TESTING"] = False
        try:
            response = client.get("/taxes?today=2025-06-15")
        finally:
            app.config["TESTING"] = True
        assert response.status_code == 200
        assert b"in 35 days" not in response.data


class TestOrphanedRecords:
    """Records left behind by a deleted vehicle."""

    def test_marked_on_list_pages(self, client, garage_file):
        data = read_yaml(garage_file)
        data["vehicles"] = [v for v in data["vehicles"] if v["id"] != "vario"]
        garage_file.write_text(yaml.dump(data, sort_keys=False))

        services = client.get("/services").data
        parts = client.get("/parts").data

        assert b"Vehicle deleted" in services
        assert b"Vehicle deleted" in parts

    def test_not_marked_when_vehicle_exists(self, client):
        assert b"Vehicle deleted" not in client.get("/services").data

"""Tests for categorization API endpoints."""

import pytest
from fastapi.testclient import TestClient

from app.database import get_db
from app.dependencies import get_categorization_config
from app.main import app
from app.models import CategoryCorrection
from app.schemas.categorization import DictionaryEntryResponse


@pytest.fixture
def bare_client(empty_db_session, config):
    """Test client against a database with no tables."""
    app.dependency_overrides[get_db] = lambda: empty_db_session
    app.dependency_overrides[get_categorization_config] = lambda: config
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestCategorizeAPI:
    """Test the categorize endpoint."""

    def test_keyword_rule(self, client):
        response = client.post("/api/v1/categorization/categorize", json={
            "user_id": "user-1",
            "amount": 250,
            "description": "",
            "merchant": "Swiggy Bangalore Private Ltd",
            "payment_method": "upi"
        })
        assert response.status_code == 200
        data = response.json()
        assert data["category"] == "Food"
        assert data["confidence"] == pytest.approx(0.82)
        assert data["reason"] == "matched keyword rule for Food"

    def test_dictionary_entry(self, client, make_entry):
        make_entry("Ramesh Kirana", "Groceries", confidence=0.9)
        response = client.post("/api/v1/categorization/categorize", json={
            "user_id": "user-1",
            "amount": "120.50",
            "merchant": "RAMESH KIRANA"
        })
        assert response.status_code == 200
        assert response.json()["category"] == "Groceries"

    def test_unknown_without_credentials(self, client):
        """No API key configured: falls back without touching the network."""
        response = client.post("/api/v1/categorization/categorize", json={
            "user_id": "user-1",
            "amount": 10,
            "description": "misc",
            "merchant": "QX-881"
        })
        assert response.status_code == 200
        data = response.json()
        assert data["category"] == "Uncategorized"
        assert data["confidence"] == pytest.approx(0.2)
        assert data["reason"] == "openai api key not configured"

    def test_user_id_required(self, client):
        response = client.post("/api/v1/categorization/categorize", json={"merchant": "Swiggy"})
        assert response.status_code == 422

    def test_unprovisioned_database(self, bare_client):
        response = bare_client.post("/api/v1/categorization/categorize", json={
            "user_id": "user-1",
            "merchant": "Zomato"
        })
        assert response.status_code == 200
        assert response.json()["category"] == "Food"


class TestCorrectionsAPI:
    """Test the correction endpoint."""

    def test_record_correction(self, client, db_session):
        response = client.post("/api/v1/categorization/corrections", json={
            "user_id": "user-1",
            "merchant": "Ramesh Kirana",
            "description": "monthly provisions",
            "old_category": "Uncategorized",
            "new_category": "Groceries",
            "expense_id": "exp-7"
        })
        assert response.status_code == 200
        data = response.json()
        assert data["recorded"] is True
        assert data["correction_id"]
        assert data["dictionary_entry_id"]
        assert db_session.query(CategoryCorrection).count() == 1

    def test_unchanged_category_not_recorded(self, client, db_session):
        response = client.post("/api/v1/categorization/corrections", json={
            "user_id": "user-1",
            "merchant": "Swiggy",
            "old_category": "Food",
            "new_category": "Food"
        })
        assert response.status_code == 200
        assert response.json() == {"recorded": False, "correction_id": None, "dictionary_entry_id": None}
        assert db_session.query(CategoryCorrection).count() == 0

    def test_correction_then_categorize(self, client):
        """A correction changes the next categorization for that user."""
        client.post("/api/v1/categorization/corrections", json={
            "user_id": "user-1",
            "merchant": "Ramesh Kirana",
            "old_category": "Uncategorized",
            "new_category": "Groceries"
        })
        response = client.post("/api/v1/categorization/categorize", json={
            "user_id": "user-1",
            "merchant": "Ramesh Kirana Pvt Ltd"
        })
        data = response.json()
        assert data["category"] == "Groceries"
        assert data["reason"] == "matched merchant dictionary (user_correction)"

    def test_unprovisioned_database(self, bare_client):
        response = bare_client.post("/api/v1/categorization/corrections", json={
            "user_id": "user-1",
            "merchant": "Swiggy",
            "old_category": "Uncategorized",
            "new_category": "Food"
        })
        assert response.status_code == 503


class TestDictionaryAPI:
    """Test the dictionary listing endpoint."""

    def test_list_visible_entries(self, client, make_entry):
        make_entry("Swiggy", "Food", confidence=0.9)
        make_entry("Chai Point", "Food", confidence=0.95, user_id="user-1", source="user_correction")
        make_entry("Ramesh Kirana", "Groceries", confidence=0.95, user_id="user-2", source="user_correction")

        response = client.get("/api/v1/categorization/dictionary", params={"user_id": "user-1"})
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [item["merchant_keyword"] for item in data["items"]] == ["Chai Point", "Swiggy"]
        assert data["items"][1]["user_id"] is None

    def test_entry_schema_reads_orm_rows(self, make_entry):
        entry = make_entry("Swiggy", "Food", confidence=0.9)

        item = DictionaryEntryResponse.model_validate(entry)

        assert DictionaryEntryResponse.model_config["from_attributes"] is True
        assert (item.normalized_keyword, item.category, item.hit_count) == ("swiggy", "Food", 0)

    def test_user_id_required(self, client):
        response = client.get("/api/v1/categorization/dictionary")
        assert response.status_code == 422

    def test_unprovisioned_database(self, bare_client):
        response = bare_client.get("/api/v1/categorization/dictionary", params={"user_id": "user-1"})
        assert response.status_code == 503


class TestCategoriesAPI:
    """Test the category listing endpoint."""

    def test_list_categories(self, client):
        response = client.get("/api/v1/categorization/categories")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == len(data["items"])
        assert data["items"][0] == "Food"
        assert data["items"][-1] == "Uncategorized"


class TestSettingsAPI:
    """Test the read-only settings endpoint."""

    def test_get_settings(self, client):
        response = client.get("/api/v1/settings")
        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "rules_plus_openai"
        assert data["min_match_score"] == pytest.approx(0.72)
        assert data["scan_limit"] == 300
        assert data["openai_configured"] is False
        assert data["local_model_configured"] is False

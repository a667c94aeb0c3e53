"""Tests for the filters and presets API endpoints."""


class TestDecode:
    """Tests for GET /api/filters/decode."""

    def test_decode(self, client):
        """Test decoding URL keys to the canonical state."""
        response = client.get("/api/filters/decode?drug=A,B&ta=Oncology&from=2024-01-01&to=2024-06-01")

        assert response.status_code == 200
        data = response.json()
        assert data["filters"]["drug"] == ["A", "B"]
        assert data["filters"]["therapeuticArea"] == ["Oncology"]
        assert data["filters"]["country"] == []
        assert data["filters"]["dateFrom"] == "2024-01-01"
        assert data["query"] == "drug=A,B&ta=Oncology&from=2024-01-01&to=2024-06-01"
        assert data["activeFilterCount"] == 3

    def test_first_value_wins(self, client):
        """Test that a repeated key keeps its first value."""
        response = client.get("/api/filters/decode?country=Germany&country=France&from=2024-01-01&to=2024-06-01")

        assert response.status_code == 200
        assert response.json()["filters"]["country"] == ["Germany"]

    def test_malformed_date(self, client):
        """Test that a malformed date returns 400."""
        response = client.get("/api/filters/decode?to=2024-13-45")

        assert response.status_code == 400


class TestEncode:
    """Tests for POST /api/filters/encode."""

    def test_encode(self, client):
        """Test encoding a camelCase body."""
        response = client.post(
            "/api/filters/encode",
            json={"drug": ["A", "B"], "therapeuticArea": ["Oncology"], "dateFrom": "2024-01-01"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["query"] == "drug=A,B&ta=Oncology&from=2024-01-01"
        assert data["url"] == "/?drug=A,B&ta=Oncology&from=2024-01-01"

    def test_encode_with_path(self, client):
        """Test the URL path option and the empty state."""
        response = client.post("/api/filters/encode?path=/insights", json={})

        assert response.status_code == 200
        assert response.json() == {"query": "", "url": "/insights"}

    def test_encode_bad_date(self, client):
        """Test that a malformed date in the body returns 400."""
        response = client.post("/api/filters/encode", json={"dateTo": "yesterday"})

        assert response.status_code == 400


class TestOptions:
    """Tests for the filter options endpoints."""

    def test_list_options(self, client):
        """Test distinct values for every dimension, most frequent first."""
        response = client.get("/api/filters/options")

        assert response.status_code == 200
        data = response.json()
        assert data["drug"] == ["A", "B", "C"]
        assert data["country"] == ["Germany", "France", "UK"]
        assert data["company"] == ["Acme", "Gamma", "Beta"]
        assert response.headers["Cache-Control"].startswith("public, max-age=")

    def test_dimension_search(self, client):
        """Test autocomplete for one dimension."""
        response = client.get("/api/filters/options/country", params={"search": "fr"})

        assert response.status_code == 200
        assert response.json() == [{"value": "France", "label": "France", "count": 2}]

    def test_dimension_limit(self, client):
        """Test limiting autocomplete results."""
        response = client.get("/api/filters/options/drug", params={"limit": 1})

        assert response.status_code == 200
        assert [item["value"] for item in response.json()] == ["A"]

    def test_unknown_dimension(self, client):
        """Test that a non-filter dimension returns 404."""
        response = client.get("/api/filters/options/doi")

        assert response.status_code == 404


class TestSuggestions:
    """Tests for GET /api/filters/suggestions."""

    def test_suggestions(self, client, date_range):
        """Test suggestions while only the date range is active."""
        response = client.get("/api/filters/suggestions", params=date_range)

        assert response.status_code == 200
        data = response.json()
        assert [(s["dimension"], s["label"]) for s in data] == [
            ("therapeutic_area", "Oncology"),
            ("therapeutic_area", "Immunology"),
            ("therapeutic_area", "Cardiology"),
            ("drug", "A"),
            ("drug", "B"),
            ("country", "Germany"),
            ("country", "France"),
        ]
        assert data[0]["apply"]["therapeuticArea"] == ["Oncology"]

    def test_no_suggestions_with_value_filter(self, client, date_range):
        """Test that a value filter suppresses suggestions."""
        response = client.get("/api/filters/suggestions", params={**date_range, "drug": "A"})

        assert response.status_code == 200
        assert response.json() == []


class TestPresets:
    """Tests for the presets endpoints."""

    def test_list_presets(self, client):
        """Test listing built-in presets."""
        response = client.get("/api/filters/presets")

        assert response.status_code == 200
        data = response.json()
        assert data[0]["id"] == "all-data"
        assert data[0]["isDefault"] is True
        assert all(p["isBuiltIn"] for p in data)
        assert "competitive-analysis" in [p["id"] for p in data]

    def test_get_preset(self, client):
        """Test a preset with its resolved state."""
        response = client.get("/api/filters/presets/competitive-analysis")

        assert response.status_code == 200
        data = response.json()
        assert data["lookbackDays"] == 90
        assert data["resolved"]["therapeuticArea"] == ["Oncology"]
        assert data["resolved"]["dateFrom"] is not None
        assert data["query"].startswith("ta=Oncology&from=")

    def test_preset_without_lookback(self, client):
        """Test that a preset without lookback sets no dates."""
        response = client.get("/api/filters/presets/kol-identification")

        assert response.status_code == 200
        data = response.json()
        assert data["resolved"]["dateFrom"] is None
        assert data["query"] == "sp=Cardiology,Internal%20Medicine&prof=Physician"

    def test_unknown_preset(self, client):
        """Test that an unknown preset returns 404."""
        response = client.get("/api/filters/presets/nonexistent")

        assert response.status_code == 404

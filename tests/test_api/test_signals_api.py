"""Tests for the signals API endpoints."""

import pytest


class TestRootEndpoints:
    """Tests for root and health endpoints."""

    def test_root(self, client):
        """Test API info."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert "signals" in data["endpoints"]
        assert data["docs"] == "/docs"

    def test_health(self, client):
        """Test the health check reports loaded records."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "records_loaded": 5}


class TestOverview:
    """Tests for GET /api/signals/overview."""

    def test_overview(self, client, date_range):
        """Test metrics and top lists for the full range."""
        response = client.get("/api/signals/overview", params=date_range)

        assert response.status_code == 200
        data = response.json()
        assert data["metrics"]["totalRecords"] == 5
        assert [item["label"] for item in data["topDrugs"]] == ["A", "B", "C"]
        assert data["topTherapeuticAreas"][0] == {"label": "Oncology", "count": 3, "share": None}

    def test_overview_filtered(self, client, date_range):
        """Test that URL filter keys narrow the record set."""
        response = client.get("/api/signals/overview", params={**date_range, "drug": "A", "country": "Germany,UK"})

        assert response.status_code == 200
        data = response.json()
        assert data["metrics"]["totalRecords"] == 2
        assert "Drugs: A" in data["summary"]

    def test_malformed_date(self, client):
        """Test that a malformed date returns 400."""
        response = client.get("/api/signals/overview", params={"from": "not-a-date"})

        assert response.status_code == 400
        assert "from" in response.json()["detail"]

    @pytest.mark.parametrize("query", ["to=9999-12-31", "from=0001-01-01"])
    def test_out_of_range_date(self, client, query):
        """Test that dates outside the supported years return 400."""
        response = client.get(f"/api/signals/overview?{query}")

        assert response.status_code == 400
        assert "year must be between" in response.json()["detail"]

    def test_no_cache_header(self, client, date_range):
        """Test that aggregate endpoints are not cached."""
        response = client.get("/api/signals/overview", params=date_range)

        assert response.headers["Cache-Control"] == "no-cache"


class TestRankings:
    """Tests for GET /api/signals/rankings/{dimension}."""

    def test_rankings(self, client, date_range):
        """Test ranking with share."""
        response = client.get("/api/signals/rankings/drug", params={**date_range, "top_n": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["dimension"] == "drug"
        assert data["totalRecords"] == 5
        assert [(item["label"], item["count"]) for item in data["items"]] == [("A", 3), ("B", 2)]
        assert data["items"][0]["share"] > 40

    def test_unknown_dimension(self, client):
        """Test that an unknown dimension returns 404."""
        response = client.get("/api/signals/rankings/planet")

        assert response.status_code == 404


class TestTrends:
    """Tests for GET /api/signals/trends."""

    def test_count_trend(self, client):
        """Test bucketed counts over the requested range."""
        response = client.get(
            "/api/signals/trends",
            params={"from": "2024-01-01", "to": "2024-03-31", "bucket_days": 30},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["dateFrom"] == "2024-01-01"
        assert [p["date"] for p in data["points"]] == ["2024-01-01", "2024-01-31", "2024-03-01", "2024-03-31"]
        assert [p["value"] for p in data["points"]] == [2, 2, 1, 0]
        assert all(isinstance(p["value"], int) for p in data["points"])

    def test_citation_trend(self, client):
        """Test summing citations per bucket."""
        response = client.get(
            "/api/signals/trends",
            params={"from": "2024-01-01", "to": "2024-03-31", "bucket_days": 30, "metric": "citations"},
        )

        assert response.status_code == 200
        assert [p["value"] for p in response.json()["points"]] == [2, 4, 0, 0]

    def test_invalid_metric(self, client):
        """Test that an unknown metric returns 400."""
        response = client.get("/api/signals/trends", params={"metric": "likes"})

        assert response.status_code == 400


class TestDrugTrends:
    """Tests for GET /api/signals/drug-trends."""

    def test_drug_trends(self, client, date_range):
        """Test monthly counts for the top drugs."""
        response = client.get("/api/signals/drug-trends", params={**date_range, "top_n": 2, "growth": "true"})

        assert response.status_code == 200
        data = response.json()
        assert data["labels"] == ["A", "B"]
        assert [row["month"] for row in data["months"]] == ["2024-01", "2024-02", "2024-03"]
        assert data["months"][1]["growth"] == {"A": 0.0, "B": -100.0}

    def test_empty_subset(self, client, date_range):
        """Test that no matching records yields no months."""
        response = client.get("/api/signals/drug-trends", params={**date_range, "drug": "Z"})

        assert response.status_code == 200
        assert response.json()["months"] == []


class TestEmergingAndGeography:
    """Tests for window-based endpoints."""

    def test_emerging(self, client, date_range):
        """Test the emerging signals shape for a fixed reference time."""
        response = client.get(
            "/api/signals/emerging",
            params={**date_range, "as_of": "2024-03-31T00:00:00+00:00", "window_days": 60},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["asOf"] == "2024-03-31T00:00:00+00:00"
        assert data["windowDays"] == 60
        assert data["totalRecordsAnalyzed"] == 5
        assert isinstance(data["signals"], list)

    def test_invalid_as_of(self, client):
        """Test that a malformed reference time returns 400."""
        response = client.get("/api/signals/emerging", params={"as_of": "tomorrow"})

        assert response.status_code == 400

    @pytest.mark.parametrize("endpoint", ["emerging", "geography"])
    @pytest.mark.parametrize("as_of", ["0001-01-05", "9999-12-31"])
    def test_out_of_range_as_of(self, client, endpoint, as_of):
        """Test that a reference time outside the supported years returns 400."""
        response = client.get(f"/api/signals/{endpoint}", params={"as_of": as_of})

        assert response.status_code == 400

    def test_geography(self, client, date_range):
        """Test the country rollup."""
        response = client.get(
            "/api/signals/geography",
            params={**date_range, "as_of": "2024-03-31T00:00:00+00:00", "window_days": 30},
        )

        assert response.status_code == 200
        groups = response.json()["groups"]
        assert groups[0]["group"] == "France"
        assert groups[0]["count"] == 1
        assert groups[0]["percentChange"] == 100
        assert len(groups[0]["sparkline"]) == 7


class TestCitations:
    """Tests for GET /api/signals/citations."""

    def test_citations(self, client, date_range):
        """Test citation insights for the full range."""
        response = client.get("/api/signals/citations", params=date_range)

        assert response.status_code == 200
        data = response.json()
        assert data["totalCitations"] == 6
        assert data["evidenceBasedPercentage"] == 60
        assert data["sampleDois"] == ["10.1/d1", "10.1/d2", "10.1/d3"]

"""
Tests for the session API endpoints.

Test Categories:
1. Health and session state
2. Text and configuration mutations
3. Statistics and keyword panels
4. CSV export
"""

import pytest


# ============================================================================
# Health / State
# ============================================================================

class TestHealthEndpoint:
    def test_health_returns_ok(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["persistent"] is False
        assert "timestamp" in data


class TestSessionState:
    def test_initial_state(self, test_client):
        data = test_client.get("/session").json()
        assert data["text"] == ""
        assert data["degraded"] is False
        assert data["configuration"]["reading_rate"] == 275
        assert data["configuration"]["statistics_options"] == [
            "Words",
            "Characters",
            "Sentences",
            "Paragraphs",
            {"ReadingTime": 275},
            {"SpeakingTime": 180},
        ]


# ============================================================================
# Mutations
# ============================================================================

class TestMutations:
    def test_set_text_bumps_revision(self, test_client):
        first = test_client.put("/session/text", json={"text": "One."}).json()
        second = test_client.put("/session/text", json={"text": "One. Two."}).json()
        assert second["revision"] == first["revision"] + 1
        assert test_client.get("/session").json()["text"] == "One. Two."

    def test_clear_text(self, test_client):
        test_client.put("/session/text", json={"text": "gone soon"})
        response = test_client.delete("/session/text")
        assert response.status_code == 200
        assert test_client.get("/session").json()["text"] == ""

    def test_match_case(self, test_client):
        data = test_client.put("/session/match-case", json={"enabled": True}).json()
        assert data["configuration"]["match_case"] is True

    def test_toggle_statistic_keeps_canonical_order(self, test_client):
        data = test_client.put("/session/options/LineCount", json={"enabled": True}).json()
        options = data["configuration"]["statistics_options"]
        assert options.index("LineCount") == options.index("Paragraphs") + 1

    def test_toggle_accepts_loose_kind_names(self, test_client):
        response = test_client.put("/session/options/unique-words", json={"enabled": True})
        assert response.status_code == 200
        assert "UniqueWords" in response.json()["configuration"]["statistics_options"]

    def test_unknown_statistic_is_404(self, test_client):
        response = test_client.put("/session/options/Syllables", json={"enabled": True})
        assert response.status_code == 404

    def test_set_rate(self, test_client):
        data = test_client.put("/session/rates/ReadingTime", json={"rate": "300"}).json()
        assert data["configuration"]["reading_rate"] == 300
        assert {"ReadingTime": 300} in data["configuration"]["statistics_options"]

    def test_invalid_rate_becomes_zero(self, test_client):
        data = test_client.put("/session/rates/SpeakingTime", json={"rate": "fast"}).json()
        assert data["configuration"]["speaking_rate"] == 0

    def test_rate_on_non_rate_kind_is_400(self, test_client):
        response = test_client.put("/session/rates/Words", json={"rate": 10})
        assert response.status_code == 400

    def test_rate_on_unknown_kind_is_404(self, test_client):
        response = test_client.put("/session/rates/Blinking", json={"rate": 10})
        assert response.status_code == 404


# ============================================================================
# Panels
# ============================================================================

class TestStatisticsPanel:
    def test_default_statistics(self, test_client, sample_text):
        test_client.put("/session/text", json={"text": sample_text})
        data = test_client.get("/session/statistics").json()
        values = {item["kind"]: item["value"] for item in data["statistics"]}
        assert values == {
            "Words": 18,
            "Characters": 87,
            "Sentences": 4,
            "Paragraphs": 2,
            "ReadingTime": 3,
            "SpeakingTime": 6,
        }

    def test_revision_matches_latest_mutation(self, test_client):
        revision = test_client.put("/session/text", json={"text": "Latest."}).json()["revision"]
        assert test_client.get("/session/statistics").json()["revision"] == revision

    def test_time_estimate_has_breakdown(self, test_client):
        test_client.put("/session/text", json={"text": " ".join(["word"] * 125)})
        data = test_client.get("/session/statistics").json()
        reading = [item for item in data["statistics"] if item["kind"] == "ReadingTime"][0]
        assert reading["display"] == "27 secs"
        assert reading["breakdown"] == [{"value": 27, "unit": "secs"}]

    def test_empty_text(self, test_client):
        data = test_client.get("/session/statistics").json()
        assert all(item["value"] == 0 for item in data["statistics"])


class TestKeywordsPanel:
    def test_ranked_keywords(self, test_client, mixed_case_text):
        test_client.put("/session/text", json={"text": mixed_case_text})
        data = test_client.get("/session/keywords").json()
        assert data["match_case"] is False
        assert data["total_keywords"] == 2
        assert data["total_words"] == 5
        assert [row["word"] for row in data["keywords"]] == ["cat", "dog"]
        assert data["keywords"][0]["density"] == pytest.approx(150.0)

    def test_match_case_splits_keywords(self, test_client, mixed_case_text):
        test_client.put("/session/text", json={"text": mixed_case_text})
        test_client.put("/session/match-case", json={"enabled": True})
        data = test_client.get("/session/keywords").json()
        assert data["match_case"] is True
        assert data["total_keywords"] == 5


class TestExport:
    def test_export_csv(self, test_client):
        test_client.put("/session/text", json={"text": "hello hello"})
        response = test_client.get("/session/keywords/export")
        assert response.status_code == 200
        assert response.content == b"Word,Count\nhello,2\n"
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="results.csv"' in response.headers["content-disposition"]

    def test_export_empty_session(self, test_client):
        response = test_client.get("/session/keywords/export")
        assert response.content == b"Word,Count\n"

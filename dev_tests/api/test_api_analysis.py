"""
Tests for the stateless /analysis endpoints.
"""

import pytest


class TestAnalysisStatistics:
    def test_defaults_when_options_omitted(self, test_client, sample_text):
        response = test_client.post("/analysis/statistics", json={"text": sample_text})
        assert response.status_code == 200
        data = response.json()
        assert data["revision"] == 0
        assert [item["kind"] for item in data["statistics"]] == [
            "Words",
            "Characters",
            "Sentences",
            "Paragraphs",
            "ReadingTime",
            "SpeakingTime",
        ]

    def test_explicit_options_are_canonicalized(self, test_client, sample_text):
        response = test_client.post(
            "/analysis/statistics",
            json={"text": sample_text, "statistics_options": ["AvgSentenceWords", "Words"]},
        )
        data = response.json()
        assert [item["kind"] for item in data["statistics"]] == ["Words", "AvgSentenceWords"]
        assert data["statistics"][1]["display"] == "4.5"

    def test_rate_from_option_list(self, test_client):
        response = test_client.post(
            "/analysis/statistics",
            json={"text": " ".join(["word"] * 68), "statistics_options": [{"HandWritingTime": 68}]},
        )
        item = response.json()["statistics"][0]
        assert item["value"] == 60
        assert item["display"] == "1 min 0 secs"

    @pytest.mark.parametrize("options", [
        ["Bogus"],
        ["ReadingTime"],
        [{"Words": 3}],
        [{"SpeakingTime": -1}],
        [42],
    ])
    def test_malformed_options_are_rejected(self, test_client, options):
        """Given: An invalid option list, Then: 422 with the parse error, no silent defaults"""
        response = test_client.post(
            "/analysis/statistics",
            json={"text": "x", "statistics_options": options},
        )
        assert response.status_code == 422
        assert "Invalid statistics_options" in response.json()["detail"]

    def test_empty_option_list_computes_nothing(self, test_client):
        response = test_client.post(
            "/analysis/statistics",
            json={"text": "x", "statistics_options": []},
        )
        assert response.status_code == 200
        assert response.json()["statistics"] == []

    def test_duplicate_options_collapse(self, test_client):
        response = test_client.post(
            "/analysis/statistics",
            json={"text": "x", "statistics_options": ["Words", "Words"]},
        )
        assert [item["kind"] for item in response.json()["statistics"]] == ["Words"]

    def test_does_not_touch_session(self, test_client):
        test_client.post("/analysis/statistics", json={"text": "not stored"})
        assert test_client.get("/session").json()["text"] == ""


class TestAnalysisKeywords:
    def test_keywords(self, test_client, mixed_case_text):
        data = test_client.post("/analysis/keywords", json={"text": mixed_case_text}).json()
        assert data["total_keywords"] == 2
        assert data["keywords"][0] == {"word": "cat", "count": 3, "density": pytest.approx(150.0)}

    def test_total_words_basis(self, test_client, mixed_case_text):
        data = test_client.post(
            "/analysis/keywords",
            json={"text": mixed_case_text, "density_basis": "total_words"},
        ).json()
        assert data["keywords"][0]["density"] == pytest.approx(60.0)

    def test_top_k(self, test_client, mixed_case_text):
        data = test_client.post(
            "/analysis/keywords",
            json={"text": mixed_case_text, "match_case": True, "top_k": 2},
        ).json()
        assert len(data["keywords"]) == 2
        assert data["total_keywords"] == 5

    def test_invalid_basis_is_rejected(self, test_client):
        response = test_client.post("/analysis/keywords", json={"text": "a", "density_basis": "lines"})
        assert response.status_code == 422


class TestAnalysisHealth:
    def test_health(self, test_client):
        data = test_client.get("/analysis/health").json()
        assert data["status"] == "healthy"
        assert "/analysis/keywords" in data["endpoints"]

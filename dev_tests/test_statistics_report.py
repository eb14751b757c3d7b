"""
Tests for statistics_report.py - Evaluating enabled options against text.
"""

import pytest
from statistics_options import CANONICAL_ORDER, StatisticKind, StatisticOption, StatisticOptionSet
from statistics_report import STATISTIC_LABELS, build_statistics_report, compute_statistic


class TestComputeStatistic:
    """Tests for compute_statistic()."""

    def test_count_statistic(self, sample_text):
        value = compute_statistic(StatisticOption(StatisticKind.WORDS), sample_text)
        assert value.value == 18
        assert value.display == "18"
        assert value.label == "Words"
        assert value.rate is None

    def test_average_is_displayed_with_one_decimal(self, sample_text):
        value = compute_statistic(StatisticOption(StatisticKind.AVG_SENTENCE_WORDS), sample_text)
        assert value.value == pytest.approx(4.5)
        assert value.display == "4.5"

    def test_time_estimate(self):
        """Given: 125 words at 275 wpm, Then: 27 seconds with a labeled breakdown"""
        text = " ".join(["word"] * 125)
        value = compute_statistic(StatisticOption(StatisticKind.READING_TIME, 275), text)
        assert value.value == 27
        assert value.display == "27 secs"
        assert value.rate == 275
        assert value.breakdown == ((27, "secs"),)

    def test_time_estimate_with_zero_rate(self):
        value = compute_statistic(StatisticOption(StatisticKind.SPEAKING_TIME, 0), "some words here")
        assert value.value == 0

    def test_to_dict_omits_rate_for_counts(self):
        data = compute_statistic(StatisticOption(StatisticKind.LINE_COUNT), "a\nb").to_dict()
        assert data == {"kind": "LineCount", "label": "Line Count", "value": 2, "display": "2"}

    def test_to_dict_includes_breakdown_for_time_estimates(self):
        text = " ".join(["word"] * 360)
        data = compute_statistic(StatisticOption(StatisticKind.SPEAKING_TIME, 180), text).to_dict()
        assert data["rate"] == 180
        assert data["breakdown"] == [{"value": 2, "unit": "mins"}, {"value": 0, "unit": "secs"}]

    def test_every_kind_has_a_label(self):
        assert set(STATISTIC_LABELS) == set(CANONICAL_ORDER)


class TestBuildStatisticsReport:
    """Tests for build_statistics_report()."""

    def test_keeps_option_order(self, sample_text):
        options = StatisticOptionSet.defaults().options
        report = build_statistics_report(options, sample_text)
        assert [value.kind for value in report] == [option.kind for option in options]

    def test_all_statistics_on_empty_text(self):
        """Given: Empty text, Then: Every statistic evaluates without error"""
        report = build_statistics_report(StatisticOptionSet(CANONICAL_ORDER).options, "")
        assert len(report) == 15
        assert all(value.value == 0 for value in report)

    def test_empty_option_list(self, sample_text):
        assert build_statistics_report([], sample_text) == []

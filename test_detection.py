"""Tests for the URL scoring heuristic."""

import random

import pytest

from verifake.detector import DetectionHeuristic, generate_detection_result, round_half_up
from conftest import FixedRandom


def heuristic(*values: float) -> DetectionHeuristic:
    return DetectionHeuristic(FixedRandom(*values))


class TestRiskFactors:

    @pytest.mark.parametrize("url, expected", [
        ("https://twitter.com/fake_account", [0, 40, 0]),
        ("https://twitter.com/botnet", [0, 0, 35]),
        ("https://twitter.com/suspicious", [30, 0, 0]),
        ("https://twitter.com/jane", [0, 0, 0]),
    ])
    def test_single_marker_weights(self, url, expected):
        assert DetectionHeuristic().risk_factors(url) == expected

    def test_markers_are_additive(self):
        factors = DetectionHeuristic().risk_factors("https://x.com/suspicious_fake_bot")
        assert sum(factors) == 105

    def test_markers_are_case_sensitive(self):
        assert sum(DetectionHeuristic().risk_factors("https://x.com/FAKE_BOT")) == 0


class TestRiskLevel:

    @pytest.mark.parametrize("score, level", [
        (0, "low"),
        (29.9, "low"),
        (30, "medium"),
        (69.9, "medium"),
        (70, "high"),
        (100, "high"),
    ])
    def test_boundaries(self, score, level):
        assert DetectionHeuristic.risk_level(score) == level


class TestAnalyze:

    def test_fake_bot_url_scores_high(self):
        result = heuristic(0.0).analyze("https://twitter.com/fake_bot", "twitter")

        assert result.fakeScore == 75
        assert result.confidence == 85
        assert result.riskLevel == "high"
        assert result.indicators == [
            "Irregular posting pattern",
            "Low profile completeness",
            "Suspicious network connections",
        ]
        assert result.analysisDetails == {
            "profileCompleteness": "Low",
            "postingPattern": "Irregular",
            "networkQuality": "Suspicious",
            "contentAuthenticity": "Poor",
        }

    def test_score_is_clamped_to_100(self):
        result = heuristic(0.99).analyze("https://x.com/suspicious_fake_bot", "twitter")

        assert result.fakeScore == 100
        assert len(result.indicators) == 4
        assert result.indicators[-1] == "Poor content authenticity"

    def test_clean_url_uses_random_component_only(self):
        result = heuristic(0.5, 0.5).analyze("https://instagram.com/jane", "instagram")

        assert result.fakeScore == 25
        assert result.confidence == 90
        assert result.riskLevel == "low"
        assert result.indicators == ["Irregular posting pattern"]
        assert result.analysisDetails == {
            "profileCompleteness": "Medium",
            "postingPattern": "Normal",
            "networkQuality": "Good",
            "contentAuthenticity": "Good",
        }

    def test_zero_score_has_no_indicators(self):
        result = heuristic(0.0).analyze("https://facebook.com/jane", "facebook")

        assert result.fakeScore == 0
        assert result.indicators == []
        assert result.analysisDetails["profileCompleteness"] == "High"

    def test_ranges_hold_for_random_inputs(self):
        rng = random.Random(1234)
        detector = DetectionHeuristic(rng)
        for i in range(200):
            url = f"https://twitter.com/{'fake' if i % 2 else 'user'}{'bot' if i % 3 else ''}{i}"
            result = detector.analyze(url, "twitter")
            assert 0 <= result.fakeScore <= 100
            assert 85 <= result.confidence <= 95
            assert result.riskLevel in ("low", "medium", "high")

    def test_seeded_runs_are_reproducible(self):
        first = generate_detection_result("https://x.com/bot", "twitter", random.Random(7))
        second = generate_detection_result("https://x.com/bot", "twitter", random.Random(7))
        assert first == second

    def test_as_record_copies_lists(self):
        result = heuristic(0.0).analyze("https://twitter.com/fake_bot", "twitter")
        record = result.as_record()
        record["indicators"].append("extra")
        assert "extra" not in result.indicators


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(74.4) == 74
    assert round_half_up(0.0) == 0

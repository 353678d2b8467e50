"""
Placeholder scoring heuristic for social account URLs.

Stands in for a real detection model: the score is the sum of fixed
weights for marker substrings in the URL plus one random component,
clamped to [0, 100]. Risk tier, indicators and the qualitative analysis
details are all threshold functions of that score.

The random source is injectable so results can be pinned in tests.
"""

import math
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass
class DetectionResult:
    """Output of one heuristic run, ready to be stored as a Detection."""
    fakeScore: int
    confidence: int
    riskLevel: str
    indicators: List[str] = field(default_factory=list)
    analysisDetails: Dict[str, str] = field(default_factory=dict)

    def as_record(self) -> dict:
        return {
            "fakeScore": self.fakeScore,
            "confidence": self.confidence,
            "riskLevel": self.riskLevel,
            "indicators": list(self.indicators),
            "analysisDetails": dict(self.analysisDetails),
        }


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class DetectionHeuristic:
    """Scores an account URL. Stateless apart from the random source."""

    # (case-sensitive substring, weight) — each adds independently
    URL_MARKERS: List[Tuple[str, float]] = [
        ("suspicious", 30),
        ("fake",       40),
        ("bot",        35),
    ]

    RANDOM_SPAN: float = 50.0          # random component in [0, 50)
    CONFIDENCE_BASE: float = 85.0      # confidence in [85, 95)
    CONFIDENCE_SPAN: float = 10.0

    MIN_SCORE: float = 0.0
    MAX_SCORE: float = 100.0

    LOW_RISK_BELOW: float = 30.0
    HIGH_RISK_FROM: float = 70.0

    # Cumulative: every threshold the score exceeds adds its indicator
    INDICATOR_THRESHOLDS: List[Tuple[float, str]] = [
        (20, "Irregular posting pattern"),
        (40, "Low profile completeness"),
        (60, "Suspicious network connections"),
        (80, "Poor content authenticity"),
    ]

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def analyze(self, url: str, platform: str) -> DetectionResult:
        """Score ``url``. Platform is accepted for interface parity but unused."""
        factors = self.risk_factors(url)
        factors.append(self._rng.random() * self.RANDOM_SPAN)
        score = self.clamp(sum(factors))
        confidence = self.CONFIDENCE_BASE + self._rng.random() * self.CONFIDENCE_SPAN

        return DetectionResult(
            fakeScore=round_half_up(score),
            confidence=round_half_up(confidence),
            riskLevel=self.risk_level(score),
            indicators=self.indicators(score),
            analysisDetails=self.analysis_details(score),
        )

    def risk_factors(self, url: str) -> List[float]:
        """Deterministic per-marker contributions (0 when the marker is absent)."""
        return [weight if marker in url else 0.0 for marker, weight in self.URL_MARKERS]

    @classmethod
    def clamp(cls, score: float) -> float:
        return max(cls.MIN_SCORE, min(cls.MAX_SCORE, score))

    @classmethod
    def risk_level(cls, score: float) -> str:
        if score < cls.LOW_RISK_BELOW:
            return "low"
        if score < cls.HIGH_RISK_FROM:
            return "medium"
        return "high"

    @classmethod
    def indicators(cls, score: float) -> List[str]:
        return [label for threshold, label in cls.INDICATOR_THRESHOLDS if score > threshold]

    @staticmethod
    def analysis_details(score: float) -> Dict[str, str]:
        if score > 40:
            completeness = "Low"
        elif score > 20:
            completeness = "Medium"
        else:
            completeness = "High"
        return {
            "profileCompleteness": completeness,
            "postingPattern": "Irregular" if score > 30 else "Normal",
            "networkQuality": "Suspicious" if score > 50 else "Good",
            "contentAuthenticity": "Poor" if score > 70 else "Good",
        }


def generate_detection_result(
    url: str,
    platform: str,
    rng: Optional[random.Random] = None,
) -> DetectionResult:
    """One-shot convenience wrapper around DetectionHeuristic.analyze."""
    return DetectionHeuristic(rng).analyze(url, platform)

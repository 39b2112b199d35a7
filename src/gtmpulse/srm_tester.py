from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

import numpy as np
from scipy.stats import chi2, chisquare

from gtmpulse.utils.log import get_logger

logger = get_logger(__name__)


@dataclass
class SRMResult:
    """Structured SRM test result"""

    chi2_stat: float
    p_value: float
    degrees_of_freedom: int
    severity: str  # R-style signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 '' 1
    reject_null: bool
    observed_counts: List[int]
    expected_counts: List[float]
    expected_proportions: List[float]
    total_sample_size: int

    def __str__(self):
        status = "SRM DETECTED" if self.reject_null else "No SRM"
        significance = f" {self.severity}" if self.severity else ""
        return f"{status} (chi2={self.chi2_stat:.3f}, p={self.p_value:.6f}{significance})"


class SRMTester:
    """Sample Ratio Mismatch detector for variant assignment counts."""

    def __init__(self, alpha: float = 0.05):
        if not 0.0 < alpha < 1.0:
            raise ValueError("alpha must be in (0, 1)")
        self.alpha = alpha

    def test(
        self,
        observed_counts: Union[Sequence[int], np.ndarray],
        expected_proportions: Optional[Union[Sequence[float], np.ndarray]] = None,
        experiment_id: Optional[str] = None,
    ) -> SRMResult:
        """
        Perform SRM test on assignment counts

        Args:
            observed_counts: Visitors per variant [n_a, n_b, ...]
            expected_proportions: Expected shares, normalized to sum to 1.
                Equal shares when omitted.
            experiment_id: Optional experiment identifier for logging

        Returns:
            SRMResult object
        """
        observed = np.array(observed_counts, dtype=int)

        if len(observed) < 2:
            raise ValueError("Need at least 2 groups for SRM test")
        if np.any(observed < 0):
            raise ValueError("Observed counts must be non-negative")
        total_sample_size = int(observed.sum())
        if total_sample_size == 0:
            raise ValueError("Need at least one observation for SRM test")

        if expected_proportions is None:
            proportions = np.ones(len(observed)) / len(observed)
        else:
            proportions = np.array(expected_proportions, dtype=float)
            if len(proportions) != len(observed):
                raise ValueError("Expected proportions must match number of groups")
            if np.any(proportions < 0) or proportions.sum() <= 0:
                raise ValueError("Expected proportions must be non-negative and not all zero")
            proportions = proportions / proportions.sum()

        expected_counts = proportions * total_sample_size
        degrees_of_freedom = len(observed) - 1

        empty_arms = proportions == 0
        if np.any(empty_arms):
            # chi-square is undefined for zero expectation; any visitor in an empty arm is a mismatch
            mismatch = bool(np.any(observed[empty_arms] > 0))
            chi2_stat = float("inf") if mismatch else 0.0
            p_value = 0.0 if mismatch else 1.0
        else:
            chi2_stat, p_value = chisquare(f_obs=observed, f_exp=expected_counts)
            chi2_stat, p_value = float(chi2_stat), float(p_value)

        result = SRMResult(
            chi2_stat=chi2_stat,
            p_value=p_value,
            degrees_of_freedom=degrees_of_freedom,
            severity=self._classify_severity(p_value),
            reject_null=p_value < self.alpha,
            observed_counts=observed.tolist(),
            expected_counts=expected_counts.tolist(),
            expected_proportions=proportions.tolist(),
            total_sample_size=total_sample_size,
        )
        if result.reject_null:
            logger.warning("Sample ratio mismatch for %s: %s", experiment_id or "<unnamed>", result)
        return result

    def test_split(
        self, count_a: int, count_b: int, traffic_split: float, experiment_id: Optional[str] = None
    ) -> SRMResult:
        """SRM check for a two-arm test routing ``traffic_split`` of visitors to variant A."""
        return self.test([count_a, count_b], [traffic_split, 1.0 - traffic_split], experiment_id=experiment_id)

    def _classify_severity(self, p_value: float) -> str:
        """
        Classify significance using R-style codes:
        *** : p <= 0.001
        **  : 0.001 < p <= 0.01
        *   : 0.01 < p <= 0.05
        .   : 0.05 < p <= 0.1
        ""  : p > 0.1
        """
        if p_value <= 0.001:
            return "***"
        elif p_value <= 0.01:
            return "**"
        elif p_value <= 0.05:
            return "*"
        elif p_value <= 0.1:
            return "."
        return ""

    def batch_test(self, experiments_data: Dict[str, Dict]) -> Dict[str, SRMResult]:
        """Test multiple experiments; experiments with unusable counts are logged and skipped."""
        results = {}
        for exp_id, data in experiments_data.items():
            try:
                results[exp_id] = self.test(
                    observed_counts=data["observed"], expected_proportions=data.get("expected"), experiment_id=exp_id
                )
            except (KeyError, ValueError) as e:
                logger.warning("SRM test failed for %s: %s", exp_id, e)
        return results

    def critical_value(self, degrees_of_freedom: int, alpha: Optional[float] = None) -> float:
        """Critical chi-square value for given degrees of freedom"""
        alpha = alpha or self.alpha
        return float(chi2.ppf(1 - alpha, degrees_of_freedom))

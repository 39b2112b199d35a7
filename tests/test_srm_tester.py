import pytest
import numpy as np
from gtmpulse.srm_tester import SRMTester


@pytest.fixture
def srm_tester():
    """SRM tester with the default alpha"""
    return SRMTester(alpha=0.05)


class TestSRMTester:
    """Assignment-count checks"""

    def test_equal_distribution(self, srm_tester):
        result = srm_tester.test([100, 100], [0.5, 0.5])

        assert not result.reject_null
        assert result.severity == ""
        assert abs(result.p_value - 1.0) < 0.01

    def test_srm_detected(self, srm_tester):
        result = srm_tester.test([120, 80], [0.5, 0.5])

        assert result.reject_null
        assert result.severity in ["*", "**", "***"]
        assert "SRM DETECTED" in str(result)

    def test_slight_imbalance_no_srm(self, srm_tester):
        result = srm_tester.test([505, 495])

        assert not result.reject_null
        assert result.p_value > 0.1
        assert str(result).startswith("No SRM")

    def test_unequal_allocation(self, srm_tester):
        result = srm_tester.test([500, 300, 200], [0.5, 0.3, 0.2])

        assert not result.reject_null
        assert result.degrees_of_freedom == 2
        assert result.total_sample_size == 1000

    def test_expected_proportions_normalization(self, srm_tester):
        result = srm_tester.test([100, 100], [2, 2])
        assert result.expected_proportions == [0.5, 0.5]

    def test_numpy_array_input(self, srm_tester):
        result = srm_tester.test(np.array([500, 500]), np.array([0.5, 0.5]))
        assert not result.reject_null


class TestSplitSRM:
    """Two-arm checks against a traffic split"""

    def test_split_matches(self, srm_tester):
        result = srm_tester.test_split(300, 700, 0.3, experiment_id="exp")
        assert not result.reject_null
        assert result.expected_counts == pytest.approx([300.0, 700.0])

    def test_split_mismatch(self, srm_tester):
        assert srm_tester.test_split(500, 500, 0.3).reject_null

    def test_full_split_all_in_a(self, srm_tester):
        result = srm_tester.test_split(1000, 0, 1.0)
        assert not result.reject_null
        assert result.p_value == 1.0

    def test_full_split_visitor_in_b(self, srm_tester):
        result = srm_tester.test_split(999, 1, 1.0)
        assert result.reject_null
        assert result.severity == "***"


class TestValidationSRMTester:
    """Input validation"""

    def test_invalid_alpha(self):
        with pytest.raises(ValueError, match="alpha"):
            SRMTester(alpha=1.5)

    def test_single_group(self, srm_tester):
        with pytest.raises(ValueError, match="Need at least 2 groups"):
            srm_tester.test([100])

    def test_negative_observed_counts(self, srm_tester):
        with pytest.raises(ValueError, match="must be non-negative"):
            srm_tester.test([100, -50])

    def test_no_observations(self, srm_tester):
        with pytest.raises(ValueError, match="at least one observation"):
            srm_tester.test([0, 0])

    def test_mismatched_proportions_error(self, srm_tester):
        with pytest.raises(ValueError, match="must match number of groups"):
            srm_tester.test([100, 100], [0.5, 0.3, 0.2])

    def test_zero_counts_handled(self, srm_tester):
        result = srm_tester.test([0, 100])

        assert result.reject_null
        assert result.total_sample_size == 100


def test_batch_test_skips_bad_entries(srm_tester):
    results = srm_tester.batch_test(
        {
            "hero-cta-test": {"observed": [1423, 1401]},
            "broken": {"observed": [10]},
            "no-counts": {},
        }
    )
    assert list(results) == ["hero-cta-test"]
    assert not results["hero-cta-test"].reject_null


def test_critical_value(srm_tester):
    assert srm_tester.critical_value(1) == pytest.approx(3.841, abs=1e-3)

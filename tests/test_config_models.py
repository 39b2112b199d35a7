import pytest
from pydantic import ValidationError

from gtmpulse.models.config_models import AlertThresholds, ExperimentConfig, MonitorConfig, RateLimitConfig


def test_experiment_config_valid():
    experiment = ExperimentConfig(
        experiment_id="hero-cta-test",
        variant_a="control",
        variant_b="expert_strategy",
        traffic_split=0.5,
        pages=["/"],
        metric="consultation_booking",
    )
    assert experiment.variant_list() == ["control", "expert_strategy"]
    assert experiment.status == "running"
    assert experiment.is_running()
    assert experiment.display_name == "hero-cta-test"


def test_experiment_config_is_frozen():
    experiment = ExperimentConfig(experiment_id="exp", variant_a="A", variant_b="B")
    with pytest.raises(ValidationError):
        experiment.traffic_split = 0.9


@pytest.mark.parametrize("split", [0.0, 1.0, 0.25])
def test_experiment_config_accepts_boundary_splits(split):
    assert ExperimentConfig(experiment_id="exp", variant_a="A", variant_b="B", traffic_split=split).traffic_split == split


@pytest.mark.parametrize("split", [-0.1, 1.01])
def test_experiment_config_rejects_out_of_range_split(split):
    with pytest.raises(ValidationError):
        ExperimentConfig(experiment_id="exp", variant_a="A", variant_b="B", traffic_split=split)


def test_experiment_config_missing_required_raises():
    with pytest.raises(ValidationError):
        ExperimentConfig(experiment_id="exp3", variant_a="A")


def test_experiment_config_identical_variants_raise():
    with pytest.raises(ValidationError, match="must differ"):
        ExperimentConfig(experiment_id="exp", variant_a="A", variant_b="A")


def test_experiment_invalid_status():
    with pytest.raises(ValidationError):
        ExperimentConfig(experiment_id="exp4", variant_a="A", variant_b="B", status="in_progress")


def test_monitor_config_defaults():
    config = MonitorConfig()
    assert config.experiments == []
    assert config.alert_thresholds == AlertThresholds(error_count=1, warning_count=3, performance_drop=0.15)
    assert config.rate_limit == RateLimitConfig(limit=100, window_seconds=60)


def test_monitor_config_duplicate_experiment_ids():
    exp = {"experiment_id": "dup", "variant_a": "A", "variant_b": "B"}
    with pytest.raises(ValidationError, match="duplicate experiment_id"):
        MonitorConfig(experiments=[exp, exp])


def test_monitor_config_get_experiment():
    config = MonitorConfig(experiments=[{"experiment_id": "exp1", "variant_a": "A", "variant_b": "B"}])
    assert config.get_experiment("exp1").variant_b == "B"
    assert config.get_experiment("missing") is None

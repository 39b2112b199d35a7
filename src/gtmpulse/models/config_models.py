from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ExperimentConfig(BaseModel):
    """Two-arm A/B test as configured in the tag container."""

    model_config = ConfigDict(frozen=True)

    experiment_id: str = Field(min_length=1)
    variant_a: str = Field(min_length=1)
    variant_b: str = Field(min_length=1)
    traffic_split: float = Field(default=0.5, ge=0.0, le=1.0)
    name: Optional[str] = None
    pages: List[str] = Field(default_factory=lambda: ["*"])
    metric: Optional[str] = None
    status: Literal["draft", "running", "paused", "completed"] = "running"

    @model_validator(mode="after")
    def _check_variants(self):
        if self.variant_a == self.variant_b:
            raise ValueError("variant_a and variant_b must differ")
        return self

    @property
    def display_name(self) -> str:
        return self.name or self.experiment_id

    def variant_list(self) -> List[str]:
        return [self.variant_a, self.variant_b]

    def is_running(self) -> bool:
        return self.status == "running"


class AlertThresholds(BaseModel):
    error_count: int = Field(default=1, ge=1)
    warning_count: int = Field(default=3, ge=1)
    performance_drop: float = Field(default=0.15, gt=0.0, lt=1.0)


class RateLimitConfig(BaseModel):
    limit: int = Field(default=100, ge=1)
    window_seconds: int = Field(default=60, ge=1)


class MonitorConfig(BaseModel):
    experiments: List[ExperimentConfig] = []
    alert_thresholds: AlertThresholds = Field(default_factory=AlertThresholds)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _check_unique_ids(self):
        seen = set()
        for experiment in self.experiments:
            if experiment.experiment_id in seen:
                raise ValueError(f"duplicate experiment_id: {experiment.experiment_id}")
            seen.add(experiment.experiment_id)
        return self

    def get_experiment(self, experiment_id: str) -> Optional[ExperimentConfig]:
        for experiment in self.experiments:
            if experiment.experiment_id == experiment_id:
                return experiment
        return None

from typing import List

import yaml

from gtmpulse.models.config_models import ExperimentConfig, MonitorConfig


def _read_yaml(path):
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_monitor_config(path) -> MonitorConfig:
    return MonitorConfig(**_read_yaml(path))


def load_experiment_configs(path) -> List[ExperimentConfig]:
    data = _read_yaml(path)
    return [ExperimentConfig(**exp) for exp in data.get("experiments", [])]

from pathlib import Path

from gtmpulse.services.assignment_service import AssignmentService
from gtmpulse.utils.config_loader import load_monitor_config
from gtmpulse.utils.log import configure_logging


def main():
    config = load_monitor_config(Path(__file__).with_name("monitor.yaml"))
    configure_logging(config.log_level)

    sample = [f"user_{i}" for i in range(10000)]
    for experiment in config.experiments:
        preview = AssignmentService.preview_assignment_distribution(experiment, sample)
        print(f"{experiment.display_name}: {preview['assignment_distribution']}")
        print(f"  share of {experiment.variant_a}: {preview['variant_a_share']:.4f} (expected {experiment.traffic_split})")
        print(f"  {preview['srm']}")


if __name__ == "__main__":
    main()

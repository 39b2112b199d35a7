import json
import sys
from typing import Any, Dict, Optional

from gtmpulse.alerts import check_alerts
from gtmpulse.models.config_models import MonitorConfig
from gtmpulse.services.assignment_service import AssignmentService
from gtmpulse.services.schema_validator import validate_records
from gtmpulse.utils.config_loader import load_monitor_config
from gtmpulse.utils.log import configure_logging, get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG = {
    "experiments": [
        {
            "experiment_id": "hero-cta-test",
            "name": "Hero Section CTA",
            "variant_a": "control",
            "variant_b": "expert_strategy",
            "traffic_split": 0.5,
            "pages": ["/"],
            "metric": "consultation_booking",
        },
        {
            "experiment_id": "pricing-layout-test",
            "name": "Pricing Layout",
            "variant_a": "cards",
            "variant_b": "table",
            "traffic_split": 0.5,
            "pages": ["/services"],
            "metric": "fractional_cmo",
        },
    ]
}

SAMPLE_BLOCKS = [
    json.dumps(
        {
            "@context": "https://schema.org",
            "@type": "Person",
            "name": "Jane Doe",
            "jobTitle": "Fractional CMO",
            "worksFor": {"@type": "Organization", "name": "Acme Growth"},
        }
    ),
    json.dumps(
        {
            "@context": "https://schema.org",
            "@type": "FAQPage",
            "mainEntity": [
                {"@type": "Question", "name": "What is GTM?", "acceptedAnswer": {"text": "Go-to-market."}},
                {"@type": "Question", "name": "What is GTM?", "acceptedAnswer": {"text": "Go-to-market."}},
            ],
        }
    ),
    json.dumps({"@context": "https://schema.org", "@type": "Review", "author": "Sam", "itemReviewed": "Audit"}),
    "{not json",
]


def main(config_path: Optional[str] = None, visitor_id: str = "user_demo", path: str = "/") -> Dict[str, Any]:
    config = load_monitor_config(config_path) if config_path else MonitorConfig(**DEFAULT_CONFIG)
    configure_logging(config.log_level)

    assignments = AssignmentService.assign_for_page(config.experiments, visitor_id, path)
    for assignment in assignments:
        logger.info("Visitor %s -> %s: %s", visitor_id, assignment.experiment_id, assignment.variant)

    report = validate_records(SAMPLE_BLOCKS)
    alerts = check_alerts(report, config.alert_thresholds)

    return {
        "assignments": [a.to_dict() for a in assignments],
        "schema": report.to_dict(),
        "alerts": [a.to_dict() for a in alerts],
    }


if __name__ == "__main__":
    print(json.dumps(main(*sys.argv[1:2]), indent=2))

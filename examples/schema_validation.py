import json
import sys

from gtmpulse.alerts import check_alerts
from gtmpulse.services.schema_validator import validate_records
from gtmpulse.utils.log import configure_logging


def main(paths):
    """Validate JSON-LD files given on the command line (one block per file)."""
    configure_logging("INFO")
    blocks = []
    for path in paths:
        with open(path, encoding="utf-8") as f:
            blocks.append(f.read())

    report = validate_records(blocks)
    print(json.dumps(report.to_dict(), indent=2))
    for alert in check_alerts(report):
        print(f"[{alert.type}] {alert.title}: {alert.message}")


if __name__ == "__main__":
    main(sys.argv[1:])

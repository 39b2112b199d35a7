from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

INVALID_TYPE = "Invalid"
UNKNOWN_TYPE = "Unknown"


@dataclass
class StructuredRecord:
    """One embedded JSON-LD block, decoded or not."""

    type: str
    fields: Mapping[str, Any] = field(default_factory=dict)
    parse_error: Optional[str] = None
    index: Optional[int] = None

    @property
    def is_parsed(self) -> bool:
        return self.parse_error is None


@dataclass
class ValidationOutcome:
    type: str
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        if not self.is_valid:
            return "error"
        if self.warnings:
            return "warning"
        return "valid"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "isValid": self.is_valid,
            "status": self.status,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class ValidationReport:
    total: int = 0
    valid_count: int = 0
    warning_count: int = 0
    error_count: int = 0
    outcomes: List[ValidationOutcome] = field(default_factory=list)

    def add(self, outcome: ValidationOutcome) -> None:
        self.outcomes.append(outcome)
        self.total += 1
        status = outcome.status
        if status == "valid":
            self.valid_count += 1
        elif status == "warning":
            self.warning_count += 1
        else:
            self.error_count += 1

    def types(self) -> List[str]:
        """Distinct record types in first-seen order."""
        seen: Dict[str, None] = {}
        for outcome in self.outcomes:
            seen.setdefault(outcome.type, None)
        return list(seen)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "valid": self.valid_count,
            "warnings": self.warning_count,
            "errors": self.error_count,
            "types": self.types(),
            "schemas": [outcome.to_dict() for outcome in self.outcomes],
        }

"""
Structural validation of embedded JSON-LD blocks.

Each record is checked for the universal ``@context`` / ``@type`` markers and
then against the rule set registered for its ``@type``. Types without a rule
set only get the universal checks, so new schema.org types never fail
validation just for being new.

Nothing in here raises for bad input: undecodable or wrongly shaped records
come back as ``Invalid`` outcomes and the rest of the batch is still
validated.
"""

import json
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from gtmpulse.models.structured_data import (
    INVALID_TYPE,
    UNKNOWN_TYPE,
    StructuredRecord,
    ValidationOutcome,
    ValidationReport,
)
from gtmpulse.utils.log import get_logger

logger = get_logger(__name__)

RawRecord = Union[StructuredRecord, Mapping[str, Any], str, bytes]
RuleSet = Callable[[Mapping[str, Any], List[str], List[str]], None]


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False


def _require(data: Mapping[str, Any], key: str, sink: List[str], message: str) -> None:
    if _is_missing(data.get(key)):
        sink.append(message)


def parse_record(raw: Any, index: Optional[int] = None) -> StructuredRecord:
    """Decode one JSON-LD block. Failures are captured on the record, not raised."""
    if isinstance(raw, StructuredRecord):
        return raw
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            return StructuredRecord(type=INVALID_TYPE, parse_error=str(e), index=index)
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except (ValueError, RecursionError) as e:
            return StructuredRecord(type=INVALID_TYPE, parse_error=str(e), index=index)
    if not isinstance(raw, Mapping):
        return StructuredRecord(
            type=INVALID_TYPE,
            parse_error=f"Structured data must be a JSON object, got {type(raw).__name__}",
            index=index,
        )

    type_marker = raw.get("@type")
    record_type = type_marker if isinstance(type_marker, str) and type_marker else UNKNOWN_TYPE
    return StructuredRecord(type=record_type, fields=raw, index=index)


def parse_records(raw_blocks: Iterable[Any]) -> List[StructuredRecord]:
    return [parse_record(raw, index) for index, raw in enumerate(raw_blocks)]


class StructuredDataValidator:
    """Required/recommended field rules per schema.org type."""

    def __init__(self):
        self.rules: Dict[str, RuleSet] = {
            "Person": self._validate_person,
            "Organization": self._validate_organization,
            "Service": self._validate_service,
            "FAQPage": self._validate_faq_page,
            "Review": self._validate_review,
        }

    def validate_record(self, record: RawRecord) -> ValidationOutcome:
        record = parse_record(record)
        if not record.is_parsed:
            return ValidationOutcome(type=INVALID_TYPE, is_valid=False, errors=[record.parse_error])

        data = record.fields
        if not isinstance(data, Mapping):
            return ValidationOutcome(
                type=INVALID_TYPE,
                is_valid=False,
                errors=[f"Structured data must be a JSON object, got {type(data).__name__}"],
            )
        errors: List[str] = []
        warnings: List[str] = []

        _require(data, "@context", errors, "Missing @context")
        _require(data, "@type", errors, "Missing @type")

        # the @type marker decides both the label and the rules, whatever the record claims
        type_marker = data.get("@type")
        record_type = type_marker if isinstance(type_marker, str) and type_marker else UNKNOWN_TYPE
        rule_set = self.rules.get(record_type)
        if rule_set is not None:
            rule_set(data, errors, warnings)

        return ValidationOutcome(type=record_type, is_valid=not errors, errors=errors, warnings=warnings)

    def validate_records(self, records: Iterable[RawRecord]) -> ValidationReport:
        report = ValidationReport()
        for index, raw in enumerate(records):
            record = parse_record(raw, index)
            if not record.is_parsed:
                logger.warning("Structured data block %d is not valid JSON-LD: %s", index, record.parse_error)
            report.add(self.validate_record(record))
        logger.info(
            "Validated %d structured data blocks: %d valid, %d warnings, %d errors",
            report.total,
            report.valid_count,
            report.warning_count,
            report.error_count,
        )
        return report

    # Type-specific rule sets

    @staticmethod
    def _validate_person(data, errors, warnings):
        _require(data, "name", errors, "Person missing name")
        _require(data, "jobTitle", warnings, "Person missing jobTitle")
        _require(data, "worksFor", warnings, "Person missing worksFor")

        rating = data.get("aggregateRating")
        if not _is_missing(rating):
            if not isinstance(rating, Mapping):
                errors.append("AggregateRating missing ratingValue")
                return
            _require(rating, "ratingValue", errors, "AggregateRating missing ratingValue")
            _require(rating, "reviewCount", warnings, "AggregateRating missing reviewCount")

    @staticmethod
    def _validate_organization(data, errors, warnings):
        _require(data, "name", errors, "Organization missing name")
        _require(data, "url", warnings, "Organization missing URL")
        _require(data, "logo", warnings, "Organization missing logo")
        _require(data, "contactPoint", warnings, "Organization missing contactPoint")

    @staticmethod
    def _validate_service(data, errors, warnings):
        _require(data, "name", errors, "Service missing name")
        _require(data, "provider", warnings, "Service missing provider")
        _require(data, "description", warnings, "Service missing description")

    @staticmethod
    def _validate_faq_page(data, errors, warnings):
        entries = data.get("mainEntity")
        if not isinstance(entries, list) or not entries:
            errors.append("FAQPage missing mainEntity array")
            return

        seen = set()
        for index, item in enumerate(entries):
            if not isinstance(item, Mapping):
                item = {}
            question = item.get("name")
            if _is_missing(question):
                errors.append(f"FAQ item {index} missing question")
            if _is_missing(item.get("acceptedAnswer")):
                errors.append(f"FAQ item {index} missing answer")

            if _is_missing(question) or not isinstance(question, str):
                continue
            if question in seen:
                warnings.append(f'Duplicate question: "{question}"')
            seen.add(question)

    @staticmethod
    def _validate_review(data, errors, warnings):
        for key in ("itemReviewed", "reviewRating", "author", "datePublished"):
            _require(data, key, errors, f"Review missing {key}")


_default_validator = StructuredDataValidator()


def validate_records(records: Iterable[RawRecord]) -> ValidationReport:
    """Validate a batch of structured-data records into an aggregated report."""
    return _default_validator.validate_records(records)

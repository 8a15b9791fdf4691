"""Advisory validation rules for extracted form records.

Checks required fields, email and phone shape, and ISO dates. Results
are informational: they never alter the record, and a failed check is
surfaced to the user rather than blocking extraction.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

import yaml

from form_reader.extraction.pipeline import FormRecord
from form_reader.utils.logger import get_logger

logger = get_logger(__name__)

_EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}$")
_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MIN_PHONE_DIGITS = 7


def _is_calendar_date(value: str) -> bool:
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


@dataclass
class ValidationResult:
    """Result of a single field validation check."""

    field_name: str
    is_valid: bool
    message: str
    rule_name: str


@dataclass
class ValidationReport:
    """Aggregated validation report for a form record."""

    all_valid: bool
    results: list[ValidationResult]
    warnings: list[str] = field(default_factory=list)

    def failures(self) -> list[ValidationResult]:
        """Return only the failed checks."""
        return [r for r in self.results if not r.is_valid]


class RulesEngine:
    """Configurable validation rules engine.

    Applies per-field rules loaded from a YAML file mapping field keys
    to lists of rule definitions, e.g. ``email: [{type: email}]``.

    Args:
        rules_path: Path to the validation rules YAML file.
    """

    def __init__(
        self, rules_path: Path = Path("configs/validation_rules.yaml")
    ) -> None:
        self.rules = self._load_rules(rules_path)
        self._validators: dict[str, Any] = {
            "required": self._validate_required,
            "email": self._validate_email,
            "phone": self._validate_phone,
            "iso_date": self._validate_iso_date,
            "regex": self._validate_regex,
        }

    def _load_rules(self, path: Path) -> dict:
        """Load validation rules from YAML file, falling back to defaults."""
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f)
                if data:
                    logger.info("Loaded validation rules from %s", path)
                    return data
        logger.debug("Using default validation rules")
        return self._default_rules()

    def _default_rules(self) -> dict:
        return {
            "name": [{"type": "required"}],
            "email": [{"type": "email"}],
            "phone": [{"type": "phone"}],
            "dateOfBirth": [{"type": "iso_date"}],
        }

    def validate(self, record: FormRecord) -> ValidationReport:
        """Validate a form record against the configured rules.

        Args:
            record: Record produced by extraction or edited by the user.

        Returns:
            Validation report listing every check that ran.
        """
        values = record.to_dict()
        results: list[ValidationResult] = []
        warnings: list[str] = []

        for field_name, rules in self.rules.items():
            if field_name not in values:
                warnings.append(f"Rules defined for unknown field: {field_name}")
                continue
            value = values[field_name]

            for rule in rules:
                rule_type = rule.get("type", "")
                validator = self._validators.get(rule_type)
                if validator is None:
                    warnings.append(f"Unknown rule type: {rule_type}")
                    continue
                results.append(validator(field_name, value, rule))

        for warning in warnings:
            logger.warning("Validation rules: %s", warning)

        all_valid = all(r.is_valid for r in results)
        logger.info(
            "Validation complete: %d checks, %d failed",
            len(results),
            sum(1 for r in results if not r.is_valid),
        )
        return ValidationReport(all_valid=all_valid, results=results, warnings=warnings)

    def _validate_required(
        self, field_name: str, value: str, rule: dict
    ) -> ValidationResult:
        """Check that a required field is non-empty."""
        if value.strip():
            return ValidationResult(
                field_name, True, "Required field present", "required"
            )
        return ValidationResult(
            field_name, False, f"Required field missing: {field_name}", "required"
        )

    def _validate_email(
        self, field_name: str, value: str, rule: dict
    ) -> ValidationResult:
        """Validate email format."""
        if not value:
            return ValidationResult(field_name, True, "No value to validate", "email")
        if _EMAIL_PATTERN.match(value):
            return ValidationResult(field_name, True, "Valid email format", "email")
        return ValidationResult(field_name, False, f"Invalid email: {value}", "email")

    def _validate_phone(
        self, field_name: str, value: str, rule: dict
    ) -> ValidationResult:
        """Validate that a phone number carries enough digits."""
        if not value:
            return ValidationResult(field_name, True, "No value to validate", "phone")
        min_digits = int(rule.get("min_digits", _MIN_PHONE_DIGITS))
        digits = sum(1 for c in value if c.isdigit())
        if digits >= min_digits:
            return ValidationResult(field_name, True, "Valid phone format", "phone")
        return ValidationResult(field_name, False, f"Invalid phone: {value}", "phone")

    def _validate_iso_date(
        self, field_name: str, value: str, rule: dict
    ) -> ValidationResult:
        """Check that a date was normalized to ``YYYY-MM-DD``."""
        if not value:
            return ValidationResult(
                field_name, True, "No value to validate", "iso_date"
            )
        if _ISO_DATE_PATTERN.match(value) and _is_calendar_date(value):
            return ValidationResult(field_name, True, "Valid ISO date", "iso_date")
        return ValidationResult(
            field_name, False, f"Unrecognized date: {value}", "iso_date"
        )

    def _validate_regex(
        self, field_name: str, value: str, rule: dict
    ) -> ValidationResult:
        """Validate a field value against a custom regex pattern."""
        if not value:
            return ValidationResult(field_name, True, "No value to validate", "regex")

        pattern = rule.get("pattern", "")
        if re.match(pattern, value):
            return ValidationResult(field_name, True, "Matches pattern", "regex")
        return ValidationResult(
            field_name, False, f"Does not match pattern: {pattern}", "regex"
        )

"""
Import Validation

DESIGN DECISION: All validation happens at the import boundary.
Once records are in the store they are assumed well-formed.

The validator checks, in order:
- The payload is a non-empty array
- Every element is an object
- Every element has a parseable ISO date and a non-negative numeric amount

IMPORTANT: Validation is all-or-nothing. A single bad record rejects the
whole payload, and the result lists every problem found, not just the first.
"""

import json
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from supertracker.models.contribution import (
    ImportIssue,
    ImportRecord,
    ImportValidationResult,
)


IMPORT_FORMAT_EXAMPLE = '[{"date": "2024-03-05", "amount": 250.00}]'


class ValidationError(Exception):
    """
    Import payload rejected.

    Carries the full validation result; str() is the user-facing message.
    """

    def __init__(self, result: ImportValidationResult):
        self.result = result
        super().__init__(self.user_message)

    @property
    def issues(self) -> list[ImportIssue]:
        return self.result.issues

    @property
    def user_message(self) -> str:
        lines = ["Invalid data format. Please use the format shown:", IMPORT_FORMAT_EXAMPLE]
        for issue in self.result.issues[:5]:
            lines.append(f"- {issue.describe()}")
        remaining = len(self.result.issues) - 5
        if remaining > 0:
            lines.append(f"- ... and {remaining} more")
        return "\n".join(lines)


class ImportValidator:
    """
    Validates raw import payloads.

    validate() never raises; it returns an ImportValidationResult.
    validate_or_raise() is the boundary helper used by the store.
    """

    def parse_json(self, text: str) -> Any:
        """
        Decode a JSON import document.

        Raises:
            ValidationError: If the text is not valid JSON
        """
        try:
            return json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            raise ValidationError(ImportValidationResult(
                is_valid=False,
                issues=[ImportIssue(
                    field="payload",
                    message=f"Could not read JSON: {e}",
                )],
            )) from e

    def validate(self, payload: Any) -> ImportValidationResult:
        """Check the payload shape and every record in it."""
        # Strings and mappings are sequences/iterables too, but not arrays
        if (
            not isinstance(payload, Sequence)
            or isinstance(payload, (str, bytes, bytearray))
        ):
            return ImportValidationResult(
                is_valid=False,
                issues=[ImportIssue(
                    field="payload",
                    message="Import must be a JSON array of records",
                )],
            )

        if len(payload) == 0:
            return ImportValidationResult(
                is_valid=False,
                issues=[ImportIssue(
                    field="payload",
                    message="Import contains no records",
                )],
            )

        records: list[ImportRecord] = []
        issues: list[ImportIssue] = []

        for index, element in enumerate(payload):
            if not isinstance(element, Mapping):
                issues.append(ImportIssue(
                    index=index,
                    field="record",
                    message="Record must be an object with 'date' and 'amount'",
                ))
                continue

            try:
                records.append(ImportRecord.model_validate(
                    {"date": element.get("date"), "amount": element.get("amount")}
                ))
            except PydanticValidationError as e:
                issues.extend(self._issues_from_error(index, e))

        if issues:
            return ImportValidationResult(is_valid=False, issues=issues)

        return ImportValidationResult(is_valid=True, records=records)

    def validate_or_raise(self, payload: Any) -> list[ImportRecord]:
        """
        Validate and return the parsed records.

        Raises:
            ValidationError: If any part of the payload is invalid
        """
        result = self.validate(payload)
        if not result.is_valid:
            raise ValidationError(result)
        return result.records

    def _issues_from_error(
        self,
        index: int,
        error: PydanticValidationError,
    ) -> list[ImportIssue]:
        issues = []
        for detail in error.errors():
            loc = detail.get("loc") or ("record",)
            field = str(loc[0])
            if field == "contribution_date":
                field = "date"
            if detail.get("type") == "missing" or detail.get("input") is None:
                message = "missing"
            else:
                message = detail.get("msg", "invalid").removeprefix("Value error, ")
            issues.append(ImportIssue(index=index, field=field, message=message))
        return issues

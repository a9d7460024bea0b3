"""Validation result types — failures and the per-field error report.

A report is only ever handed back when something failed. A valid record
yields None, so callers can use presence as the validity check:

    errors = validator.validate(order)
    if errors:
        return errors.to_dict()
"""

import json
from typing import Any


class ValidationFailure(Exception):
    """Base class for failures produced by the registry itself."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.message == other.message

    def __hash__(self) -> int:
        return hash((type(self), self.message))


class UndefinedRuleError(ValidationFailure):
    """A field names a rule that is not in the registry.

    This is a configuration defect rather than bad data, but it is
    reported on the field exactly like a rule violation.
    """

    def __init__(self, rule: str):
        # json.dumps quotes and escapes the same way for any rule text
        super().__init__(f"undefined validator: {json.dumps(rule)}")
        self.rule = rule


class CyclicRecordError(ValidationFailure):
    """A struct field points back at a record already being validated."""

    def __init__(self, field: str, record_type: type):
        super().__init__(
            f"cyclic reference: field {json.dumps(field)} re-enters {record_type.__name__}"
        )
        self.field = field
        self.record_type = record_type


class FieldErrors(dict):
    """Mapping of field name -> error value.

    An error value is whatever the failing rule produced, an
    UndefinedRuleError, a CyclicRecordError, or a nested FieldErrors for
    struct fields. Nesting mirrors the record hierarchy.
    """

    def flatten(self, prefix: str = "") -> dict[str, Any]:
        """Collapse nested reports into dotted paths: {"address.zip": err}."""
        flat: dict[str, Any] = {}
        for name, error in self.items():
            path = f"{prefix}{name}"
            if isinstance(error, FieldErrors):
                flat.update(error.flatten(prefix=f"{path}."))
            else:
                flat[path] = error
        return flat

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly copy: nested reports stay dicts, leaf errors become strings."""
        return {
            name: error.to_dict() if isinstance(error, FieldErrors) else _describe(error)
            for name, error in self.items()
        }

    def __repr__(self) -> str:
        return f"FieldErrors({dict.__repr__(self)})"


def _describe(error: Any) -> str:
    if isinstance(error, ValidationFailure):
        return error.message
    return str(error)

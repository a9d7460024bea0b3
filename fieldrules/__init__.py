"""fieldrules — declarative, rule-based validation of record fields.

Usage:
    from fieldrules import Validator, tagged

    validator = Validator(long=lambda v: None if len(v) > 5 else "too short")

    @dataclass
    class X:
        A: str = tagged("long")

    validator.validate(X(A="hi"))      # FieldErrors({'A': 'too short'})
    validator.validate(X(A="hello!"))  # None
"""

from fieldrules.registry import Validator, RuleFunc
from fieldrules.models import FieldErrors, ValidationFailure, UndefinedRuleError, CyclicRecordError
from fieldrules.schema import (
    STRUCT_RULE,
    FieldSpec,
    RecordSchema,
    parse_rules,
    register_schema,
    unregister_schema,
    schema_for,
    tagged,
)

__all__ = [
    "Validator",
    "RuleFunc",
    "FieldErrors",
    "ValidationFailure",
    "UndefinedRuleError",
    "CyclicRecordError",
    "STRUCT_RULE",
    "FieldSpec",
    "RecordSchema",
    "parse_rules",
    "register_schema",
    "unregister_schema",
    "schema_for",
    "tagged",
]

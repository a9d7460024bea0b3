"""Validator registry — maps rule names to rule functions and walks records.

This is the main entry point. Build the registry once at startup, then call
validate() on any record:

    validator = Validator(
        required=lambda v: None if v else "is required",
        long=lambda v: None if len(v) > 5 else "is too short",
    )
    errors = validator.validate(signup)
    if errors:
        # {"email": "is required", "address": {"zip": "is too short"}}

A rule takes the field value and returns None when it is valid, anything
else is the failure and is stored as is. A rule may also raise; the
exception becomes the failure. validate() itself never raises.
"""

import logging
import time
import weakref
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable, Iterator, Optional

import structlog

from fieldrules.config import get_settings
from fieldrules.logging import LOGGER_NAME
from fieldrules.models import CyclicRecordError, FieldErrors, UndefinedRuleError
from fieldrules.schema import STRUCT_RULE, FieldSpec, schema_for

# Routed through stdlib logging so the host application decides what is emitted
logger = structlog.wrap_logger(
    logging.getLogger(LOGGER_NAME),
    wrapper_class=structlog.stdlib.BoundLogger,
)

RuleFunc = Callable[[Any], Any]


def _dereference(value: Any) -> Any:
    """Follow at most one level of indirection."""
    if isinstance(value, weakref.ReferenceType):
        return value()
    return value


class Validator(Mapping):
    """Immutable mapping of rule name -> rule function.

    Contract:
        - No mutation after construction; share one instance freely
        - validate() is safe to call concurrently if the rules are
        - validate() returns None for valid or non-record input
        - Every failure is captured per field, nothing escapes the call
    """

    def __init__(
        self,
        rules: Optional[Mapping[str, RuleFunc]] = None,
        tag_key: Optional[str] = None,
        **named_rules: RuleFunc,
    ):
        """Build the registry.

        Args:
            rules: Mapping of rule name to rule function
            tag_key: Metadata key holding the rule list (default from settings)
            **named_rules: More rules, keyword style

        Raises:
            ValueError: a rule is named with the reserved "struct" name
            TypeError: a rule is not callable
        """
        combined = dict(rules or {})
        combined.update(named_rules)

        for name, func in combined.items():
            if name == STRUCT_RULE:
                raise ValueError(f"{STRUCT_RULE!r} is reserved and cannot name a rule")
            if not callable(func):
                raise TypeError(f"rule {name!r} is not callable: {func!r}")

        self._rules = MappingProxyType(combined)
        self.tag_key = tag_key or get_settings().TAG_KEY

    # ── Mapping protocol ──

    def __getitem__(self, name: str) -> RuleFunc:
        return self._rules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"Validator(rules={sorted(self._rules)}, tag_key={self.tag_key!r})"

    def extend(self, rules: Optional[Mapping[str, RuleFunc]] = None, **named_rules: RuleFunc) -> "Validator":
        """Return a new registry with extra (or replaced) rules."""
        combined = dict(self._rules)
        combined.update(rules or {})
        combined.update(named_rules)
        return Validator(combined, tag_key=self.tag_key)

    # ── Validation ──

    def validate(self, value: Any) -> Optional[FieldErrors]:
        """Validate every tagged field of a record.

        Args:
            value: A record, or a weakref to one. Anything else is skipped.

        Returns:
            FieldErrors keyed by field name, or None if every field passed
        """
        start_time = time.perf_counter()
        errors = self._collect(value, active=set())

        logger.debug(
            "validation_complete",
            record_type=type(_dereference(value)).__name__,
            error_count=len(errors) if errors else 0,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 3),
        )
        return errors

    __call__ = validate

    def _collect(self, value: Any, active: set[int]) -> Optional[FieldErrors]:
        record = _dereference(value)
        schema = schema_for(type(record), self.tag_key)
        if schema is None:
            return None

        errors = FieldErrors()
        active.add(id(record))
        try:
            for spec in schema.validated_fields:
                error = self._check_field(record, spec, active)
                if error is not None:
                    errors[spec.name] = error
        finally:
            active.discard(id(record))

        return errors or None

    def _check_field(self, record: Any, spec: FieldSpec, active: set[int]) -> Any:
        """Run a field's rules in order; return the first failure or None."""
        try:
            value = spec.read(record)
        except AttributeError as e:
            # Unreadable fields are skipped, not reported
            logger.debug("field_unreadable", field=spec.name, error=str(e))
            return None
        except Exception as e:
            logger.warning("field_read_failed", field=spec.name, error=str(e))
            return e

        for rule in spec.rules:
            if rule == STRUCT_RULE:
                nested = _dereference(value)
                if id(nested) in active:
                    logger.warning(
                        "cyclic_record",
                        field=spec.name,
                        record_type=type(nested).__name__,
                    )
                    return CyclicRecordError(spec.name, type(nested))

                nested_errors = self._collect(value, active)
                if nested_errors is not None:
                    return nested_errors
                continue

            func = self._rules.get(rule)
            if func is None:
                logger.warning("undefined_rule", field=spec.name, rule=rule)
                return UndefinedRuleError(rule)

            try:
                failure = func(value)
            except Exception as e:
                logger.warning("rule_raised", field=spec.name, rule=rule, error=str(e))
                return e

            if failure is not None:
                return failure

        return None

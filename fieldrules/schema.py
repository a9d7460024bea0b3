"""Record schemas — which fields a record has and which rules each carries.

A schema is a static, per-type descriptor built once and cached. It comes
from (first match wins):

    1. an explicit register_schema() call,
    2. a dataclass, reading the rule tag from field metadata,
    3. a pydantic model, reading the rule tag from json_schema_extra.

Usage:
    @dataclass
    class Signup:
        email: str = tagged("required", "email")
        address: Address = tagged("struct")
        nickname: str = ""                       # no rules, never checked
"""

import dataclasses
import operator
import threading
from functools import lru_cache
from typing import Any, Callable, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from fieldrules.config import get_settings

# Reserved rule name: validate the field's value as a nested record
STRUCT_RULE = "struct"

RuleTag = Union[str, Iterable[str], None]


def parse_rules(tag: RuleTag, separator: Optional[str] = None) -> tuple[str, ...]:
    """Split a rule tag into an ordered tuple of rule names.

    Accepts the delimited string form ("long,proper") or an already split
    sequence. Whitespace around names is ignored. Empty names are kept so a
    stray separator ("long,") surfaces as an undefined rule; only an empty
    or blank tag means "no rules".
    """
    if tag is None:
        return ()
    if isinstance(tag, str):
        if not tag.strip():
            return ()
        separator = separator or get_settings().RULE_SEPARATOR
        parts = tag.split(separator)
    else:
        parts = [str(part) for part in tag]
    return tuple(name.strip() for name in parts)


class FieldSpec(BaseModel):
    """Descriptor for one field of a record type."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    getter: Callable[[Any], Any]
    rules: tuple[str, ...] = ()
    exported: bool = True  # False -> never read, never validated

    @field_validator("rules", mode="before")
    @classmethod
    def _split_rules(cls, value: Any) -> tuple[str, ...]:
        return parse_rules(value)

    @classmethod
    def attribute(
        cls,
        name: str,
        rules: RuleTag = None,
        exported: Optional[bool] = None,
    ) -> "FieldSpec":
        """Field read with getattr(record, name). Leading underscore means private."""
        if exported is None:
            exported = not name.startswith("_")
        return cls(
            name=name,
            getter=operator.attrgetter(name),
            rules=rules,
            exported=exported,
        )

    def read(self, record: Any) -> Any:
        return self.getter(record)


class RecordSchema(BaseModel):
    """All field descriptors of one record type, in declaration order."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    record_type: type
    fields: tuple[FieldSpec, ...] = ()

    @property
    def validated_fields(self) -> tuple[FieldSpec, ...]:
        """Fields that carry rules and are readable."""
        return tuple(f for f in self.fields if f.rules and f.exported)


# ── Explicit registrations ──

_registered: dict[type, RecordSchema] = {}
_registered_lock = threading.Lock()


def register_schema(record_type: type, fields: Iterable[FieldSpec]) -> RecordSchema:
    """Declare the schema of a type by hand.

    Takes precedence over dataclass / pydantic discovery, and is the way to
    make plain classes, slotted classes or third-party types validatable.
    """
    schema = RecordSchema(record_type=record_type, fields=tuple(fields))
    with _registered_lock:
        _registered[record_type] = schema
    return schema


def unregister_schema(record_type: type) -> None:
    with _registered_lock:
        _registered.pop(record_type, None)


def schema_for(record_type: Any, tag_key: Optional[str] = None) -> Optional[RecordSchema]:
    """Return the schema for a type, or None when it is not a record type."""
    if not isinstance(record_type, type):
        return None

    explicit = _registered.get(record_type)
    if explicit is not None:
        return explicit

    settings = get_settings()
    return _discover(record_type, tag_key or settings.TAG_KEY, settings.RULE_SEPARATOR)


@lru_cache(maxsize=None)
def _discover(record_type: type, tag_key: str, separator: str) -> Optional[RecordSchema]:
    if dataclasses.is_dataclass(record_type):
        fields = [
            FieldSpec.attribute(
                f.name, rules=parse_rules(f.metadata.get(tag_key), separator)
            )
            for f in dataclasses.fields(record_type)
        ]
        return RecordSchema(record_type=record_type, fields=tuple(fields))

    if issubclass(record_type, BaseModel):
        fields = []
        for name, info in record_type.model_fields.items():
            extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
            fields.append(
                FieldSpec.attribute(name, rules=parse_rules(extra.get(tag_key), separator))
            )
        return RecordSchema(record_type=record_type, fields=tuple(fields))

    return None


# ── Declaration helpers ──


def tagged(*rules: str, tag_key: Optional[str] = None, **field_kwargs: Any) -> Any:
    """dataclasses.field() with the rule tag filled in.

        name: str = tagged("required", "long", default="")
    """
    settings = get_settings()
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[tag_key or settings.TAG_KEY] = settings.RULE_SEPARATOR.join(rules)
    return dataclasses.field(metadata=metadata, **field_kwargs)

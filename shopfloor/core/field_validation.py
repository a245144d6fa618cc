from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Mapping


@dataclass(frozen=True)
class FieldRules:
    required: bool = False
    min: float | int | None = None
    max: float | int | None = None
    options: tuple[str, ...] | None = None


@dataclass(frozen=True)
class FieldSpec:
    """
    Canonical shape of one schema field as seen by the validator.
    Persisted rows and request payloads are mapped into this first
    (see field_spec_from_row / field_spec_from_payload).
    """

    key: str
    label: str
    type: str  # text|number|boolean|select
    validation: FieldRules = field(default_factory=FieldRules)


@dataclass(frozen=True)
class FieldError:
    field: str
    code: str  # required|type|min|max|choice
    message: str


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def as_number(value: Any) -> float | int | Decimal | None:
    """
    Numeric kind: int, float, Decimal and numeric strings.
    bool is an int subclass but never a number here, and neither are
    NaN or infinities ("Infinity", "1e400").
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            x = float(value)
        except ValueError:
            return None
        return x if math.isfinite(x) else None
    return None


def format_number(n: float | int | Decimal) -> str:
    """Render bounds the way users typed them: 10 rather than 10.0."""
    if isinstance(n, Decimal):
        n = float(n)
    # from 1e21 on floats keep exponent notation (1e+21)
    if isinstance(n, float) and n.is_integer() and abs(n) < 1e21:
        return str(int(n))
    return str(n)


def _check_one(spec: FieldSpec, value: Any) -> list[FieldError]:
    errors: list[FieldError] = []
    rules = spec.validation or FieldRules()
    label = spec.label

    if is_empty(value):
        if rules.required:
            errors.append(FieldError(spec.key, "required", f"Field '{label}' is required."))
        return errors

    if spec.type == "number":
        x = as_number(value)
        if x is None:
            errors.append(FieldError(spec.key, "type", f"Field '{label}' must be a number."))
            return errors

        # independent checks; both fire only for an inconsistent min > max schema
        if rules.min is not None and x < rules.min:
            errors.append(
                FieldError(spec.key, "min", f"Field '{label}' must be at least {format_number(rules.min)}.")
            )
        if rules.max is not None and x > rules.max:
            errors.append(
                FieldError(spec.key, "max", f"Field '{label}' must be at most {format_number(rules.max)}.")
            )

    elif spec.type == "select":
        if rules.options and (not isinstance(value, str) or value not in rules.options):
            errors.append(FieldError(spec.key, "choice", f"Field '{label}' has an invalid selection."))

    # text, boolean and unknown types: presence is all that is checked

    return errors


def collect_field_errors(schema: Iterable[FieldSpec], data: Mapping[str, Any]) -> list[FieldError]:
    """
    Structured variant of validate_fields: one FieldError per problem,
    in schema order.
    """
    errors: list[FieldError] = []
    for spec in schema:
        errors.extend(_check_one(spec, data.get(spec.key)))
    return errors


def validate_fields(schema: Iterable[FieldSpec], data: Mapping[str, Any]) -> list[str]:
    """
    Validate a submission against an ordered field schema.

    Returns human-readable messages ("Field 'Weight' is required.") in schema
    order; an empty list means the submission is accepted. Keys in `data`
    that are not in the schema are ignored. Never raises for bad values.
    """
    return [e.message for e in collect_field_errors(schema, data)]


# ---------------------------------------------------------------------------
# adapters: persisted rows / request payloads -> FieldSpec


def _plain_number(n: Any) -> float | int | None:
    if n is None:
        return None
    if isinstance(n, Decimal):
        f = float(n)
        return int(f) if f.is_integer() else f
    return n


def _rules(required: Any, mn: Any, mx: Any, options: Any) -> FieldRules:
    return FieldRules(
        required=bool(required),
        min=_plain_number(mn),
        max=_plain_number(mx),
        options=tuple(options) if options is not None else None,
    )


def field_spec_from_row(row) -> FieldSpec:
    """Map a shopfloor.models.FieldDefinition (with its validation row) to a FieldSpec."""
    v = row.validation
    rules = _rules(v.required, v.min, v.max, v.options) if v is not None else FieldRules()
    return FieldSpec(key=row.key, label=row.label, type=row.field_type, validation=rules)


def field_spec_from_payload(payload) -> FieldSpec:
    """Map a FieldDefinitionIn request model to a FieldSpec."""
    v = payload.validation
    rules = _rules(v.required, v.min, v.max, v.options) if v is not None else FieldRules()
    return FieldSpec(key=payload.key, label=payload.label, type=payload.field_type, validation=rules)

"""Field specifications for form extraction.

Each extractable field is described by a ``FieldSpec`` that pairs a
label pattern with the normalizer for the captured value. The table is
built once at startup and never mutated afterwards.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum

from .normalizer import normalize_date, normalize_email, normalize_phone


class FieldKey(StrEnum):
    """Keys of the fields present on every form record."""

    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"
    ADDRESS = "address"
    DATE_OF_BIRTH = "dateOfBirth"


@dataclass(frozen=True)
class FieldSpec:
    """How to locate and canonicalize one form field."""

    key: FieldKey
    label: str
    pattern: re.Pattern[str]
    normalizer: Callable[[str], str] | None = None

    def normalize(self, value: str) -> str:
        """Apply this field's normalizer; empty values stay empty."""
        if not value or self.normalizer is None:
            return value
        return self.normalizer(value)


# Whitespace other than line breaks.
_INLINE_SPACE = r"[^\S\r\n]"
# A separator is any run of colons and inline whitespace; it never crosses a line.
_SEPARATOR = r"(?:" + _INLINE_SPACE + r"|:)+"
_VALUE = r"([^\r\n]*)"


def compile_label(label: str) -> re.Pattern[str]:
    """Compile a case-insensitive pattern for a literal label.

    Whitespace inside the label matches any run of inline whitespace, so
    ``"date of birth"`` still matches ``"Date  of Birth"``.

    Args:
        label: Literal label text as printed on the form.

    Returns:
        Compiled pattern whose first group is the value on the rest of
        the line.
    """
    words = [re.escape(word) for word in label.split()]
    if not words:
        raise ValueError("Label must contain at least one non-space character")
    label_pattern = (_INLINE_SPACE + "+").join(words)
    return re.compile(label_pattern + _SEPARATOR + _VALUE, re.IGNORECASE)


_DEFAULTS: list[tuple[FieldKey, str, Callable[[str], str] | None]] = [
    (FieldKey.NAME, "name", None),
    (FieldKey.EMAIL, "email", normalize_email),
    (FieldKey.PHONE, "phone", normalize_phone),
    (FieldKey.ADDRESS, "address", None),
    (FieldKey.DATE_OF_BIRTH, "date of birth", normalize_date),
]


def build_field_specs(
    label_overrides: Mapping[str, str] | None = None,
) -> tuple[FieldSpec, ...]:
    """Build the field spec table, optionally replacing default labels.

    Args:
        label_overrides: Mapping of field key to replacement label text.

    Returns:
        One ``FieldSpec`` per ``FieldKey``, in record order.

    Raises:
        ValueError: If an override names an unknown field key.
    """
    overrides = dict(label_overrides or {})
    known = {key.value for key in FieldKey}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown field keys in label overrides: {unknown}")

    specs = []
    for key, label, normalizer in _DEFAULTS:
        label = overrides.get(key.value, label)
        specs.append(FieldSpec(key, label, compile_label(label), normalizer))
    return tuple(specs)


FIELD_SPECS: tuple[FieldSpec, ...] = build_field_specs()


def normalize_value(
    key: FieldKey | str, value: str, specs: tuple[FieldSpec, ...] = FIELD_SPECS
) -> str:
    """Normalize a captured value with the normalizer of the field ``key``.

    Keys without a normalizer (name, address) and keys missing from
    ``specs`` pass through unchanged.
    """
    for spec in specs:
        if spec.key == key:
            return spec.normalize(value)
    return value

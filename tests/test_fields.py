"""Tests for the field specification table."""

import dataclasses

import pytest

from form_reader.extraction.fields import (
    FIELD_SPECS,
    FieldKey,
    FieldSpec,
    build_field_specs,
    compile_label,
)
from form_reader.extraction.normalizer import (
    normalize_date,
    normalize_email,
    normalize_phone,
)


class TestFieldSpecs:
    """Tests for the default spec table."""

    def test_one_spec_per_key_in_record_order(self) -> None:
        assert [spec.key for spec in FIELD_SPECS] == list(FieldKey)

    def test_default_labels(self) -> None:
        labels = {spec.key: spec.label for spec in FIELD_SPECS}
        assert labels[FieldKey.NAME] == "name"
        assert labels[FieldKey.DATE_OF_BIRTH] == "date of birth"

    def test_normalizers_assigned(self) -> None:
        normalizers = {spec.key: spec.normalizer for spec in FIELD_SPECS}
        assert normalizers[FieldKey.NAME] is None
        assert normalizers[FieldKey.ADDRESS] is None
        assert normalizers[FieldKey.EMAIL] is normalize_email
        assert normalizers[FieldKey.PHONE] is normalize_phone
        assert normalizers[FieldKey.DATE_OF_BIRTH] is normalize_date

    def test_spec_is_immutable(self) -> None:
        spec = FIELD_SPECS[0]
        assert isinstance(spec, FieldSpec)
        with pytest.raises(dataclasses.FrozenInstanceError):
            spec.label = "changed"  # type: ignore[misc]

    def test_key_values(self) -> None:
        assert FieldKey.DATE_OF_BIRTH == "dateOfBirth"
        assert FieldKey("email") is FieldKey.EMAIL


class TestBuildFieldSpecs:
    """Tests for building the table with label overrides."""

    def test_override_replaces_label(self) -> None:
        specs = build_field_specs({"dateOfBirth": "DOB"})
        dob = next(s for s in specs if s.key is FieldKey.DATE_OF_BIRTH)
        assert dob.label == "DOB"
        assert dob.pattern.search("dob: 1990-01-01") is not None
        assert dob.normalizer is normalize_date

    def test_other_labels_untouched(self) -> None:
        specs = build_field_specs({"phone": "Mobile"})
        assert [s.label for s in specs if s.key is not FieldKey.PHONE] == [
            "name",
            "email",
            "address",
            "date of birth",
        ]

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValueError, match="fax"):
            build_field_specs({"fax": "Fax"})

    def test_defaults_do_not_change(self) -> None:
        build_field_specs({"name": "Full Name"})
        assert FIELD_SPECS[0].label == "name"


class TestCompileLabel:
    """Tests for label pattern compilation."""

    def test_case_insensitive(self) -> None:
        pattern = compile_label("email")
        match = pattern.search("EMAIL: a@b.co")
        assert match is not None
        assert match.group(1) == "a@b.co"

    def test_inner_whitespace_is_flexible(self) -> None:
        pattern = compile_label("date of birth")
        assert pattern.search("Date \t of   Birth: x") is not None

    def test_special_characters_escaped(self) -> None:
        pattern = compile_label("Tel.")
        assert pattern.search("Tel.: 1") is not None
        assert pattern.search("Telx: 1") is None

    def test_separator_required(self) -> None:
        assert compile_label("name").search("Names") is None

    def test_blank_label_rejected(self) -> None:
        with pytest.raises(ValueError):
            compile_label("   ")

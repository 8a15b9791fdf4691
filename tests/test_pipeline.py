"""Tests for the end-to-end extraction pipeline."""

import pytest

from form_reader.extraction.fields import FieldKey
from form_reader.extraction.pipeline import FormExtractor, FormRecord, extract
from form_reader.utils.config import ExtractionConfig


class TestExtract:
    """Tests for the extract function."""

    def test_clean_form(self, clean_form_text: str) -> None:
        record = extract(clean_form_text)
        assert record.to_dict() == {
            "name": "Jane Smith",
            "email": "jane@site.com",
            "phone": "555-123-4567",
            "address": "12 Oak Ave",
            "dateOfBirth": "1990-01-01",
        }

    def test_noisy_form(self, noisy_form_text: str) -> None:
        record = extract(noisy_form_text)
        assert record.name == "John   Doe"
        assert record.email == "john.doe@example.com"
        assert record.phone == "1555010-2030"
        assert record.address == ""
        assert record.date_of_birth == "1990-01-05"

    def test_email_lowercased_and_trimmed(self) -> None:
        record = extract("Email: John.Doe@Example.com \n")
        assert record.email == "john.doe@example.com"

    def test_phone_keeps_only_digits_and_hyphens(self) -> None:
        record = extract("Phone: (123) 456-7890")
        assert record.phone == "123456-7890"

    def test_date_of_birth_to_iso(self) -> None:
        record = extract("Date of Birth: January 5, 1990")
        assert record.date_of_birth == "1990-01-05"

    def test_two_digit_birth_year_stays_in_past(self) -> None:
        record = extract("Date of Birth: 12/31/55")
        assert record.date_of_birth == "1955-12-31"

    def test_month_and_year_only(self) -> None:
        record = extract("Date of Birth: January 1990")
        assert record.date_of_birth == "1990-01-01"

    def test_non_breaking_space_separator(self) -> None:
        record = extract("Name\u00a0Jane\nEmail:\u00a0JANE@SITE.COM")
        assert record.name == "Jane"
        assert record.email == "jane@site.com"

    def test_unparseable_date_kept(self) -> None:
        record = extract("Date of Birth: not-a-date")
        assert record.date_of_birth == "not-a-date"

    def test_empty_text_gives_all_empty_fields(self) -> None:
        record = extract("")
        assert record.to_dict() == {
            "name": "",
            "email": "",
            "phone": "",
            "address": "",
            "dateOfBirth": "",
        }

    @pytest.mark.parametrize("missing", ["Name", "Email", "Phone", "Address"])
    def test_missing_label_gives_empty_field(
        self, clean_form_text: str, missing: str
    ) -> None:
        text = "\n".join(
            line for line in clean_form_text.splitlines() if not line.startswith(missing)
        )
        record = extract(text)
        assert record.get(missing.lower()) == ""
        assert record.found_count() == 4

    def test_field_order_does_not_matter(self) -> None:
        forward = extract("Name: Ann\nPhone: 555-0100\nEmail: A@B.CO")
        backward = extract("Email: A@B.CO\nPhone: 555-0100\nName: Ann")
        assert forward == backward

    def test_label_with_empty_value(self) -> None:
        record = extract("Name:\nEmail: a@b.co")
        assert record.name == ""
        assert record.email == "a@b.co"

    def test_every_call_returns_fresh_record(self) -> None:
        first = extract("Name: Ann")
        first.name = "edited"
        assert extract("Name: Ann").name == "Ann"


class TestFormRecord:
    """Tests for the FormRecord model."""

    def test_defaults_are_empty_strings(self) -> None:
        record = FormRecord()
        assert all(value == "" for value in record.to_dict().values())

    def test_output_uses_date_of_birth_alias(self) -> None:
        record = FormRecord(dateOfBirth="1990-01-01")
        assert record.date_of_birth == "1990-01-01"
        assert "dateOfBirth" in record.to_dict()

    def test_populate_by_attribute_name(self) -> None:
        assert FormRecord(date_of_birth="x").get(FieldKey.DATE_OF_BIRTH) == "x"

    def test_get_unknown_key(self) -> None:
        with pytest.raises(ValueError):
            FormRecord().get("fax")


class TestFormExtractor:
    """Tests for the configured extractor."""

    def test_default_config(self, clean_form_text: str) -> None:
        assert FormExtractor().extract(clean_form_text) == extract(clean_form_text)

    def test_label_override(self) -> None:
        extractor = FormExtractor(
            ExtractionConfig(label_overrides={"dateOfBirth": "DOB", "phone": "Mobile"})
        )
        record = extractor.extract("DOB: 03/04/1975\nMobile: 07700 900123")
        assert record.date_of_birth == "1975-03-04"
        assert record.phone == "07700900123"

    def test_override_hides_default_label(self) -> None:
        extractor = FormExtractor(ExtractionConfig(label_overrides={"phone": "Mobile"}))
        assert extractor.extract("Phone: 555").phone == ""

    def test_unknown_override_rejected(self) -> None:
        with pytest.raises(ValueError):
            FormExtractor(ExtractionConfig(label_overrides={"fax": "Fax"}))

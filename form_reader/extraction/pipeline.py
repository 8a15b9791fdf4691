"""Extraction pipeline: raw OCR text in, structured form record out.

Each field is located and normalized independently of the others, so a
missing or garbled field never affects the rest of the record.
"""

from pydantic import BaseModel, ConfigDict, Field

from form_reader.utils.config import ExtractionConfig
from form_reader.utils.logger import get_logger

from .fields import FIELD_SPECS, FieldKey, FieldSpec, build_field_specs
from .locator import locate_field

logger = get_logger(__name__)

# Record attribute for each field key.
FIELD_ATTRS: dict[FieldKey, str] = {
    FieldKey.NAME: "name",
    FieldKey.EMAIL: "email",
    FieldKey.PHONE: "phone",
    FieldKey.ADDRESS: "address",
    FieldKey.DATE_OF_BIRTH: "date_of_birth",
}


class FormRecord(BaseModel):
    """Structured form values; an empty string means "not found"."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    date_of_birth: str = Field(default="", alias="dateOfBirth")

    def get(self, key: FieldKey | str) -> str:
        """Return the value stored under a field key."""
        return getattr(self, FIELD_ATTRS[FieldKey(key)])

    def to_dict(self) -> dict[str, str]:
        """Return the record keyed by output field names."""
        return self.model_dump(by_alias=True)

    def found_count(self) -> int:
        """Count the fields holding a non-empty value."""
        return sum(1 for value in self.to_dict().values() if value)


def extract(raw_text: str, specs: tuple[FieldSpec, ...] = FIELD_SPECS) -> FormRecord:
    """Extract and normalize every form field from raw OCR text.

    Args:
        raw_text: Full text returned by the OCR engine.
        specs: Field spec table to apply.

    Returns:
        A fresh record with every field present.
    """
    logger.debug("Extracting fields from OCR text: %r", raw_text)

    values: dict[str, str] = {}
    for spec in specs:
        raw = locate_field(raw_text, spec)
        values[FIELD_ATTRS[spec.key]] = spec.normalize(raw.value)

    record = FormRecord(**values)
    logger.info(
        "Form extraction found %d of %d fields", record.found_count(), len(FIELD_ATTRS)
    )
    return record


class FormExtractor:
    """Extractor bound to a spec table built from configuration.

    Args:
        config: Extraction settings; label overrides are applied once here.
    """

    def __init__(self, config: ExtractionConfig | None = None) -> None:
        self.config = config or ExtractionConfig()
        if self.config.label_overrides:
            self.specs = build_field_specs(self.config.label_overrides)
        else:
            self.specs = FIELD_SPECS

    def extract(self, raw_text: str) -> FormRecord:
        """Extract a form record using this extractor's spec table."""
        return extract(raw_text, self.specs)

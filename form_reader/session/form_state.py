"""Explicit form state for the presentation layer.

Holds the editable record, the processing flag, and the last error.
Every transition returns a new ``FormState`` with its own copy of the
record; the caller owns it and decides when to replace its current state.
"""

from pydantic import BaseModel, ConfigDict, Field

from form_reader.extraction.fields import FieldKey
from form_reader.extraction.pipeline import FIELD_ATTRS, FormExtractor, FormRecord
from form_reader.utils.logger import get_logger

logger = get_logger(__name__)

PROCESSING_ERROR_PREFIX = "Error processing form: "


class FormState(BaseModel):
    """Snapshot of the form as seen by the user."""

    model_config = ConfigDict(frozen=True)

    record: FormRecord = Field(default_factory=FormRecord)
    is_processing: bool = False
    error: str = ""

    @classmethod
    def initial(cls) -> "FormState":
        """Return an empty, idle form with no error."""
        return cls()


def begin_processing(state: FormState) -> FormState:
    """Mark an OCR run as started and clear any previous error."""
    return state.model_copy(update={"is_processing": True, "error": ""}, deep=True)


def apply_ocr_text(
    state: FormState, text: str, extractor: FormExtractor | None = None
) -> FormState:
    """Replace the record with one freshly extracted from OCR text.

    Args:
        state: Current form state.
        text: Full text returned by the OCR engine.
        extractor: Extractor to use; defaults to the built-in labels.

    Returns:
        Idle state holding the new record.
    """
    extractor = extractor or FormExtractor()
    record = extractor.extract(text)
    return state.model_copy(
        update={"record": record, "is_processing": False, "error": ""}, deep=True
    )


def apply_ocr_failure(state: FormState, exc: BaseException) -> FormState:
    """Record a failed OCR run, keeping whatever the form already holds."""
    logger.error("OCR failed: %s", exc)
    return state.model_copy(
        update={"is_processing": False, "error": f"{PROCESSING_ERROR_PREFIX}{exc}"},
        deep=True,
    )


def edit_field(state: FormState, key: FieldKey | str, value: str) -> FormState:
    """Apply a manual edit to one field, bypassing normalization.

    Raises:
        KeyError: If ``key`` is not a known field key.
    """
    try:
        attr = FIELD_ATTRS[FieldKey(key)]
    except ValueError as exc:
        raise KeyError(key) from exc
    record = state.record.model_copy(update={attr: value})
    return state.model_copy(update={"record": record}, deep=True)


def submit(state: FormState) -> dict[str, str]:
    """Return the submitted form values keyed by output field names."""
    data = state.record.to_dict()
    logger.info("Form submitted: %s", data)
    return data

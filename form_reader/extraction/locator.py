"""Field Locator: finds the first labeled occurrence of a field in OCR text."""

from dataclasses import dataclass

from form_reader.utils.logger import get_logger

from .fields import FieldKey, FieldSpec

logger = get_logger(__name__)


@dataclass(frozen=True)
class RawExtraction:
    """Trimmed text captured for one field before normalization."""

    key: FieldKey
    value: str
    matched: bool


def locate_field(text: str, spec: FieldSpec) -> RawExtraction:
    """Capture the rest of the line after the first occurrence of a label.

    Args:
        text: Full raw OCR text.
        spec: Specification of the field to locate.

    Returns:
        The trimmed capture. A missing label yields an empty, unmatched
        result; a label ending its line yields an empty, matched one.
    """
    match = spec.pattern.search(text)
    if match is None:
        logger.debug("Label %r not found", spec.label)
        return RawExtraction(spec.key, "", False)
    return RawExtraction(spec.key, match.group(1).strip(), True)

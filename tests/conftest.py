"""Shared test fixtures for the OCR form reader test suite."""

from pathlib import Path

import pytest


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config_dir(project_root: Path) -> Path:
    """Return the configs directory path."""
    return project_root / "configs"


@pytest.fixture
def clean_form_text() -> str:
    """OCR text of a neatly filled form."""
    return (
        "Name: Jane Smith\n"
        "Email: JANE@SITE.COM\n"
        "Phone: 555-123-4567\n"
        "Address: 12 Oak Ave\n"
        "Date of Birth: 1990-01-01"
    )


@pytest.fixture
def noisy_form_text() -> str:
    """OCR text with the spacing and casing noise a real scan produces."""
    return (
        "PERSONAL DETAILS FORM\r\n"
        "  NAME :  John   Doe  \r\n"
        "e-mail address\n"
        "EMAIL: John . Doe@Example .com \n"
        "phone: +1 (555) 010-2030\n"
        "Date  of\tBirth:  January 5th, 1990\n"
        "Signature:\n"
    )

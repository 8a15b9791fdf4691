"""OCR Form Reader.

Turns raw OCR text from a scanned form into a structured record of
name, email, phone, address, and date of birth, with field-specific
normalization of the captured values.
"""

__version__ = "0.1.0"

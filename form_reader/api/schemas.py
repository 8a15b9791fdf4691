"""Pydantic request/response schemas for the FastAPI endpoints."""

from pydantic import BaseModel, Field

from form_reader.extraction.pipeline import FormRecord


class ExtractionRequest(BaseModel):
    """Request body carrying raw OCR text."""

    text: str = Field(..., description="Full text recognized by the OCR engine")


class ValidationResultResponse(BaseModel):
    """Response schema for a validation check result."""

    field_name: str
    is_valid: bool
    message: str
    rule_name: str


class ExtractionResponse(BaseModel):
    """Response schema for a form extraction request."""

    success: bool
    document_id: str
    record: FormRecord
    fields_found: int
    validation: list[ValidationResultResponse]
    validation_warnings: list[str] = []
    processing_time_ms: float


class BatchItemResponse(BaseModel):
    """Response schema for a single item in a batch extraction."""

    filename: str
    result: ExtractionResponse | None = None
    error: str | None = None


class BatchExtractionResponse(BaseModel):
    """Response schema for batch extraction of multiple OCR transcripts."""

    success: bool
    total_documents: int
    successful: int
    failed: int
    results: list[BatchItemResponse]


class FieldInfo(BaseModel):
    """Information about one extractable field."""

    key: str
    label: str
    normalized: bool


class FieldsResponse(BaseModel):
    """Response schema listing the extractable fields."""

    fields: list[FieldInfo]


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str

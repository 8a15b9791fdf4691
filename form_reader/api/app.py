"""FastAPI application for the OCR Form Reader API.

Provides REST endpoints that turn OCR text into form records, plus
field listing and health checks. Image capture and OCR happen
upstream; every endpoint accepts already-recognized text.
"""

import time
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from form_reader import __version__
from form_reader.extraction.pipeline import FormExtractor
from form_reader.utils.config import load_config
from form_reader.utils.logger import get_logger
from form_reader.validation.rules_engine import RulesEngine

from .schemas import (
    BatchExtractionResponse,
    BatchItemResponse,
    ExtractionRequest,
    ExtractionResponse,
    FieldInfo,
    FieldsResponse,
    HealthResponse,
    ValidationResultResponse,
)

logger = get_logger(__name__)

app = FastAPI(
    title="OCR Form Reader API",
    description="Extract name, email, phone, address, and date of birth from OCR text",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_ALLOWED_CONTENT_TYPES = {
    "text/plain",
    "application/octet-stream",
}

PROCESSING_FAILED = "Error processing form"


@lru_cache(maxsize=1)
def _get_components() -> tuple[FormExtractor, RulesEngine]:
    """Build the shared extractor and rules engine once per process.

    Returns:
        Tuple of (form_extractor, rules_engine).
    """
    config = load_config()
    extractor = FormExtractor(config.extraction)
    rules_engine = RulesEngine(Path(config.validation.rules_path))
    return extractor, rules_engine


def _process_text(text: str) -> ExtractionResponse:
    """Run extraction and validation on one OCR transcript."""
    start_time = time.time()
    extractor, rules_engine = _get_components()

    record = extractor.extract(text)
    report = rules_engine.validate(record)

    return ExtractionResponse(
        success=True,
        document_id=str(uuid.uuid4()),
        record=record,
        fields_found=record.found_count(),
        validation=[
            ValidationResultResponse(
                field_name=r.field_name,
                is_valid=r.is_valid,
                message=r.message,
                rule_name=r.rule_name,
            )
            for r in report.results
        ],
        validation_warnings=report.warnings,
        processing_time_ms=(time.time() - start_time) * 1000,
    )


async def _read_text_upload(file: UploadFile) -> str:
    """Read an uploaded OCR transcript as UTF-8 text.

    Raises:
        HTTPException: 400 for an unsupported type or undecodable content.
    """
    content_type = (file.content_type or "").split(";")[0].strip()
    if content_type and content_type not in _ALLOWED_CONTENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type: {file.content_type}",
        )
    content = await file.read()
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=400, detail="Uploaded file is not valid UTF-8 text"
        ) from exc


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health status."""
    return HealthResponse(status="healthy", version=__version__)


@app.get("/fields", response_model=FieldsResponse)
async def list_fields() -> FieldsResponse:
    """List the extractable fields and the labels they match."""
    extractor, _ = _get_components()
    return FieldsResponse(
        fields=[
            FieldInfo(
                key=spec.key.value,
                label=spec.label,
                normalized=spec.normalizer is not None,
            )
            for spec in extractor.specs
        ]
    )


@app.post("/extract", response_model=ExtractionResponse)
async def extract_text(request: ExtractionRequest) -> ExtractionResponse:
    """Extract a form record from OCR text sent as JSON.

    Args:
        request: Body carrying the raw OCR text.

    Returns:
        Extracted record with validation results.
    """
    try:
        return _process_text(request.text)
    except Exception as exc:
        logger.error("Extraction failed: %s", exc)
        raise HTTPException(status_code=500, detail=PROCESSING_FAILED) from exc


@app.post("/extract/file", response_model=ExtractionResponse)
async def extract_file(
    file: Annotated[UploadFile, File(...)],
) -> ExtractionResponse:
    """Extract a form record from an uploaded plain-text OCR transcript.

    Args:
        file: Uploaded UTF-8 text file.

    Returns:
        Extracted record with validation results.
    """
    text = await _read_text_upload(file)
    try:
        return _process_text(text)
    except Exception as exc:
        logger.error("Extraction failed for %s: %s", file.filename, exc)
        raise HTTPException(status_code=500, detail=PROCESSING_FAILED) from exc


@app.post("/extract/batch", response_model=BatchExtractionResponse)
async def extract_batch(
    files: Annotated[list[UploadFile], File(...)],
) -> BatchExtractionResponse:
    """Extract form records from multiple uploaded OCR transcripts.

    Args:
        files: List of uploaded text files.

    Returns:
        Batch extraction results with per-file outcomes.
    """
    results: list[BatchItemResponse] = []
    successful = 0

    for file in files:
        try:
            result = await extract_file(file)
            results.append(
                BatchItemResponse(filename=file.filename or "unknown", result=result)
            )
            successful += 1
        except HTTPException as exc:
            results.append(
                BatchItemResponse(filename=file.filename or "unknown", error=exc.detail)
            )

    return BatchExtractionResponse(
        success=successful > 0,
        total_documents=len(files),
        successful=successful,
        failed=len(files) - successful,
        results=results,
    )

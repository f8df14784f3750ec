"""Extraction endpoints: pasted text, uploaded text files, and confirmation."""

from __future__ import annotations

import datetime as dt
from typing import Annotated

from fastapi import APIRouter, File, Form, HTTPException, UploadFile

from planner.api.models import (
    ConfirmRequest,
    ConfirmResponse,
    ExtractedTaskModel,
    ExtractRequest,
    ExtractResponse,
    TaskModel,
)
from planner.config import settings
from planner.extraction.extractor import confirm_tasks, extract_tasks_from_document, run_extraction
from planner.extraction.models import ExtractionResult
from planner.pipeline_config import ExtractionConfig, TextFormat

router = APIRouter()

# Extensions accepted as plain-text task lists
TEXT_EXTENSIONS = {"txt", "md", "csv", "tsv"}


def _to_response(result: ExtractionResult) -> ExtractResponse:
    return ExtractResponse(
        format=result.format,
        items_extracted=len(result.tasks),
        tasks=[ExtractedTaskModel.from_extracted(t) for t in result.tasks],
    )


@router.post("/api/extract", response_model=ExtractResponse)
async def extract(request: ExtractRequest) -> ExtractResponse:
    """Extract task candidates from pasted or recognized text.

    Text with no recognizable tasks returns an empty list, not an error.
    """
    config = ExtractionConfig(format=request.format, reference_date=request.reference_date)
    return _to_response(run_extraction(request.text, config))


@router.post("/api/extract/upload", response_model=ExtractResponse)
async def extract_upload(
    file: Annotated[UploadFile, File(...)],
    format: Annotated[str, Form()] = "auto",
    reference_date: Annotated[dt.date | None, Form()] = None,
) -> ExtractResponse:
    """Extract task candidates from an uploaded text file (.txt, .md, .csv, .tsv).

    The file is decoded as UTF-8 and tidied like any document text before
    extraction.
    """
    raw = await file.read()
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {settings.max_upload_bytes // 1024} KB.",
        )

    filename = file.filename or ""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    content_type = (file.content_type or "").lower()
    # Extensionless uploads are accepted when the client says they are text
    is_text = ext in TEXT_EXTENSIONS or (not ext and content_type.startswith("text/"))
    if not is_text:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported file type {filename!r}. Supported: {sorted(TEXT_EXTENSIONS)}",
        )

    try:
        text_format = TextFormat(format)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=f"Unknown format: {format!r}") from exc

    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="File is not valid UTF-8 text") from exc

    config = ExtractionConfig(format=text_format, reference_date=reference_date)
    return _to_response(extract_tasks_from_document(content, config))


@router.post("/api/extract/confirm", response_model=ConfirmResponse)
async def confirm(request: ConfirmRequest) -> ConfirmResponse:
    """Convert reviewed candidates into tasks.

    Candidates without a name or an ISO deadline are dropped.
    """
    tasks = confirm_tasks((i.to_extracted() for i in request.items), request.created_at)
    return ConfirmResponse(tasks=[TaskModel.from_task(t) for t in tasks])

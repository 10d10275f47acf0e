import os
from typing import List
from fastapi import APIRouter, File, UploadFile, HTTPException
from backend.app.models.schemas import BatchState, CancelResponse, IngestResponse, RawDocument
from backend.app.services.exceptions import BatchInProgressError
from backend.app.services.orchestrator import batch_state, cancel_ingest, ingest_documents

router = APIRouter()

SUPPORTED_SUFFIXES = [".pdf", ".docx", ".html", ".htm", ".txt", ".png", ".jpg", ".jpeg"]

@router.post("/ingest", response_model=IngestResponse)
async def ingest(files: List[UploadFile] = File(...)):
    raw_docs = []
    for file in files:
        suffix = os.path.splitext(file.filename or "")[1].lower()
        if suffix not in SUPPORTED_SUFFIXES:
            raise HTTPException(400, f"Unsupported file format: {file.filename}. Use PDF, DOCX, HTML, TXT or an image.")
        raw_docs.append(
            RawDocument(file_name=file.filename or "document", data=await file.read(), content_type=file.content_type)
        )
    try:
        documents = await ingest_documents(raw_docs)
    except BatchInProgressError as e:
        raise HTTPException(409, str(e))
    state = batch_state()
    return IngestResponse(
        documents=documents,
        total=state.total,
        succeeded=len(documents),
        failed=state.failures,
        status=state.status,
    )

@router.get("/ingest/status", response_model=BatchState)
async def ingest_status():
    return batch_state()

@router.post("/ingest/cancel", response_model=CancelResponse)
async def ingest_cancel():
    return CancelResponse(cancelled=cancel_ingest())

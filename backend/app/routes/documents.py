from typing import List, Optional
from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse
from backend.app.models.schemas import DeleteResponse, ExtractedDocument
from backend.app.services.export import (
    corpus_export_file_name,
    export_file_name,
    render_export,
    render_export_all,
)
from backend.app.services.orchestrator import delete_document, get_document, list_documents

router = APIRouter()

def _attachment(text: str, file_name: str) -> PlainTextResponse:
    return PlainTextResponse(text, headers={"Content-Disposition": f'attachment; filename="{file_name}"'})

@router.get("/documents", response_model=List[ExtractedDocument])
async def documents(search: Optional[str] = None):
    return list_documents(search)

# declared before /documents/{doc_id} so "export" is not read as an id
@router.get("/documents/export", response_class=PlainTextResponse)
async def export_all():
    docs = list_documents()
    if not docs:
        raise HTTPException(404, "No documents to export")
    return _attachment(render_export_all(docs), corpus_export_file_name())

@router.get("/documents/{doc_id}", response_model=ExtractedDocument)
async def document(doc_id: str):
    doc = get_document(doc_id)
    if not doc:
        raise HTTPException(404, "Document not found")
    return doc

@router.get("/documents/{doc_id}/export", response_class=PlainTextResponse)
async def export_one(doc_id: str):
    doc = get_document(doc_id)
    if not doc:
        raise HTTPException(404, "Document not found")
    return _attachment(render_export(doc), export_file_name(doc))

@router.delete("/documents/{doc_id}", response_model=DeleteResponse)
async def remove(doc_id: str):
    return DeleteResponse(deleted=delete_document(doc_id))

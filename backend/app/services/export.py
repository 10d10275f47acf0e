import os
from datetime import date
from typing import Optional, Sequence

from backend.app.models.schemas import ExtractedDocument

RULE = "=" * 50
THIN_RULE = "-" * 50


def render_export(doc: ExtractedDocument) -> str:
    return (
        f"FILENAME: {doc.file_name}\n"
        f"SENDER: {doc.sender}\n"
        f"RECIPIENT: {doc.recipient}\n"
        f"DATE: {doc.date}\n"
        f"SUMMARY: {doc.summary}\n"
        f"TOPICS: {', '.join(doc.topics)}\n"
        f"\n"
        f"CONTENT:\n{doc.content}"
    )


def render_export_all(docs: Sequence[ExtractedDocument]) -> str:
    blocks = []
    for doc in docs:
        blocks.append(
            f"{RULE}\n"
            f"FILE: {doc.file_name}\n"
            f"SENDER: {doc.sender}\n"
            f"RECIPIENT: {doc.recipient}\n"
            f"DATE: {doc.date}\n"
            f"SUMMARY: {doc.summary}\n"
            f"TOPICS: {', '.join(doc.topics)}\n"
            f"{THIN_RULE}\n"
            f"CONTENT:\n{doc.content}\n"
            f"{RULE}\n\n"
        )
    return "\n".join(blocks)


def export_file_name(doc: ExtractedDocument) -> str:
    stem = os.path.splitext(doc.file_name)[0] or "document"
    return f"{stem}_extracted.txt"


def corpus_export_file_name(on: Optional[date] = None) -> str:
    return f"documind_export_{(on or date.today()).isoformat()}.txt"

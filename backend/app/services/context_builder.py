"""
Corpus context construction for interrogation.

Each document becomes a labeled block; blocks are joined in corpus order.
With a character budget, the newest documents are kept and the oldest are
dropped first. A single newest document larger than the budget is cut and
marked as truncated.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from backend.app.models.schemas import ExtractedDocument

DOCUMENT_SEPARATOR = "\n\n---\n\n"
TRUNCATION_MARKER = "\n[... truncated]"


@dataclass
class ContextPlan:
    text: str
    included_ids: List[str] = field(default_factory=list)
    omitted_ids: List[str] = field(default_factory=list)
    truncated_id: Optional[str] = None


def render_document(doc: ExtractedDocument) -> str:
    return (
        f"[Document: {doc.file_name}, Sender: {doc.sender}, Recipient: {doc.recipient}, Date: {doc.date}]\n"
        f"Content: {doc.content}"
    )


def _cut(block: str, max_chars: int) -> str:
    if max_chars <= len(TRUNCATION_MARKER):
        return block[:max_chars]
    return block[: max_chars - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


def plan_context(documents: Sequence[ExtractedDocument], max_chars: Optional[int] = None) -> ContextPlan:
    """
    Decide which documents go into the context block.

    ``max_chars`` of None or 0 means no budget: every document is included.
    """
    blocks = [render_document(d) for d in documents]
    if not max_chars or max_chars <= 0:
        return ContextPlan(text=DOCUMENT_SEPARATOR.join(blocks), included_ids=[d.id for d in documents])

    kept: List[int] = []
    used = 0
    for idx in range(len(documents) - 1, -1, -1):
        extra = len(blocks[idx]) + (len(DOCUMENT_SEPARATOR) if kept else 0)
        if used + extra > max_chars:
            break
        kept.append(idx)
        used += extra

    if not kept and documents:
        newest = len(documents) - 1
        return ContextPlan(
            text=_cut(blocks[newest], max_chars),
            included_ids=[documents[newest].id],
            omitted_ids=[d.id for d in documents[:newest]],
            truncated_id=documents[newest].id,
        )

    kept.reverse()
    first = kept[0] if kept else len(documents)
    return ContextPlan(
        text=DOCUMENT_SEPARATOR.join(blocks[i] for i in kept),
        included_ids=[documents[i].id for i in kept],
        omitted_ids=[d.id for d in documents[:first]],
    )


def build_context(documents: Sequence[ExtractedDocument], max_chars: Optional[int] = None) -> str:
    return plan_context(documents, max_chars).text

import logging
from typing import List, Optional, Sequence

from autogen_core import CancellationToken

from agents.workflows import DocumentExtractionWorkflow, InterrogationWorkflow
from backend.app.models.schemas import (
    BatchState,
    ConversationTurn,
    ExtractedDocument,
    RawDocument,
    Role,
)
from backend.app.services.batch import BatchExtractionController, ProgressListener
from backend.app.services.tracing import traceable
from shared.config import settings
from storage.local_store import session

logger = logging.getLogger(__name__)

# Initialize workflow singletons
extraction_workflow = DocumentExtractionWorkflow()
interrogation_workflow = InterrogationWorkflow()


@traceable("ingest_documents")
async def ingest_documents(
    documents: Sequence[RawDocument], on_progress: Optional[ProgressListener] = None
) -> List[ExtractedDocument]:
    """
    Extract every document in the batch and append the successes to the corpus.
    Failed documents are dropped; inspect `batch_state()` for what failed.
    Raises BatchInProgressError if another batch is still running.
    """
    controller = BatchExtractionController(
        extraction_workflow,
        concurrency=settings.extraction_concurrency,
        on_progress=on_progress,
    )
    token = session.begin_batch(controller)
    try:
        extracted = await controller.run(documents, cancellation_token=token)
        session.corpus.extend(extracted)
    finally:
        session.end_batch()
    return extracted


def cancel_ingest() -> bool:
    return session.cancel_batch()


def batch_state() -> BatchState:
    return session.batch_state()


def list_documents(search: Optional[str] = None) -> List[ExtractedDocument]:
    return session.corpus.search(search)


def get_document(doc_id: str) -> Optional[ExtractedDocument]:
    return session.corpus.get(doc_id)


def delete_document(doc_id: str) -> bool:
    deleted = session.corpus.delete(doc_id)
    if deleted:
        logger.info(f"Deleted document {doc_id}")
    return deleted


@traceable("answer_question")
async def answer_question(question: str, cancellation_token: Optional[CancellationToken] = None) -> str:
    """
    Answer a question against the whole corpus using the conversation so far.
    The user turn is recorded on submission; the assistant turn only once an
    answer exists. InterrogationError propagates to the caller.
    """
    prior = session.history.turns()
    session.history.append(Role.USER, question)
    answer = await interrogation_workflow.run(
        question, session.corpus.all(), prior, cancellation_token=cancellation_token
    )
    session.history.append(Role.ASSISTANT, answer)
    return answer


def conversation() -> List[ConversationTurn]:
    return session.history.turns()


def reset_conversation() -> None:
    session.history.clear()

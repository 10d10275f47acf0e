"""
Batch extraction across many documents.

One document's failure never aborts the batch: it is logged, recorded in the
batch state and skipped. Progress advances once per attempted document, so
``current`` only grows and reaches ``total`` exactly once, when the batch
completes.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Callable, List, Optional, Sequence

from autogen_core import CancellationToken

from agents.workflows import DocumentExtractionWorkflow
from backend.app.models.schemas import (
    BatchFailure,
    BatchProgress,
    BatchState,
    ExtractedDocument,
    ProcessStatus,
    RawDocument,
)
from backend.app.services.exceptions import ExtractionError

logger = logging.getLogger(__name__)

ProgressListener = Callable[[BatchProgress], None]


class BatchExtractionController:
    """
    Runs the extraction workflow over an ordered list of documents.

    ``concurrency`` bounds how many extractions are in flight at once. The
    default of 1 processes documents strictly one after another, in order.
    """

    def __init__(
        self,
        workflow: DocumentExtractionWorkflow,
        concurrency: int = 1,
        on_progress: Optional[ProgressListener] = None,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.workflow = workflow
        self.concurrency = concurrency
        self.on_progress = on_progress
        self._state = BatchState()

    @property
    def state(self) -> BatchState:
        return self._state.model_copy(deep=True)

    def _emit(self) -> None:
        if self.on_progress is not None:
            self.on_progress(self._state.progress)

    def _advance(self) -> None:
        self._state.current += 1
        self._emit()

    @staticmethod
    async def _drain(tasks: List["asyncio.Task[None]"]) -> None:
        """Cancel unfinished extractions and wait until every one has stopped."""
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def run(
        self,
        documents: Sequence[RawDocument],
        cancellation_token: Optional[CancellationToken] = None,
    ) -> List[ExtractedDocument]:
        total = len(documents)
        self._state = BatchState(status=ProcessStatus.PROCESSING, total=total)
        self._emit()
        logger.info(f"Batch started: total={total} concurrency={self.concurrency}")

        semaphore = asyncio.Semaphore(self.concurrency)
        results: List[Optional[ExtractedDocument]] = [None] * total

        def _cancelled() -> bool:
            return cancellation_token is not None and cancellation_token.is_cancelled()

        async def _process(index: int, document: RawDocument) -> None:
            async with semaphore:
                if _cancelled():
                    return
                try:
                    results[index] = await self.workflow.run(document, cancellation_token=cancellation_token)
                    self._state.success_count += 1
                except ExtractionError as e:
                    logger.warning(f"Extraction failed for {document.file_name}: {e.reason}")
                    self._state.failures.append(BatchFailure(file_name=document.file_name, reason=e.reason))
                except asyncio.CancelledError:
                    if _cancelled():
                        return
                    raise
                self._advance()

        tasks = [asyncio.create_task(_process(i, d)) for i, d in enumerate(documents)]
        try:
            await asyncio.gather(*tasks)
        except asyncio.CancelledError:
            await self._drain(tasks)
            self._state.status = ProcessStatus.CANCELLED
            raise
        except Exception:
            logger.exception("Batch aborted by an unexpected error")
            await self._drain(tasks)
            self._state.status = ProcessStatus.FAILED
            raise

        extracted = [doc for doc in results if doc is not None]
        if _cancelled() and self._state.current < total:
            self._state.status = ProcessStatus.CANCELLED
            logger.info(f"Batch cancelled: attempted={self._state.current} total={total}")
        else:
            self._state.status = ProcessStatus.COMPLETED
            logger.info(
                f"Batch completed: total={total} succeeded={len(extracted)} failed={len(self._state.failures)}"
            )
        return extracted

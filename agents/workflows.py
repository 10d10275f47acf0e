"""
Workflow classes driving the reasoning service with validation.

Each workflow exposes a `run(...)` coroutine that:
1) calls the reasoning service,
2) validates what comes back,
3) raises a pipeline error on failure, never returning a partial result.
"""
from __future__ import annotations
import logging
from typing import Optional, Sequence

from autogen_core import CancellationToken

from agents.system_prompts import EXTRACTION_PROMPT, FALLBACK_ANSWER, INTERROGATION_PROMPT
from backend.app.models.schemas import (
    ConversationTurn,
    EncodedDocument,
    ExtractedDocument,
    RawDocument,
    extraction_schema,
)
from backend.app.services.context_builder import plan_context
from backend.app.services.exceptions import ExtractionError, InterrogationError, ValidationError
from backend.app.services.reasoning_service import ReasoningService, reasoning_service
from backend.app.services.validators import parse_extraction
from shared.config import settings

logger = logging.getLogger(__name__)


class DocumentExtractionWorkflow:
    def __init__(self, service: Optional[ReasoningService] = None):
        self.service = service or reasoning_service

    async def run(
        self, document: RawDocument, cancellation_token: Optional[CancellationToken] = None
    ) -> ExtractedDocument:
        encoded = EncodedDocument.from_raw(document)
        try:
            raw = await self.service.extract(
                encoded, extraction_schema(), EXTRACTION_PROMPT, cancellation_token=cancellation_token
            )
        except Exception as e:
            raise ExtractionError(document.file_name, f"service call failed: {e}") from e

        try:
            payload = parse_extraction(raw)
        except ValidationError as ve:
            raise ExtractionError(document.file_name, f"{ve} {ve.details}") from ve

        extracted = ExtractedDocument.from_payload(document.file_name, payload)
        logger.info(
            f"Extracted {document.file_name}: id={extracted.id} content_len={len(extracted.content)} "
            f"confidence={extracted.confidence:.2f}"
        )
        return extracted


class InterrogationWorkflow:
    def __init__(
        self,
        service: Optional[ReasoningService] = None,
        max_context_chars: Optional[int] = None,
        fallback_answer: str = FALLBACK_ANSWER,
    ):
        self.service = service or reasoning_service
        self.max_context_chars = settings.context_max_chars if max_context_chars is None else max_context_chars
        self.fallback_answer = fallback_answer

    def system_prompt(self, documents: Sequence[ExtractedDocument]) -> str:
        plan = plan_context(documents, self.max_context_chars)
        if plan.omitted_ids or plan.truncated_id:
            logger.warning(
                f"Context budget {self.max_context_chars} exceeded: omitted={len(plan.omitted_ids)} "
                f"truncated={plan.truncated_id}"
            )
        return INTERROGATION_PROMPT.format(context=plan.text)

    async def run(
        self,
        query: str,
        documents: Sequence[ExtractedDocument],
        history: Sequence[ConversationTurn],
        cancellation_token: Optional[CancellationToken] = None,
    ) -> str:
        prompt = self.system_prompt(documents)
        try:
            answer = await self.service.converse(
                list(history), query, prompt, cancellation_token=cancellation_token
            )
        except Exception as e:
            raise InterrogationError(str(e)) from e
        if not answer or not answer.strip():
            return self.fallback_answer
        return answer

"""
Reasoning-service capability used by the extraction and interrogation workflows.

Workflows depend only on the ``ReasoningService`` protocol; the concrete
``AzureReasoningService`` talks to Azure OpenAI through the AutoGen model
client, and any object with the same two coroutines (for example a test
double returning canned responses) can stand in for it.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

from autogen_core import CancellationToken, Image
from autogen_core.models import (
    AssistantMessage,
    LLMMessage,
    SystemMessage,
    UserMessage,
)
from autogen_ext.models.openai import AzureOpenAIChatCompletionClient

from agents.system_prompts import EXTRACTOR_SYSTEM_PROMPT
from backend.app.models.schemas import ConversationTurn, EncodedDocument, Role
from backend.app.services.mcp_bridge import McpBridge, mcp_bridge
from shared.config import settings

logger = logging.getLogger(__name__)


class ReasoningService(Protocol):
    async def extract(
        self,
        document: EncodedDocument,
        schema: Dict[str, Any],
        instruction: str,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> str: ...

    async def converse(
        self,
        history: Sequence[ConversationTurn],
        query: str,
        system_prompt: str,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> str: ...


def _azure_client() -> AzureOpenAIChatCompletionClient:
    return AzureOpenAIChatCompletionClient(
        azure_deployment=settings.az_deployment,
        model=settings.az_model,
        api_version=settings.az_api_version,
        azure_endpoint=settings.az_endpoint,
        api_key=settings.az_api_key,
    )


def history_to_messages(history: Sequence[ConversationTurn]) -> List[LLMMessage]:
    messages: List[LLMMessage] = []
    for turn in history:
        if turn.role == Role.USER:
            messages.append(UserMessage(content=turn.text, source="user"))
        else:
            messages.append(AssistantMessage(content=turn.text, source="assistant"))
    return messages


def _response_format(schema: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "json_schema",
        "json_schema": {"name": "extracted_document", "schema": schema, "strict": False},
    }


class AzureReasoningService:
    def __init__(self, bridge: Optional[McpBridge] = None):
        self._bridge = bridge or mcp_bridge
        self._client: Optional[AzureOpenAIChatCompletionClient] = None

    async def init(self):
        if self._client is not None:
            return
        self._client = _azure_client()
        logger.info(f"Reasoning service ready: deployment={settings.az_deployment}")

    async def close(self):
        if self._client is None:
            return
        await self._client.close()
        self._client = None

    def _require_client(self) -> AzureOpenAIChatCompletionClient:
        if self._client is None:
            raise RuntimeError("Reasoning service is not initialized")
        return self._client

    async def _document_parts(self, document: EncodedDocument, instruction: str) -> List[Union[str, Image]]:
        if document.mime_type.startswith("image/"):
            return [instruction, Image.from_base64(document.data)]
        text = await self._bridge.extract_text(document.file_name, document.data)
        return [f"{instruction}\n\nFILE: {document.file_name}\n\nDOCUMENT TEXT:\n{text}"]

    async def extract(
        self,
        document: EncodedDocument,
        schema: Dict[str, Any],
        instruction: str,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> str:
        client = self._require_client()
        parts = await self._document_parts(document, instruction)
        result = await client.create(
            messages=[
                SystemMessage(content=EXTRACTOR_SYSTEM_PROMPT),
                UserMessage(content=parts, source="user"),
            ],
            extra_create_args={"response_format": _response_format(schema)},
            cancellation_token=cancellation_token,
        )
        return result.content if isinstance(result.content, str) else ""

    async def converse(
        self,
        history: Sequence[ConversationTurn],
        query: str,
        system_prompt: str,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> str:
        client = self._require_client()
        messages: List[LLMMessage] = [SystemMessage(content=system_prompt)]
        messages.extend(history_to_messages(history))
        messages.append(UserMessage(content=query, source="user"))
        result = await client.create(messages=messages, cancellation_token=cancellation_token)
        return result.content if isinstance(result.content, str) else ""


reasoning_service = AzureReasoningService()

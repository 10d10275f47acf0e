"""
Unit tests for the Azure-backed reasoning service with the AutoGen model
client and the MCP bridge mocked out.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from autogen_core import Image
from autogen_core.models import AssistantMessage, SystemMessage, UserMessage

from backend.app.models.schemas import ConversationTurn, EncodedDocument, Role, extraction_schema
from backend.app.services.reasoning_service import AzureReasoningService, history_to_messages

ONE_PIXEL_PNG = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


@pytest.fixture
def mock_bridge():
    bridge = MagicMock()
    bridge.extract_text = AsyncMock(return_value="Dear John, the budget is attached.")
    return bridge


@pytest.fixture
def service(mock_bridge):
    svc = AzureReasoningService(bridge=mock_bridge)
    client = MagicMock()
    client.create = AsyncMock(return_value=MagicMock(content='{"ok": true}'))
    client.close = AsyncMock()
    svc._client = client
    return svc


def test_history_to_messages_maps_roles():
    turns = [
        ConversationTurn(role=Role.USER, text="Q1"),
        ConversationTurn(role=Role.ASSISTANT, text="A1"),
    ]

    messages = history_to_messages(turns)

    assert isinstance(messages[0], UserMessage) and messages[0].content == "Q1"
    assert isinstance(messages[1], AssistantMessage) and messages[1].content == "A1"


@pytest.mark.asyncio
async def test_extract_decodes_pdf_through_bridge(service, mock_bridge):
    doc = EncodedDocument(file_name="memo.pdf", mime_type="application/pdf", data="JVBERi0=")

    out = await service.extract(doc, extraction_schema(), "Extract it.")

    assert out == '{"ok": true}'
    mock_bridge.extract_text.assert_awaited_once_with("memo.pdf", "JVBERi0=")
    kwargs = service._client.create.call_args.kwargs
    system, user = kwargs["messages"]
    assert isinstance(system, SystemMessage)
    assert "Dear John, the budget is attached." in user.content[0]
    fmt = kwargs["extra_create_args"]["response_format"]
    assert fmt["type"] == "json_schema"
    assert fmt["json_schema"]["schema"]["required"] == ["sender", "recipient", "content", "summary"]


@pytest.mark.asyncio
async def test_extract_attaches_images_directly(service, mock_bridge):
    doc = EncodedDocument(file_name="scan.png", mime_type="image/png", data=ONE_PIXEL_PNG)

    await service.extract(doc, extraction_schema(), "Extract it.")

    mock_bridge.extract_text.assert_not_awaited()
    user = service._client.create.call_args.kwargs["messages"][1]
    assert user.content[0] == "Extract it."
    assert isinstance(user.content[1], Image)


@pytest.mark.asyncio
async def test_converse_puts_system_prompt_first_and_query_last(service):
    service._client.create.return_value = MagicMock(content="An answer.")
    history = [ConversationTurn(role=Role.USER, text="Q1"), ConversationTurn(role=Role.ASSISTANT, text="A1")]

    out = await service.converse(history, "Q2", "Use only CONTEXT.")

    assert out == "An answer."
    messages = service._client.create.call_args.kwargs["messages"]
    assert isinstance(messages[0], SystemMessage) and messages[0].content == "Use only CONTEXT."
    assert [m.content for m in messages[1:]] == ["Q1", "A1", "Q2"]


@pytest.mark.asyncio
async def test_non_text_result_reads_as_empty(service):
    service._client.create.return_value = MagicMock(content=[MagicMock()])

    assert await service.converse([], "Q", "S") == ""


@pytest.mark.asyncio
async def test_requires_init():
    svc = AzureReasoningService(bridge=MagicMock())

    with pytest.raises(RuntimeError):
        await svc.converse([], "Q", "S")


@pytest.mark.asyncio
async def test_close_releases_client(service):
    client = service._client

    await service.close()

    client.close.assert_awaited_once()
    assert service._client is None

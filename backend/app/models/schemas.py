import base64
import mimetypes
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Extraction contract
# ---------------------------------------------------------------------------

class ExtractionPayload(BaseModel):
    """Shape the reasoning service must emit for one document.

    ``id`` and ``file_name`` are not part of the contract; they are attached
    locally once the payload has been validated.
    """

    sender: str = Field(description="Name of the person or entity who sent the document.")
    recipient: str = Field(description="Name of the person or entity who received the document.")
    date: str = Field(default="", description="Date of the document if available.")
    summary: str = Field(description="A brief 2-sentence summary of the document.")
    content: str = Field(description="Complete extracted text content of the document.")
    topics: List[str] = Field(default_factory=list, description="List of key topics mentioned.")
    confidence: float = Field(default=0.0, description="Confidence score 0-1 for the extraction accuracy.")

    @field_validator("sender", "recipient", "date", mode="before")
    @classmethod
    def _null_text_is_unknown(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("topics", mode="before")
    @classmethod
    def _null_topics_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("confidence", mode="before")
    @classmethod
    def _null_confidence_is_zero(cls, v: Any) -> Any:
        return 0.0 if v is None else v

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, v: float) -> float:
        # advisory only: out-of-range scores are pulled into [0, 1], never rejected
        return min(1.0, max(0.0, v))


REQUIRED_FIELDS = ("sender", "recipient", "content", "summary")


def extraction_schema() -> Dict[str, Any]:
    """JSON schema handed to the service as its structured-output constraint."""
    schema = ExtractionPayload.model_json_schema()
    schema["required"] = list(REQUIRED_FIELDS)
    return schema


class ExtractedDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    file_name: str
    sender: str = ""
    recipient: str = ""
    date: str = ""
    summary: str
    content: str
    topics: List[str] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    @classmethod
    def from_payload(cls, file_name: str, payload: ExtractionPayload) -> "ExtractedDocument":
        return cls(id=uuid.uuid4().hex, file_name=file_name, **payload.model_dump())


# ---------------------------------------------------------------------------
# Raw inputs
# ---------------------------------------------------------------------------

DEFAULT_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class RawDocument:
    file_name: str
    data: bytes
    content_type: Optional[str] = None

    def mime_type(self) -> str:
        if self.content_type and self.content_type != "application/octet-stream":
            return self.content_type
        guessed, _ = mimetypes.guess_type(self.file_name)
        return guessed or DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class EncodedDocument:
    file_name: str
    mime_type: str
    data: str  # base64

    @classmethod
    def from_raw(cls, raw: RawDocument) -> "EncodedDocument":
        return cls(
            file_name=raw.file_name,
            mime_type=raw.mime_type(),
            data=base64.b64encode(raw.data).decode("ascii"),
        )


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------

class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ConversationTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    text: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Batch state
# ---------------------------------------------------------------------------

class ProcessStatus(str, Enum):
    IDLE = "IDLE"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class BatchProgress(BaseModel):
    current: int
    total: int


class BatchFailure(BaseModel):
    file_name: str
    reason: str


class BatchState(BaseModel):
    status: ProcessStatus = ProcessStatus.IDLE
    current: int = 0
    total: int = 0
    success_count: int = 0
    failures: List[BatchFailure] = Field(default_factory=list)

    @property
    def progress(self) -> BatchProgress:
        return BatchProgress(current=self.current, total=self.total)


# ---------------------------------------------------------------------------
# API payloads
# ---------------------------------------------------------------------------

class IngestResponse(BaseModel):
    documents: List[ExtractedDocument]
    total: int
    succeeded: int
    failed: List[BatchFailure] = []
    status: ProcessStatus

class DeleteResponse(BaseModel):
    deleted: bool

class CancelResponse(BaseModel):
    cancelled: bool

class QARequest(BaseModel):
    question: str = Field(min_length=1)

class QAResponse(BaseModel):
    answer: str

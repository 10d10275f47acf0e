"""
In-memory session state: the corpus of extracted documents and the
conversation history. Nothing here is persisted; both live as long as the
process does.
"""
from __future__ import annotations
import threading
from collections import OrderedDict
from typing import Iterable, List, Optional, Protocol

from autogen_core import CancellationToken

from backend.app.models.schemas import BatchState, ConversationTurn, ExtractedDocument, Role
from backend.app.services.exceptions import BatchInProgressError


class Corpus:
    """Ordered collection of extracted documents keyed by id."""

    def __init__(self):
        self._docs: "OrderedDict[str, ExtractedDocument]" = OrderedDict()
        self._lock = threading.RLock()

    def extend(self, docs: Iterable[ExtractedDocument]) -> None:
        docs = list(docs)
        with self._lock:
            ids = [d.id for d in docs]
            clash = [i for i in ids if i in self._docs]
            if clash or len(set(ids)) != len(ids):
                raise ValueError(f"Duplicate document ids in batch: {clash or ids}")
            for d in docs:
                self._docs[d.id] = d

    def delete(self, doc_id: str) -> bool:
        with self._lock:
            return self._docs.pop(doc_id, None) is not None

    def get(self, doc_id: str) -> Optional[ExtractedDocument]:
        with self._lock:
            return self._docs.get(doc_id)

    def all(self) -> List[ExtractedDocument]:
        with self._lock:
            return list(self._docs.values())

    def search(self, term: Optional[str]) -> List[ExtractedDocument]:
        """Case-insensitive match on file name, sender or content."""
        docs = self.all()
        if not term:
            return docs
        needle = term.lower()
        return [
            d for d in docs
            if needle in d.file_name.lower() or needle in d.sender.lower() or needle in d.content.lower()
        ]

    def __len__(self) -> int:
        return len(self._docs)


class ConversationHistory:
    """Append-only list of conversation turns."""

    def __init__(self):
        self._turns: List[ConversationTurn] = []
        self._lock = threading.RLock()

    def append(self, role: Role, text: str) -> ConversationTurn:
        turn = ConversationTurn(role=role, text=text)
        with self._lock:
            self._turns.append(turn)
        return turn

    def turns(self) -> List[ConversationTurn]:
        with self._lock:
            return list(self._turns)

    def clear(self) -> None:
        with self._lock:
            self._turns.clear()

    def __len__(self) -> int:
        return len(self._turns)


class BatchStateSource(Protocol):
    @property
    def state(self) -> BatchState: ...


class DocumentSession:
    """Owns the corpus, the conversation and the batch currently running."""

    def __init__(self):
        self.corpus = Corpus()
        self.history = ConversationHistory()
        self.last_batch = BatchState()
        self._active_batch: Optional[BatchStateSource] = None
        self._active_token: Optional[CancellationToken] = None
        self._lock = threading.Lock()

    @property
    def is_processing(self) -> bool:
        return self._active_token is not None

    def batch_state(self) -> BatchState:
        with self._lock:
            if self._active_batch is not None:
                return self._active_batch.state
            return self.last_batch

    def begin_batch(self, batch: BatchStateSource) -> CancellationToken:
        with self._lock:
            if self._active_token is not None:
                raise BatchInProgressError("A batch is already being processed")
            self._active_batch = batch
            self._active_token = CancellationToken()
            return self._active_token

    def end_batch(self) -> None:
        with self._lock:
            if self._active_batch is not None:
                self.last_batch = self._active_batch.state
            self._active_batch = None
            self._active_token = None

    def cancel_batch(self) -> bool:
        with self._lock:
            if self._active_token is None:
                return False
            self._active_token.cancel()
            return True


session = DocumentSession()

from typing import List
from fastapi import APIRouter, HTTPException
from backend.app.models.schemas import ConversationTurn, QARequest, QAResponse
from backend.app.services.exceptions import InterrogationError
from backend.app.services.orchestrator import answer_question, conversation, reset_conversation

router = APIRouter()

@router.post("/qa", response_model=QAResponse)
async def qa(payload: QARequest):
    try:
        answer = await answer_question(payload.question)
    except InterrogationError as e:
        raise HTTPException(502, f"Could not answer the question: {e}")
    return QAResponse(answer=answer)

@router.get("/qa/history", response_model=List[ConversationTurn])
async def history():
    return conversation()

@router.delete("/qa/history")
async def clear_history():
    reset_conversation()
    return {"ok": True}

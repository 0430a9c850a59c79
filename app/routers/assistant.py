# =============================================================================
# app/routers/assistant.py - AI Assistant Endpoints
# =============================================================================
# /assistant/chat is open to anonymous visitors (landing page widget).
# An unavailable assistant is reported with 502 and a readable reply.
# =============================================================================

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.dependencies import AssistantServiceDep, QuizServiceDep
from core.models.assistant import (
    ChatRequest,
    ChatResponse,
    QuizScoreRequest,
    QuizScoreResponse,
)

router = APIRouter()


@router.post("/assistant/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, assistant: AssistantServiceDep):
    """
    Ask the Indus Skylab assistant a question.

    Example:
        POST /assistant/chat {"message": "Which subjects does the curriculum cover?"}
    """
    result = assistant.generate_reply(request.message)
    if not result.available:
        return JSONResponse(status_code=502, content=result.model_dump())
    return result


@router.post("/assistant/quiz/score", response_model=QuizScoreResponse)
async def score_quiz(request: QuizScoreRequest, quizzes: QuizServiceDep):
    """Score a finished quiz; selections map question index to A-D."""
    return quizzes.score(request)

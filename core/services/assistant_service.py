# =============================================================================
# core/services/assistant_service.py - AI Assistant & Module Quizzes
# =============================================================================
# AssistantService wraps one OpenAI chat completion with a fixed Indus Skylab
# persona. It never raises: failures come back as a ChatResponse with
# available=False and an "Assistant unavailable: ..." reply.
#
# QuizService builds an MCQ prompt from a curriculum module, sends it through
# the assistant and parses the reply with lib.quiz_parser.
# =============================================================================

import logging
from typing import Any

from openai import APIError, OpenAI

from app.config import settings
from core.models.assistant import (
    ChatResponse,
    QuizQuestionModel,
    QuizResponse,
    QuizScoreRequest,
    QuizScoreResponse,
)
from core.models.curriculum import code_snippet_from_assets, parse_assets
from lib.quiz_parser import parse_quiz, score_quiz

logger = logging.getLogger(__name__)

UNAVAILABLE_PREFIX = "Assistant unavailable: "
EMPTY_REPLY = "Assistant is available but no reply was generated."
QUIZ_PARSE_FAILED = "Unable to parse quiz. Please retry."

SYSTEM_PROMPT = (
    "You are an AI assistant for Indus Skylab, an educational platform providing structured, "
    "school-focused drone curriculum for grades 9-12. "
    "Explain the platform to students, parents, and educators with a focus on what students learn "
    "and why drones matter in modern education. "
    "Indus Skylab offers subject-aligned drone curriculum that complements Computer Science, Physics, "
    "Mathematics, Design Technology, and Environmental Systems and Societies. "
    "The curriculum is not hobby-based; it is academic, hands-on, and grounded in real-world "
    "applications across industries (agriculture, disaster management, logistics, environmental "
    "monitoring, infrastructure inspection, defense, smart cities). "
    "Emphasize that learning drones blends programming, electronics, mechanics, and data analysis, "
    "making abstract classroom concepts tangible. "
    "Students learn via hands-on Python programming, step-by-step curriculum manuals, optional "
    "instructional videos, and real-world drone activities that connect theory to practice. "
    "They receive: step-by-step Python code to control drone behavior; downloadable manuals "
    "explaining concepts, objectives, theory, and applications; optional videos; real-world "
    "activities aligned to school outcomes; exposure to problem-solving, automation, sensing, "
    "navigation, and systems thinking. "
    "Students can view and download published materials but cannot modify content, ensuring "
    "structured learning. "
    "Learning outcomes include strong programming foundations, applying physics and math through "
    "experiments, logical thinking/debugging, engineering mindset, early STEM exposure, and "
    "connecting classroom knowledge to real-world systems. "
    "Platform usage: students log in, pick grade/subject/activity, and access curated materials to "
    "learn at their own pace using downloads. "
    "Maintain a friendly, professional, educational tone. Avoid backend/system details."
)

# Lazy-loaded OpenAI client
_client = None


def get_openai_client() -> OpenAI:
    """Get or create OpenAI client (lazy initialization)."""
    global _client
    if _client is None:
        _client = OpenAI(api_key=settings.OPENAI_API_KEY)
    return _client


class AssistantService:
    """
    Single-turn chat with the Indus Skylab persona.

    Args:
        client: OpenAI client (defaults to the shared lazy client)
        api_key: Overrides settings.OPENAI_API_KEY for the availability check
        model: Chat model (default: settings.OPENAI_MODEL)
    """

    def __init__(self, client: OpenAI | None = None, api_key: str | None = None, model: str | None = None):
        self._client = client
        self.api_key = settings.OPENAI_API_KEY if api_key is None else api_key
        self.model = model or settings.OPENAI_MODEL

    @property
    def configured(self) -> bool:
        return self._client is not None or bool(self.api_key)

    def generate_reply(self, message: str) -> ChatResponse:
        """
        Send `message` after the system persona and return the first choice.

        Returns:
            ChatResponse; `available` is False when no reply could be obtained
        """
        if not self.configured:
            return ChatResponse(reply=f"{UNAVAILABLE_PREFIX}missing OpenAI key.", available=False)

        client = self._client or get_openai_client()
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": message},
                ],
                temperature=settings.OPENAI_TEMPERATURE,
            )
        except APIError as e:
            logger.warning(f"OpenAI API call failed: {e}")
            detail = getattr(e, "message", None) or "Failed to contact OpenAI"
            return ChatResponse(reply=f"{UNAVAILABLE_PREFIX}{detail}", available=False)
        except Exception as e:
            logger.error(f"Unexpected assistant error: {e}")
            return ChatResponse(reply=f"{UNAVAILABLE_PREFIX}unexpected error.", available=False)

        content = None
        if response.choices:
            content = response.choices[0].message.content
        return ChatResponse(reply=content or EMPTY_REPLY)


def build_quiz_prompt(module: dict[str, Any], code_max_chars: int | None = None) -> str:
    """
    Build the MCQ prompt for one curriculum module row.

    The module's inline code snippet (if any) is included, trimmed to
    `code_max_chars` characters.
    """
    limit = settings.QUIZ_CODE_MAX_CHARS if code_max_chars is None else code_max_chars
    code = (code_snippet_from_assets(parse_assets(module.get("asset_urls"))) or "")[:limit]

    return "\n".join([
        "You are creating a short MCQ quiz for a student who just viewed this drone activity.",
        f"Title: {module.get('title') or ''}",
        f"Grade: {module.get('grade') or ''}",
        f"Subject: {module.get('subject') or ''}",
        f"Description: {module.get('description') or ''}",
        f"Code (trimmed):\n{code}" if code else "No code snippet available.",
        "",
        "Create 5 multiple-choice questions (A-D) that test understanding of the activity. "
        "Keep them concise and specific to this activity.",
        "Return in this markdown format:",
        "Q1. <question>",
        "A) ...",
        "B) ...",
        "C) ...",
        "D) ...",
        "Answer: <letter>",
        "",
        "Repeat for Q2-Q5. Do not add explanations.",
    ])


class QuizService:
    """Generates and scores per-module MCQ quizzes."""

    def __init__(self, assistant: AssistantService):
        self.assistant = assistant

    def generate_quiz(self, module: dict[str, Any]) -> QuizResponse:
        """
        Ask the assistant for a quiz about `module` and parse the reply.

        Never raises for assistant or parsing failures; `status` carries the
        message to show instead.
        """
        module_id = str(module.get("id"))
        result = self.assistant.generate_reply(build_quiz_prompt(module))

        if not result.available:
            return QuizResponse(
                module_id=module_id,
                status=result.reply,
                time_limit_seconds=settings.QUIZ_TIME_LIMIT_SECONDS,
            )

        questions = parse_quiz(result.reply, max_questions=settings.QUIZ_MAX_QUESTIONS)
        if not questions:
            logger.info(f"Quiz reply for module {module_id} could not be parsed")

        return QuizResponse(
            module_id=module_id,
            questions=[QuizQuestionModel.model_validate(q, from_attributes=True) for q in questions],
            status=None if questions else QUIZ_PARSE_FAILED,
            raw_text=result.reply,
            time_limit_seconds=settings.QUIZ_TIME_LIMIT_SECONDS,
        )

    def score(self, request: QuizScoreRequest) -> QuizScoreResponse:
        questions = [q.to_parsed() for q in request.questions]
        answered = sum(1 for index in request.selections if 0 <= index < len(questions))
        return QuizScoreResponse(
            score=score_quiz(questions, request.selections),
            total=len(questions),
            answered=answered,
        )

# =============================================================================
# tests/test_assistant_service.py - Assistant & Quiz Service Tests
# =============================================================================
# OpenAI is mocked throughout; no API calls are made.
# =============================================================================

from unittest.mock import MagicMock

import httpx
import pytest
from openai import APIConnectionError

from core.models.assistant import QuizQuestionModel, QuizScoreRequest
from core.services.assistant_service import (
    EMPTY_REPLY,
    QUIZ_PARSE_FAILED,
    SYSTEM_PROMPT,
    AssistantService,
    QuizService,
    build_quiz_prompt,
)
from lib.codec import encode_inline_text

QUIZ_REPLY = """Q1. What sensor measures rotation rate?
A) Barometer
B) Gyroscope
C) GPS
D) Camera
Answer: B

Q2. What does PID stand for?
A) Proportional Integral Derivative
B) Power In Drone
C) Pitch Inclination Degree
D) None of these
Answer: A
"""


def mock_client(content=None, error=None):
    client = MagicMock()
    if error is not None:
        client.chat.completions.create.side_effect = error
    else:
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = content
        client.chat.completions.create.return_value = response
    return client


@pytest.fixture
def module_row():
    return {
        "id": "9b1deb4d-3b7d-4bad-9bdd-2b0d7b3dcb6d",
        "title": "Hover Basics",
        "grade": "Grade 9",
        "subject": "Physics",
        "description": "Hold altitude with a barometer.",
        "asset_urls": [
            {"type": "video", "url": "https://example.com/v.mp4", "label": "Intro"},
            {"type": "code", "url": encode_inline_text("drone.hover(1.5)"), "label": "hover.py"},
        ],
    }


class TestGenerateReply:
    def test_sends_persona_and_message(self):
        client = mock_client("Drones teach physics.")
        service = AssistantService(client=client, model="gpt-4o-mini")

        result = service.generate_reply("Why drones?")

        assert result.reply == "Drones teach physics."
        assert result.available is True
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert kwargs["messages"][1] == {"role": "user", "content": "Why drones?"}

    def test_persona_covers_materials_and_outcomes(self):
        assert (
            "They receive: step-by-step Python code to control drone behavior; downloadable manuals "
            "explaining concepts, objectives, theory, and applications;" in SYSTEM_PROMPT
        )
        assert "Learning outcomes include strong programming foundations," in SYSTEM_PROMPT
        assert SYSTEM_PROMPT.index("They receive:") < SYSTEM_PROMPT.index("Students can view")
        assert SYSTEM_PROMPT.index("Learning outcomes") < SYSTEM_PROMPT.index("Platform usage:")

    def test_missing_key_is_unavailable(self):
        result = AssistantService(api_key="").generate_reply("hello")

        assert result.available is False
        assert result.reply.startswith("Assistant unavailable:")

    def test_api_error_is_unavailable_not_raised(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client = mock_client(error=APIConnectionError(request=request))

        result = AssistantService(client=client).generate_reply("hello")

        assert result.available is False
        assert result.reply.startswith("Assistant unavailable: ")

    def test_unexpected_error_is_unavailable(self):
        client = mock_client(error=RuntimeError("boom"))
        result = AssistantService(client=client).generate_reply("hello")
        assert result.reply == "Assistant unavailable: unexpected error."

    def test_empty_reply_placeholder(self):
        result = AssistantService(client=mock_client(None)).generate_reply("hello")
        assert result.reply == EMPTY_REPLY
        assert result.available is True


class TestQuizPrompt:
    def test_includes_module_context_and_code(self, module_row):
        prompt = build_quiz_prompt(module_row)

        assert "Title: Hover Basics" in prompt
        assert "Grade: Grade 9" in prompt
        assert "Code (trimmed):\ndrone.hover(1.5)" in prompt
        assert "Answer: <letter>" in prompt

    def test_code_is_trimmed(self, module_row):
        module_row["asset_urls"] = [{"type": "code", "url": encode_inline_text("x" * 5000)}]
        prompt = build_quiz_prompt(module_row, code_max_chars=100)
        assert "x" * 100 in prompt
        assert "x" * 101 not in prompt

    def test_without_code(self, module_row):
        module_row["asset_urls"] = []
        assert "No code snippet available." in build_quiz_prompt(module_row)


class TestQuizService:
    def test_generates_parsed_questions(self, module_row):
        quizzes = QuizService(AssistantService(client=mock_client(QUIZ_REPLY)))

        quiz = quizzes.generate_quiz(module_row)

        assert quiz.module_id == module_row["id"]
        assert quiz.status is None
        assert [q.answer for q in quiz.questions] == ["B", "A"]
        assert quiz.questions[0].options[1].text == "Gyroscope"

    def test_unparseable_reply(self, module_row):
        quizzes = QuizService(AssistantService(client=mock_client("Sorry, I can't do that.")))

        quiz = quizzes.generate_quiz(module_row)

        assert quiz.questions == []
        assert quiz.status == QUIZ_PARSE_FAILED
        assert quiz.raw_text == "Sorry, I can't do that."

    def test_unavailable_assistant(self, module_row):
        quizzes = QuizService(AssistantService(api_key=""))
        quiz = quizzes.generate_quiz(module_row)
        assert quiz.questions == []
        assert quiz.status.startswith("Assistant unavailable:")

    def test_score(self, module_row):
        quizzes = QuizService(AssistantService(client=mock_client(QUIZ_REPLY)))
        quiz = quizzes.generate_quiz(module_row)

        result = quizzes.score(QuizScoreRequest(questions=quiz.questions, selections={0: "B", 1: "C"}))

        assert (result.score, result.total, result.answered) == (1, 2, 2)

    def test_score_ignores_out_of_range_selections(self):
        question = QuizQuestionModel(
            question="?",
            options=[{"label": label, "text": label} for label in "ABCD"],
            answer="D",
        )
        result = QuizService(AssistantService(api_key="")).score(
            QuizScoreRequest(questions=[question], selections={0: "d", 7: "A"})
        )
        assert (result.score, result.total, result.answered) == (1, 1, 1)

# =============================================================================
# core/models/assistant.py - AI Assistant & Quiz Schemas
# =============================================================================
# - ChatRequest / ChatResponse: the chat pass-through
# - QuizQuestionModel / QuizResponse: MCQ quizzes generated for a module
# - QuizScoreRequest / QuizScoreResponse: grading a finished quiz
# =============================================================================

from pydantic import BaseModel, Field

from lib.quiz_parser import QuizQuestion, QuizOption


class ChatRequest(BaseModel):
    """
    Example:
        {"message": "What will my students learn in Grade 9 Physics?"}
    """

    message: str = Field(..., min_length=1, max_length=8000)


class ChatResponse(BaseModel):
    """
    Assistant reply.

    When the upstream model cannot be reached, `available` is false and
    `reply` holds a readable "Assistant unavailable: ..." message.
    """

    reply: str
    available: bool = True


class QuizOptionModel(BaseModel):
    label: str = Field(..., pattern=r"^[A-D]$")
    text: str

    model_config = {"from_attributes": True}


class QuizQuestionModel(BaseModel):
    question: str
    options: list[QuizOptionModel] = Field(..., min_length=4, max_length=4)
    answer: str = Field(..., pattern=r"^[A-D]$")

    model_config = {"from_attributes": True}

    def to_parsed(self) -> QuizQuestion:
        return QuizQuestion(
            question=self.question,
            options=[QuizOption(label=o.label, text=o.text) for o in self.options],
            answer=self.answer,
        )


class QuizResponse(BaseModel):
    """
    Generated quiz for one curriculum module.

    `questions` is empty when generation failed; `status` then explains why.
    """

    module_id: str
    questions: list[QuizQuestionModel] = Field(default_factory=list)
    status: str | None = None
    raw_text: str | None = Field(
        default=None,
        description="Unparsed assistant reply, for display when parsing failed"
    )
    time_limit_seconds: int = 300


class QuizScoreRequest(BaseModel):
    questions: list[QuizQuestionModel]
    # Question index -> chosen label
    selections: dict[int, str] = Field(default_factory=dict)


class QuizScoreResponse(BaseModel):
    score: int
    total: int
    answered: int

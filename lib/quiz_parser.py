# =============================================================================
# lib/quiz_parser.py - Multiple-Choice Quiz Parsing
# =============================================================================
# Turns the assistant's free-form quiz reply into structured questions.
#
# Expected (loose) template per question:
#
#   Q1. <question>
#   A) ...
#   B) ...
#   C) ...
#   D) ...
#   Answer: <letter>
#
# Blocks without four labelled options or a recognizable answer letter are
# dropped silently. Source order is preserved.
# =============================================================================

from __future__ import annotations

import re
from dataclasses import dataclass, field

DEFAULT_MAX_QUESTIONS = 5
OPTION_COUNT = 4

_BLOCK_SPLIT_RE = re.compile(r"Q\d+\.", re.IGNORECASE)
_OPTION_RE = re.compile(r"^([A-D])[).]\s*", re.IGNORECASE)
_ANSWER_RE = re.compile(r"Answer:\s*([A-D])", re.IGNORECASE)


@dataclass(frozen=True)
class QuizOption:
    """One labelled answer choice (label is always upper-case A-D)."""

    label: str
    text: str


@dataclass(frozen=True)
class QuizQuestion:
    """A parsed multiple-choice question."""

    question: str
    options: list[QuizOption] = field(default_factory=list)
    answer: str = ""


def _parse_block(block: str) -> QuizQuestion | None:
    lines = [line.strip() for line in block.strip().splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return None

    question = lines[0]
    options = []
    for line in lines[1:]:
        match = _OPTION_RE.match(line)
        if match:
            options.append(QuizOption(label=match.group(1).upper(), text=line[match.end():]))
    options = options[:OPTION_COUNT]

    answer = ""
    for line in lines:
        match = _ANSWER_RE.search(line)
        if match:
            answer = match.group(1).upper()
            break

    if not question or len(options) != OPTION_COUNT or not answer:
        return None
    return QuizQuestion(question=question, options=options, answer=answer)


def parse_quiz(text: str | None, max_questions: int = DEFAULT_MAX_QUESTIONS) -> list[QuizQuestion]:
    """
    Extract up to `max_questions` well-formed questions from quiz text.

    Args:
        text: Raw reply text (None or empty yields no questions)
        max_questions: Cap on the number of questions returned

    Returns:
        Parsed questions in the order they appear
    """
    if not text or max_questions <= 0:
        return []

    questions: list[QuizQuestion] = []
    for block in _BLOCK_SPLIT_RE.split(text):
        parsed = _parse_block(block)
        if parsed is not None:
            questions.append(parsed)
    return questions[:max_questions]


def score_quiz(questions: list[QuizQuestion], selections: dict[int, str]) -> int:
    """
    Count correct selections.

    `selections` maps a question index to the chosen label; unanswered
    questions simply score nothing.
    """
    score = 0
    for index, question in enumerate(questions):
        chosen = selections.get(index)
        if chosen is not None and chosen.strip().upper() == question.answer:
            score += 1
    return score
